"""
Normalisation des valeurs brutes des sondes natives

Ces fonctions convertissent les représentations natives (unités de
mémoire, unités de fréquence, chaînes brutes, tags plateforme) vers les
unités et formes canoniques du modèle de données.

Aucune fonction ne lève d'exception : une valeur inconvertible donne None.
"""

import math
import re
from typing import Any, Optional

from ..models import Architecture, OsFamily

# Multiplicateurs binaires pour les unités mémoire
_BYTE_UNITS = {
    'b': 1,
    'bytes': 1,
    'kb': 1024,
    'kib': 1024,
    'mb': 1024 ** 2,
    'mib': 1024 ** 2,
    'gb': 1024 ** 3,
    'gib': 1024 ** 3,
    'tb': 1024 ** 4,
    'tib': 1024 ** 4,
}

# Multiplicateurs vers le MHz
_FREQUENCY_UNITS = {
    'hz': 1e-6,
    'khz': 1e-3,
    'mhz': 1.0,
    'ghz': 1e3,
}

# Au-delà, la valeur n'est plus plausible (64 PiB de RAM, 100 GHz)
_MAX_PLAUSIBLE_BYTES = 64 * 1024 ** 5
_MAX_PLAUSIBLE_MHZ = 100_000.0

_ARCHITECTURE_EXACT = {
    'x86_64': Architecture.X86_64,
    'amd64': Architecture.X86_64,
    'x64': Architecture.X86_64,
    'em64t': Architecture.X86_64,
    'intel64': Architecture.X86_64,
    'x86': Architecture.X86,
    'i86pc': Architecture.X86,
    'arm64': Architecture.ARM64,
    'aarch64': Architecture.ARM64,
    'arm64e': Architecture.ARM64,
    'armv8l': Architecture.ARM,
    'arm': Architecture.ARM,
    'ppc64le': Architecture.PPC64LE,
    'ppc64': Architecture.PPC64,
    's390x': Architecture.S390X,
    'riscv64': Architecture.RISCV64,
}

# Ordre significatif : préfixes les plus longs d'abord
_ARCHITECTURE_PREFIXES = (
    ('aarch64', Architecture.ARM64),
    ('armv8', Architecture.ARM64),
    ('arm64', Architecture.ARM64),
    ('armv', Architecture.ARM),
    ('arm', Architecture.ARM),
    ('ppc64le', Architecture.PPC64LE),
    ('ppc64', Architecture.PPC64),
    ('riscv64', Architecture.RISCV64),
    ('x86_64', Architecture.X86_64),
    ('i386', Architecture.X86),
    ('i486', Architecture.X86),
    ('i586', Architecture.X86),
    ('i686', Architecture.X86),
)

_OS_FAMILY_EXACT = {
    'linux': OsFamily.LINUX,
    'linux2': OsFamily.LINUX,
    'darwin': OsFamily.MACOS,
    'macos': OsFamily.MACOS,
    'mac os x': OsFamily.MACOS,
    'osx': OsFamily.MACOS,
    'windows': OsFamily.WINDOWS,
    'win32': OsFamily.WINDOWS,
    'windows_nt': OsFamily.WINDOWS,
    'freebsd': OsFamily.FREEBSD,
}

_OS_FAMILY_PREFIXES = (
    ('linux', OsFamily.LINUX),
    ('darwin', OsFamily.MACOS),
    ('microsoft windows', OsFamily.WINDOWS),
    ('windows', OsFamily.WINDOWS),
    ('freebsd', OsFamily.FREEBSD),
)

# Mots-clés -> nom court du fabricant, testés dans l'ordre
_VENDOR_KEYWORDS = (
    ('genuineintel', 'Intel'),
    ('authenticamd', 'AMD'),
    ('hygongenuine', 'Hygon'),
    ('centaurhauls', 'Centaur'),
    ('nvidia', 'NVIDIA'),
    ('advanced micro devices', 'AMD'),
    ('amd', 'AMD'),
    ('ati technologies', 'AMD'),
    ('intel', 'Intel'),
    ('apple', 'Apple'),
    ('qualcomm', 'Qualcomm'),
    ('vmware', 'VMware'),
    ('red hat', 'Red Hat'),
    ('microsoft', 'Microsoft'),
    ('matrox', 'Matrox'),
    ('aspeed', 'ASPEED'),
)


def normalize_string(raw: Any) -> Optional[str]:
    """
    Nettoie une chaîne brute

    Supprime les espaces en début/fin, les caractères de contrôle et
    les espaces multiples. Une chaîne vide devient None.
    """
    if raw is None:
        return None

    if isinstance(raw, bytes):
        raw = raw.decode('utf-8', errors='replace')

    # Les blancs (tabulations, retours) sont gardés pour être fusionnés
    value = ''.join(char for char in str(raw) if char.isprintable() or char.isspace())
    value = re.sub(r'\s+', ' ', value).strip()

    return value or None


def normalize_count(raw: Any) -> Optional[int]:
    """Nombre entier positif (cœurs, unités de calcul), None sinon"""
    if raw is None or isinstance(raw, bool):
        return None

    try:
        value = int(str(raw).strip()) if not isinstance(raw, int) else raw
    except (TypeError, ValueError):
        return None

    return value if value > 0 else None


def _to_number(raw: Any):
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return raw if math.isfinite(raw) else None

    text = str(raw).strip().replace(',', '')
    try:
        return int(text)
    except ValueError:
        pass

    try:
        value = float(text)
    except ValueError:
        return None

    return value if math.isfinite(value) else None


def normalize_bytes(raw: Any, unit: str = 'B', page_size: Optional[int] = None,
                   allow_zero: bool = False) -> Optional[int]:
    """
    Convertit une quantité mémoire native en octets

    Args:
        raw: Valeur brute (entier ou chaîne)
        unit: Unité native ('B', 'kB', 'MiB', 'GB', ... ou 'pages')
        page_size: Taille de page en octets, obligatoire pour 'pages'
        allow_zero: Accepte 0 (mémoire disponible épuisée)

    Returns:
        int: Nombre d'octets, ou None si négatif, implausible ou nul (sauf allow_zero)
    """
    value = _to_number(raw)
    if value is None:
        return None

    unit_key = (unit or 'B').strip().lower()
    if unit_key == 'pages':
        multiplier = normalize_count(page_size)
        if multiplier is None:
            return None
    else:
        multiplier = _BYTE_UNITS.get(unit_key)
        if multiplier is None:
            return None

    total = int(value * multiplier)
    if total < 0 or total > _MAX_PLAUSIBLE_BYTES:
        return None
    if total == 0 and not allow_zero:
        return None

    return total


def normalize_frequency(raw: Any, unit: str = 'MHz') -> Optional[float]:
    """
    Convertit une fréquence native en MHz

    Accepte les sources en Hz, kHz, MHz ou GHz. Le résultat est arrondi
    au dixième de MHz.
    """
    value = _to_number(raw)
    if value is None:
        return None

    multiplier = _FREQUENCY_UNITS.get((unit or 'MHz').strip().lower())
    if multiplier is None:
        return None

    mhz = round(value * multiplier, 1)
    if mhz <= 0 or mhz > _MAX_PLAUSIBLE_MHZ:
        return None

    return mhz


def normalize_architecture(raw: Any) -> Architecture:
    """Tag d'architecture canonique, Architecture.UNKNOWN si non reconnu"""
    value = normalize_string(raw)
    if not value:
        return Architecture.UNKNOWN

    key = value.lower()
    if key in _ARCHITECTURE_EXACT:
        return _ARCHITECTURE_EXACT[key]

    for prefix, architecture in _ARCHITECTURE_PREFIXES:
        if key.startswith(prefix):
            return architecture

    return Architecture.UNKNOWN


def normalize_os_family(raw: Any) -> OsFamily:
    """Tag de famille d'OS canonique, OsFamily.UNKNOWN si non reconnu"""
    value = normalize_string(raw)
    if not value:
        return OsFamily.UNKNOWN

    key = value.lower()
    if key in _OS_FAMILY_EXACT:
        return _OS_FAMILY_EXACT[key]

    for prefix, family in _OS_FAMILY_PREFIXES:
        if key.startswith(prefix):
            return family

    return OsFamily.UNKNOWN


def normalize_vendor(raw: Any) -> Optional[str]:
    """
    Nom court du fabricant

    Les libellés connus (identifiants CPUID, raisons sociales PCI,
    tags system_profiler) sont ramenés à un nom court ; les autres
    sont renvoyés nettoyés.
    """
    value = normalize_string(raw)
    if not value:
        return None

    # system_profiler : "sppci_vendor_Apple"
    if value.lower().startswith('sppci_vendor_'):
        value = value[len('sppci_vendor_'):].replace('_', ' ').strip()
        if not value:
            return None

    lowered = value.lower()
    for keyword, vendor in _VENDOR_KEYWORDS:
        if keyword == 'amd':
            if re.search(r'\bamd\b', lowered):
                return vendor
        elif keyword in lowered:
            return vendor

    return value
