"""
Sonde native Linux

Ce module utilise les interfaces Linux spécifiques :
- Système de fichiers /proc et /sys
- /etc/os-release pour la distribution
- nvidia-smi et lspci pour les adaptateurs graphiques
"""

import re
import shutil
from typing import Any, Dict, List, Optional

from .base import Measurement, NativeProbe
from ...exceptions import ProbeError

# Identifiants "CPU implementer" des processeurs ARM
ARM_IMPLEMENTERS = {
    '0x41': 'ARM',
    '0x42': 'Broadcom',
    '0x43': 'Cavium',
    '0x48': 'HiSilicon',
    '0x4e': 'NVIDIA',
    '0x50': 'Ampere',
    '0x51': 'Qualcomm',
    '0x53': 'Samsung',
    '0x61': 'Apple',
    '0x63': 'Arm China',
    '0xc0': 'Ampere',
}

# Raisons sociales PCI reconnues en tête de description lspci
LSPCI_VENDORS = (
    'NVIDIA Corporation',
    'Advanced Micro Devices, Inc. [AMD/ATI]',
    'Advanced Micro Devices, Inc. [AMD]',
    'Intel Corporation',
    'VMware',
    'Red Hat, Inc.',
    'Matrox Electronics Systems Ltd.',
    'ASPEED Technology, Inc.',
    'Microsoft Corporation',
    'Cirrus Logic',
    'InnoTek Systemberatung GmbH',
)

LSPCI_DISPLAY_LINE = re.compile(
    r'^(?P<slot>\S+)\s+(?:VGA compatible controller|3D controller|Display controller)'
    r'(?:\s+\[[0-9a-fA-F]+\])?:\s+(?P<description>.+)$'
)

NVIDIA_SMI_QUERY = "nvidia-smi --query-gpu=name,memory.total --format=csv,noheader,nounits"


class LinuxProbe(NativeProbe):
    """
    Sonde spécifique pour Linux

    Lit /proc, /sys et /etc/os-release ; se replie sur psutil quand
    les fichiers attendus sont absents.
    """

    platform_name = "linux"

    cpuinfo_path = '/proc/cpuinfo'
    meminfo_path = '/proc/meminfo'
    cpufreq_dir = '/sys/devices/system/cpu/cpu0/cpufreq'
    os_release_paths = ('/etc/os-release', '/usr/lib/os-release')

    # --- CPU -------------------------------------------------------------

    def _cpuinfo(self) -> Dict[str, str]:
        """
        Parse le premier bloc de /proc/cpuinfo

        Certaines clés (Hardware, Model sur ARM) n'apparaissent qu'en fin
        de fichier : la première occurrence de chaque clé est conservée.
        """
        content = self._read_file(self.cpuinfo_path)
        if content is None:
            return {}

        cpu_data = {}
        for line in content.split('\n'):
            if ':' in line:
                key, value = line.split(':', 1)
                cpu_data.setdefault(key.strip(), value.strip())

        return cpu_data

    def cpu_vendor(self) -> Optional[str]:
        cpu_data = self._cpuinfo()

        if 'vendor_id' in cpu_data:
            return cpu_data['vendor_id']

        implementer = cpu_data.get('CPU implementer')
        if implementer:
            return ARM_IMPLEMENTERS.get(implementer.lower(), implementer)

        return None

    def cpu_model(self) -> Optional[str]:
        cpu_data = self._cpuinfo()

        for key in ('model name', 'Model', 'Hardware', 'cpu model', 'cpu'):
            if cpu_data.get(key):
                return cpu_data[key]

        return None

    def cpu_frequency(self) -> Optional[Measurement]:
        """
        Fréquence de base via cpufreq (kHz), puis psutil, puis /proc/cpuinfo
        """
        for file_name in ('base_frequency', 'cpuinfo_max_freq'):
            value = self._read_file(f"{self.cpufreq_dir}/{file_name}")
            if value:
                return Measurement(value, 'kHz')

        measurement = super().cpu_frequency()
        if measurement is not None:
            return measurement

        mhz = self._cpuinfo().get('cpu MHz')
        if mhz:
            return Measurement(mhz, 'MHz')

        return None

    # --- RAM -------------------------------------------------------------

    def _meminfo_value(self, key: str) -> Optional[Measurement]:
        content = self._read_file(self.meminfo_path)
        if content is None:
            return None

        for line in content.split('\n'):
            if not line.startswith(f"{key}:"):
                continue

            parts = line.split(':', 1)[1].split()
            if not parts:
                raise ProbeError(f"Ligne {key} vide dans {self.meminfo_path}", key)

            unit = parts[1] if len(parts) > 1 else 'B'
            return Measurement(parts[0], unit)

        return None

    def ram_total(self) -> Optional[Measurement]:
        measurement = self._meminfo_value('MemTotal')
        if measurement is None:
            self._debug(f"MemTotal absent de {self.meminfo_path}, repli sur psutil")
            return super().ram_total()
        return measurement

    def ram_available(self) -> Optional[Measurement]:
        # MemAvailable n'existe qu'à partir du noyau 3.14
        measurement = self._meminfo_value('MemAvailable')
        if measurement is None:
            self._debug(f"MemAvailable absent de {self.meminfo_path}, repli sur psutil")
            return super().ram_available()
        return measurement

    # --- GPU -------------------------------------------------------------

    def gpu_adapters(self) -> List[Dict[str, Any]]:
        """
        Énumère les GPU via nvidia-smi si disponible, sinon via lspci
        """
        if shutil.which('nvidia-smi'):
            try:
                adapters = self._nvidia_smi_adapters()
                if adapters:
                    return adapters
            except ProbeError as e:
                self._debug(f"nvidia-smi indisponible, repli sur lspci: {e}")

        if not shutil.which('lspci'):
            self._debug("lspci non trouvé, aucun adaptateur énuméré")
            return []

        return self._lspci_adapters()

    def _nvidia_smi_adapters(self) -> List[Dict[str, Any]]:
        output = self._execute_command(NVIDIA_SMI_QUERY)

        adapters = []
        for line in output.split('\n'):
            fields = [field.strip() for field in line.split(',')]
            if len(fields) != 2:
                continue

            adapters.append({
                'vendor': 'NVIDIA',
                'model': fields[0],
                'memory': Measurement(fields[1], 'MiB'),
            })

        return adapters

    def _lspci_adapters(self) -> List[Dict[str, Any]]:
        output = self._execute_command('lspci')

        adapters = []
        for line in output.split('\n'):
            match = LSPCI_DISPLAY_LINE.match(line.strip())
            if not match:
                continue
            adapters.append(parse_lspci_description(match.group('description')))

        return adapters

    # --- OS --------------------------------------------------------------

    def _os_release(self) -> Dict[str, str]:
        for path in self.os_release_paths:
            content = self._read_file(path)
            if content is None:
                continue

            release = {}
            for line in content.split('\n'):
                if '=' in line and not line.lstrip().startswith('#'):
                    key, value = line.strip().split('=', 1)
                    release[key] = value.strip().strip('"\'')
            return release

        return {}

    def os_name(self) -> Optional[str]:
        release = self._os_release()
        return release.get('PRETTY_NAME') or release.get('NAME')

    def os_version(self) -> Optional[str]:
        """
        Version de la distribution

        Les distributions en publication continue (Arch) n'ont ni VERSION_ID
        ni VERSION : BUILD_ID, puis la version du noyau, en tiennent lieu.
        """
        release = self._os_release()
        for key in ('VERSION_ID', 'VERSION', 'BUILD_ID'):
            if release.get(key):
                return release[key]

        return super().os_kernel()


def parse_lspci_description(description: str) -> Dict[str, Any]:
    """
    Découpe une description lspci en fabricant et modèle

    Ex: "NVIDIA Corporation GA102 [GeForce RTX 3090] (rev a1)"
        -> {'vendor': 'NVIDIA Corporation', 'model': 'GeForce RTX 3090'}
    """
    description = re.sub(r'\s*\(rev [0-9a-fA-F]+\)\s*$', '', description.strip())

    vendor = None
    model = description
    for known_vendor in LSPCI_VENDORS:
        if description.startswith(known_vendor):
            vendor = known_vendor
            model = description[len(known_vendor):].strip()
            break

    # Le nom commercial est entre crochets en fin de description
    bracket = re.search(r'\[([^\[\]]+)\]\s*$', model)
    if bracket:
        model = bracket.group(1).strip()

    return {'vendor': vendor, 'model': model or None}
