"""
Modèle de données unifié de System Info Lite

Tous les enregistrements sont immuables et créés à chaque requête.
Un champ optionnel à None est absent (inconnu), jamais « zéro ».
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class OsFamily(str, Enum):
    """Familles de systèmes d'exploitation reconnues"""
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    FREEBSD = "freebsd"
    UNKNOWN = "unknown"


class Architecture(str, Enum):
    """Architectures matérielles reconnues"""
    X86_64 = "x86_64"
    X86 = "x86"
    ARM64 = "arm64"
    ARM = "arm"
    PPC64LE = "ppc64le"
    PPC64 = "ppc64"
    S390X = "s390x"
    RISCV64 = "riscv64"
    UNKNOWN = "unknown"


# Raisons d'absence d'un champ
NOT_SUPPORTED = "not_supported"
PROBE_ERROR = "probe_error"
INVALID_VALUE = "invalid_value"
INCONSISTENT = "inconsistent"


@dataclass(frozen=True)
class FieldUnavailable:
    """
    Donnée interrogée mais impossible à obtenir ou à normaliser

    Un champ à None sans FieldUnavailable correspondant n'a pas été interrogé.
    """
    field: str
    reason: str
    detail: str = ""


class _Record:
    """Comportement commun des enregistrements par catégorie"""

    def is_unavailable(self, field_name: str) -> bool:
        return any(entry.field == field_name for entry in self.unavailable)

    def unavailable_fields(self) -> Tuple[str, ...]:
        return tuple(entry.field for entry in self.unavailable)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convertit l'enregistrement en dictionnaire sérialisable

        Les champs absents sont omis, les tags sont rendus en chaînes.
        """
        data = {}
        for record_field in fields(self):
            if record_field.name == "unavailable":
                continue
            value = getattr(self, record_field.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            data[record_field.name] = value
        return data


@dataclass(frozen=True)
class CpuInfo(_Record):
    """Processeur : logical_cores >= physical_cores quand les deux sont présents"""
    vendor: Optional[str] = None
    model: Optional[str] = None
    physical_cores: Optional[int] = None
    logical_cores: Optional[int] = None
    frequency_mhz: Optional[float] = None
    unavailable: Tuple[FieldUnavailable, ...] = ()


@dataclass(frozen=True)
class RamInfo(_Record):
    """Mémoire vive en octets : available_bytes <= total_bytes"""
    total_bytes: Optional[int] = None
    available_bytes: Optional[int] = None
    unavailable: Tuple[FieldUnavailable, ...] = ()

    @property
    def used_bytes(self) -> Optional[int]:
        if self.total_bytes is None or self.available_bytes is None:
            return None
        return self.total_bytes - self.available_bytes

    @property
    def available_ratio(self) -> Optional[float]:
        if self.total_bytes is None or self.available_bytes is None:
            return None
        return self.available_bytes / self.total_bytes


@dataclass(frozen=True)
class GpuInfo(_Record):
    """Adaptateur graphique"""
    vendor: Optional[str] = None
    model: Optional[str] = None
    memory_bytes: Optional[int] = None
    cores: Optional[int] = None
    unavailable: Tuple[FieldUnavailable, ...] = ()


@dataclass(frozen=True)
class OsInfo(_Record):
    """Système d'exploitation"""
    family: OsFamily = OsFamily.UNKNOWN
    name: Optional[str] = None
    version: Optional[str] = None
    kernel: Optional[str] = None
    architecture: Architecture = Architecture.UNKNOWN
    unavailable: Tuple[FieldUnavailable, ...] = ()


@dataclass(frozen=True)
class SystemInfo:
    """Instantané complet : un CPU, une RAM, zéro ou plusieurs GPU, un OS"""
    cpu: CpuInfo
    ram: RamInfo
    gpus: Tuple[GpuInfo, ...]
    os: OsInfo

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cpu': self.cpu.to_dict(),
            'ram': self.ram.to_dict(),
            'gpus': [gpu.to_dict() for gpu in self.gpus],
            'os': self.os.to_dict(),
        }
