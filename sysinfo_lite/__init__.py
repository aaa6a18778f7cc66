"""
System Info Lite - Introspection matérielle et système multi-plateforme

Fournit un instantané normalisé du processeur, de la mémoire vive, des
cartes graphiques et du système d'exploitation. Aucun appel ne lève
d'exception : une donnée indisponible est simplement absente (None).

Exemple:
    >>> import sysinfo_lite
    >>> info = sysinfo_lite.get_system_info()
    >>> info.cpu.logical_cores
    8
"""

from functools import lru_cache
from typing import Tuple

from .core.aggregator import SystemInfoAggregator
from .core.config import InfoConfig
from .exceptions import ConfigError, ProbeError, SysInfoError
from .models import (
    Architecture,
    CpuInfo,
    FieldUnavailable,
    GpuInfo,
    OsFamily,
    OsInfo,
    RamInfo,
    SystemInfo,
)

__version__ = "1.0.0"


@lru_cache(maxsize=None)
def default_aggregator() -> SystemInfoAggregator:
    """Agrégateur du processus, sonde sélectionnée au premier appel"""
    return SystemInfoAggregator(config=InfoConfig())


def get_system_info() -> SystemInfo:
    return default_aggregator().get_system_info()


def get_cpu_info() -> CpuInfo:
    return default_aggregator().get_cpu_info()


def get_ram_info() -> RamInfo:
    return default_aggregator().get_ram_info()


def get_gpu_info() -> Tuple[GpuInfo, ...]:
    return default_aggregator().get_gpu_info()


def get_os_info() -> OsInfo:
    return default_aggregator().get_os_info()


__all__ = [
    'Architecture', 'ConfigError', 'CpuInfo', 'FieldUnavailable', 'GpuInfo', 'InfoConfig',
    'OsFamily', 'OsInfo', 'ProbeError', 'RamInfo', 'SysInfoError', 'SystemInfo',
    'SystemInfoAggregator', 'default_aggregator', 'get_cpu_info', 'get_gpu_info',
    'get_os_info', 'get_ram_info', 'get_system_info',
]
