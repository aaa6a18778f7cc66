"""
Package des sondes natives par plateforme

Ce package contient les sondes qui utilisent des API
et des outils spécifiques à chaque système d'exploitation :
- Windows (WMI, registre)
- Linux (procfs, sysfs, commandes Unix)
- macOS (sysctl, system_profiler, vm_stat)
"""

import sys

from .base import GenericProbe, Measurement, NativeProbe


def select_probe(config=None, logger=None, platform_name: str = None) -> NativeProbe:
    """
    Sélectionne la sonde native de la plateforme courante

    Args:
        config: Instance de InfoConfig
        logger: Logger transmis à la sonde
        platform_name: Valeur de sys.platform à utiliser (défaut: plateforme courante)

    Returns:
        NativeProbe: Sonde adaptée, GenericProbe si la plateforme n'est pas prise en charge
    """
    platform_name = platform_name or sys.platform

    if platform_name == "win32":
        from .windows import WindowsProbe
        probe_class = WindowsProbe

    elif platform_name == "darwin":
        from .macos import MacOSProbe
        probe_class = MacOSProbe

    elif platform_name.startswith("linux"):
        from .linux import LinuxProbe
        probe_class = LinuxProbe

    else:
        probe_class = GenericProbe

    return probe_class(config, logger)


__all__ = ['GenericProbe', 'Measurement', 'NativeProbe', 'select_probe']
