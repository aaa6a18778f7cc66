"""
Sonde native macOS

Ce module utilise les outils natifs macOS :
- sysctl pour le processeur et la mémoire
- vm_stat pour la mémoire disponible
- system_profiler pour les adaptateurs graphiques
- sw_vers pour la version du système
"""

import json
import platform
import re
from typing import Any, Dict, List, Optional

from .base import Measurement, NativeProbe
from ...exceptions import ProbeError

# Pages considérées comme récupérables par le système
VM_STAT_AVAILABLE_KEYS = ('Pages free', 'Pages inactive', 'Pages speculative')


class MacOSProbe(NativeProbe):
    """
    Sonde spécifique pour macOS

    Sur Apple Silicon, machdep.cpu.vendor et hw.cpufrequency n'existent
    pas : le fabricant est déduit du nom du processeur et la fréquence
    est rapportée absente.
    """

    platform_name = "macos"

    def _sysctl(self, key: str) -> Optional[str]:
        """
        Lit une valeur sysctl

        Returns:
            str: Valeur brute, None si la clé n'existe pas sur cette machine
        """
        try:
            return self._execute_command(f"sysctl -n {key}") or None
        except ProbeError as e:
            self._debug(f"sysctl {key} indisponible: {e}")
            return None

    # --- CPU -------------------------------------------------------------

    def cpu_vendor(self) -> Optional[str]:
        vendor = self._sysctl('machdep.cpu.vendor')
        if vendor:
            return vendor

        brand = self._sysctl('machdep.cpu.brand_string')
        if brand and brand.strip().startswith('Apple'):
            return 'Apple'

        return None

    def cpu_model(self) -> Optional[str]:
        return self._sysctl('machdep.cpu.brand_string')

    def cpu_physical_cores(self) -> Optional[int]:
        return self._sysctl('hw.physicalcpu') or super().cpu_physical_cores()

    def cpu_logical_cores(self) -> Optional[int]:
        return self._sysctl('hw.logicalcpu') or super().cpu_logical_cores()

    def cpu_frequency(self) -> Optional[Measurement]:
        value = self._sysctl('hw.cpufrequency')
        return Measurement(value, 'Hz') if value else None

    # --- RAM -------------------------------------------------------------

    def ram_total(self) -> Optional[Measurement]:
        value = self._sysctl('hw.memsize')
        return Measurement(value, 'B') if value else super().ram_total()

    def ram_available(self) -> Optional[Measurement]:
        """
        Mémoire disponible en pages depuis vm_stat

        Ex: "Mach Virtual Memory Statistics: (page size of 16384 bytes)"
        """
        output = self._execute_command('vm_stat')

        page_size_match = re.search(r'page size of (\d+) bytes', output)
        if not page_size_match:
            raise ProbeError("Taille de page introuvable dans vm_stat", 'ram_available')

        pages = 0
        found = False
        for line in output.split('\n'):
            if ':' not in line:
                continue
            key, value = line.split(':', 1)
            if key.strip() in VM_STAT_AVAILABLE_KEYS:
                try:
                    pages += int(value.strip().rstrip('.'))
                    found = True
                except ValueError as e:
                    raise ProbeError(f"Valeur vm_stat illisible: {line.strip()}", 'ram_available') from e

        if not found:
            return None

        return Measurement(pages, 'pages', int(page_size_match.group(1)))

    # --- GPU -------------------------------------------------------------

    def gpu_adapters(self) -> List[Dict[str, Any]]:
        """Adaptateurs graphiques via system_profiler au format JSON"""
        output = self._execute_command('system_profiler SPDisplaysDataType -json')

        try:
            data = json.loads(output) if output else {}
        except ValueError as e:
            raise ProbeError(f"Sortie system_profiler illisible: {e}", 'gpu_adapters') from e

        adapters = []
        for display in data.get('SPDisplaysDataType', []):
            adapters.append({
                'vendor': display.get('spdisplays_vendor') or display.get('sppci_vendor'),
                'model': display.get('sppci_model') or display.get('_name'),
                'memory': parse_vram(display.get('spdisplays_vram') or display.get('spdisplays_vram_shared')),
                'cores': display.get('sppci_cores'),
            })

        return adapters

    # --- OS --------------------------------------------------------------

    def _sw_vers(self, option: str) -> Optional[str]:
        try:
            return self._execute_command(f"sw_vers {option}") or None
        except ProbeError as e:
            self._debug(f"sw_vers {option} indisponible: {e}")
            return None

    def os_name(self) -> Optional[str]:
        return self._sw_vers('-productName') or 'macOS'

    def os_version(self) -> Optional[str]:
        return self._sw_vers('-productVersion') or platform.mac_ver()[0] or None

    def os_kernel(self) -> Optional[str]:
        return self._sysctl('kern.osrelease') or super().os_kernel()

    def os_architecture(self) -> Optional[str]:
        return self._sysctl('hw.machine') or super().os_architecture()


def parse_vram(value: Optional[str]) -> Optional[Measurement]:
    """
    Convertit un libellé VRAM system_profiler ("1536 MB", "8 GB")
    """
    if not value:
        return None

    match = re.match(r'^\s*([\d.]+)\s*([KMGT]i?B)\s*$', str(value), re.IGNORECASE)
    if not match:
        return Measurement(value, 'B')

    return Measurement(match.group(1), match.group(2))
