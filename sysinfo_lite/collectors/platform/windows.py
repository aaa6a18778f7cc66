"""
Sonde native Windows

Ce module utilise les API Windows spécifiques :
- WMI (Windows Management Instrumentation) via le module wmi
- Registre Windows en repli pour le nom du processeur
"""

import platform
from typing import Any, Dict, List, Optional

from .base import Measurement, NativeProbe
from ...exceptions import ProbeError

CPU_REGISTRY_KEY = r"HARDWARE\DESCRIPTION\System\CentralProcessor\0"


class WindowsProbe(NativeProbe):
    """
    Sonde spécifique pour Windows

    Chaque requête WMI initialise COM sur le thread appelant puis le
    libère : la sonde peut donc être appelée depuis plusieurs threads.
    """

    platform_name = "windows"

    def _wmi_query(self, class_name: str, properties) -> Optional[List[Dict[str, Any]]]:
        """
        Interroge une classe WMI et copie les propriétés demandées

        Les objets COM ne sont plus utilisables après CoUninitialize :
        seules des valeurs Python simples sortent de cette méthode.

        Args:
            class_name: Classe WMI (ex: 'Win32_Processor')
            properties: Propriétés à lire sur chaque instance

        Returns:
            list: Un dictionnaire par instance, None si le module wmi n'est pas installé

        Raises:
            ProbeError: Connexion ou requête WMI en échec
        """
        try:
            import pythoncom
            import wmi
        except ImportError:
            self._debug("Module WMI non disponible")
            return None

        pythoncom.CoInitialize()
        try:
            connection = wmi.WMI()
            return [
                {name: getattr(instance, name, None) for name in properties}
                for instance in getattr(connection, class_name)()
            ]
        except Exception as e:
            raise ProbeError(f"Erreur requête WMI {class_name}: {e}", class_name) from e
        finally:
            pythoncom.CoUninitialize()

    def _wmi_first(self, class_name: str, properties) -> Optional[Dict[str, Any]]:
        instances = self._wmi_query(class_name, properties)
        return instances[0] if instances else None

    # --- CPU -------------------------------------------------------------

    def cpu_vendor(self) -> Optional[str]:
        processor = self._wmi_first('Win32_Processor', ('Manufacturer',))
        return processor['Manufacturer'] if processor else None

    def cpu_model(self) -> Optional[str]:
        processor = self._wmi_first('Win32_Processor', ('Name',))
        if processor and processor['Name']:
            return processor['Name']

        # Fallback: essayer le registre Windows
        try:
            import winreg
        except ImportError:
            return None

        try:
            key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, CPU_REGISTRY_KEY)
            try:
                return winreg.QueryValueEx(key, "ProcessorNameString")[0]
            finally:
                winreg.CloseKey(key)
        except OSError as e:
            raise ProbeError(f"Lecture registre processeur impossible: {e}", 'cpu_model') from e

    def cpu_frequency(self) -> Optional[Measurement]:
        processor = self._wmi_first('Win32_Processor', ('MaxClockSpeed',))
        if processor and processor['MaxClockSpeed']:
            return Measurement(processor['MaxClockSpeed'], 'MHz')
        return super().cpu_frequency()

    # --- GPU -------------------------------------------------------------

    def gpu_adapters(self) -> List[Dict[str, Any]]:
        controllers = self._wmi_query('Win32_VideoController', ('AdapterCompatibility', 'Name', 'AdapterRAM'))
        if controllers is None:
            return []

        adapters = []
        for controller in controllers:
            # AdapterRAM est un entier 32 bits : plafonné à 4 Go par WMI
            adapters.append({
                'vendor': controller['AdapterCompatibility'],
                'model': controller['Name'],
                'memory': Measurement(controller['AdapterRAM'], 'B') if controller['AdapterRAM'] else None,
            })

        return adapters

    # --- OS --------------------------------------------------------------

    def os_name(self) -> Optional[str]:
        os_info = self._wmi_first('Win32_OperatingSystem', ('Caption',))
        if os_info and os_info['Caption']:
            return os_info['Caption']
        return f"{platform.system()} {platform.release()}".strip() or None

    def os_version(self) -> Optional[str]:
        os_info = self._wmi_first('Win32_OperatingSystem', ('Version',))
        if os_info and os_info['Version']:
            return os_info['Version']
        return platform.version() or None

    def os_kernel(self) -> Optional[str]:
        os_info = self._wmi_first('Win32_OperatingSystem', ('BuildNumber',))
        if os_info and os_info['BuildNumber']:
            return os_info['BuildNumber']
        return super().os_kernel()
