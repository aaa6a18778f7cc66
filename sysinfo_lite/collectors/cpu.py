"""
Collecteur d'informations processeur

Fabricant, modèle, nombre de cœurs physiques et logiques, fréquence de base.
"""

from .base import BaseCollector
from .normalizer import normalize_count, normalize_frequency, normalize_string, normalize_vendor
from .platform.base import Measurement
from ..models import CpuInfo


def _frequency_mhz(raw):
    if isinstance(raw, Measurement):
        return normalize_frequency(raw.value, raw.unit)
    return normalize_frequency(raw, 'MHz')


class CpuCollector(BaseCollector):
    """Collecteur CPU"""

    def collect(self) -> CpuInfo:
        """
        Collecte les informations du processeur

        Returns:
            CpuInfo: logical_cores >= physical_cores si les deux sont présents
        """
        self._start_collection()

        vendor = self._fetch('vendor', 'cpu_vendor', normalize_vendor)
        model = self._fetch('model', 'cpu_model', normalize_string)
        physical_cores = self._fetch('physical_cores', 'cpu_physical_cores', normalize_count)
        logical_cores = self._fetch('logical_cores', 'cpu_logical_cores', normalize_count)
        frequency_mhz = self._fetch('frequency_mhz', 'cpu_frequency', _frequency_mhz)

        # Le nombre de cœurs logiques vu par l'ordonnanceur fait foi
        if physical_cores is not None and logical_cores is not None and logical_cores < physical_cores:
            self._mark_inconsistent(
                'physical_cores',
                f"{physical_cores} cœurs physiques pour {logical_cores} cœurs logiques"
            )
            physical_cores = None

        self._end_collection()

        return CpuInfo(
            vendor=vendor,
            model=model,
            physical_cores=physical_cores,
            logical_cores=logical_cores,
            frequency_mhz=frequency_mhz,
            unavailable=tuple(self.unavailable),
        )
