"""
Collecteur d'informations mémoire vive
"""

from .base import BaseCollector
from .normalizer import normalize_bytes
from .platform.base import Measurement
from ..models import RamInfo


def _bytes(raw, allow_zero=False):
    if isinstance(raw, Measurement):
        return normalize_bytes(raw.value, raw.unit, raw.page_size, allow_zero)
    return normalize_bytes(raw, 'B', allow_zero=allow_zero)


def _available_bytes(raw):
    # Une mémoire disponible nulle est une valeur réelle, pas une absence
    return _bytes(raw, allow_zero=True)


class RamCollector(BaseCollector):
    """Collecteur RAM"""

    def collect(self) -> RamInfo:
        """
        Collecte la capacité totale et disponible en octets

        Returns:
            RamInfo: available_bytes <= total_bytes si les deux sont présents
        """
        self._start_collection()

        total_bytes = self._fetch('total_bytes', 'ram_total', _bytes)
        available_bytes = self._fetch('available_bytes', 'ram_available', _available_bytes)

        if total_bytes is not None and available_bytes is not None and available_bytes > total_bytes:
            self._mark_inconsistent(
                'available_bytes',
                f"{available_bytes} octets disponibles pour {total_bytes} octets au total"
            )
            available_bytes = None

        self._end_collection()

        return RamInfo(
            total_bytes=total_bytes,
            available_bytes=available_bytes,
            unavailable=tuple(self.unavailable),
        )
