"""
Collecteur d'informations système d'exploitation
"""

from .base import BaseCollector
from .normalizer import normalize_architecture, normalize_os_family, normalize_string
from ..models import Architecture, OsFamily, OsInfo


class OsCollector(BaseCollector):
    """
    Collecteur OS

    La famille et l'architecture sont ramenées à un ensemble fermé de
    tags ; une valeur non reconnue devient le tag "unknown".
    """

    def collect(self) -> OsInfo:
        self._start_collection()

        family = self._fetch('family', 'os_family', normalize_os_family)
        name = self._fetch('name', 'os_name', normalize_string)
        version = self._fetch('version', 'os_version', normalize_string)
        kernel = self._fetch('kernel', 'os_kernel', normalize_string)
        architecture = self._fetch('architecture', 'os_architecture', normalize_architecture)

        self._end_collection()

        return OsInfo(
            family=family if family is not None else OsFamily.UNKNOWN,
            name=name,
            version=version,
            kernel=kernel,
            architecture=architecture if architecture is not None else Architecture.UNKNOWN,
            unavailable=tuple(self.unavailable),
        )
