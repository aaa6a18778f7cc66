"""
Collecteur d'informations cartes graphiques

Énumère tous les adaptateurs détectés, dans l'ordre rapporté par la
plateforme. Aucun adaptateur (serveur sans affichage, VM) donne une
séquence vide.
"""

from typing import Any, Dict, Tuple

from .base import BaseCollector
from .normalizer import normalize_bytes, normalize_count, normalize_string, normalize_vendor
from .platform.base import Measurement
from ..exceptions import ProbeError
from ..models import GpuInfo, PROBE_ERROR


def _memory_bytes(raw):
    # 0 octet signifie "inconnu" pour les pilotes (AdapterRAM, VRAM partagée)
    if isinstance(raw, Measurement):
        return normalize_bytes(raw.value, raw.unit, raw.page_size)
    return normalize_bytes(raw, 'B')


# Champ de GpuInfo -> (clé brute de la sonde, normalisation)
GPU_FIELDS = (
    ('vendor', 'vendor', normalize_vendor),
    ('model', 'model', normalize_string),
    ('memory_bytes', 'memory', _memory_bytes),
    ('cores', 'cores', normalize_count),
)


class GpuCollector(BaseCollector):
    """Collecteur GPU"""

    def collect(self) -> Tuple[GpuInfo, ...]:
        """
        Collecte les adaptateurs graphiques

        Returns:
            tuple: Un GpuInfo par adaptateur, vide si aucun ou si l'énumération échoue
        """
        self._start_collection()

        try:
            raw_adapters = self.probe.gpu_adapters() or []
        except ProbeError as e:
            self._mark_unavailable('adapters', PROBE_ERROR, str(e))
            self.logger.warning(f"{self.collector_name}: énumération des GPU impossible: {e}")
            raw_adapters = []
        except Exception as e:
            self._mark_unavailable('adapters', PROBE_ERROR, f"{type(e).__name__}: {e}")
            self.logger.warning(f"{self.collector_name}: erreur inattendue à l'énumération des GPU: {e}")
            raw_adapters = []

        gpus = tuple(self._build_gpu(raw) for raw in raw_adapters)

        self._end_collection()
        self.logger.debug(f"{len(gpus)} adaptateur(s) graphique(s) détecté(s)")

        return gpus

    def _build_gpu(self, raw: Dict[str, Any]) -> GpuInfo:
        """
        Normalise un adaptateur brut champ par champ

        Une clé absente du dictionnaire brut n'a pas été interrogée et
        n'est donc pas consignée comme indisponible.
        """
        unavailable = []
        values = {}

        for field, key, normalizer in GPU_FIELDS:
            if key not in raw:
                values[field] = None
                continue
            values[field] = self._normalize(field, raw[key], normalizer, unavailable)

        return GpuInfo(unavailable=tuple(unavailable), **values)
