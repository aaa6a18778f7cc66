"""
Classe de base pour tous les collecteurs par catégorie

Ce module définit l'interface commune des collecteurs CPU, RAM, GPU et OS
ainsi que l'isolation des erreurs champ par champ : une donnée qui ne
peut être obtenue ou normalisée devient un champ absent, jamais une
exception.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from ..exceptions import ProbeError
from ..models import FieldUnavailable, INCONSISTENT, INVALID_VALUE, NOT_SUPPORTED, PROBE_ERROR


class BaseCollector(ABC):
    """
    Classe de base abstraite pour tous les collecteurs

    Un collecteur est créé pour une seule collecte : l'état de suivi
    (début, champs indisponibles) n'est jamais partagé entre requêtes.
    """

    def __init__(self, probe, logger):
        """
        Initialise le collecteur de base

        Args:
            probe: Instance de NativeProbe
            logger: logging.Logger
        """
        self.probe = probe
        self.logger = logger

        # Métadonnées du collecteur
        self.collector_name = self.__class__.__name__
        self.collection_start_time = None
        self.unavailable: List[FieldUnavailable] = []

    @abstractmethod
    def collect(self):
        """
        Méthode principale de collecte - doit être implémentée par chaque collecteur

        Returns:
            Enregistrement normalisé de la catégorie
        """

    def _start_collection(self):
        self.collection_start_time = time.time()
        self.unavailable = []
        self.logger.debug(f"Début collecte {self.collector_name}")

    def _end_collection(self) -> float:
        """
        Termine une session de collecte

        Returns:
            float: Durée de collecte en secondes
        """
        if not self.collection_start_time:
            return 0.0

        duration = time.time() - self.collection_start_time
        self.logger.debug(f"Collecte {self.collector_name} terminée en {duration:.3f}s")

        if self.unavailable:
            self.logger.debug(
                f"Collecte {self.collector_name}: {len(self.unavailable)} champ(s) indisponible(s) "
                f"({', '.join(entry.field for entry in self.unavailable)})"
            )

        return duration

    def _fetch(self, field: str, fact: str, normalizer: Callable[[Any], Any]):
        """
        Interroge la sonde pour une donnée et la normalise

        Toute erreur de la sonde est limitée à ce champ.

        Args:
            field: Nom du champ dans l'enregistrement
            fact: Nom de la méthode de sonde à appeler
            normalizer: Fonction de normalisation de la valeur brute

        Returns:
            Valeur normalisée, ou None si le champ est indisponible
        """
        try:
            raw = getattr(self.probe, fact)()
        except ProbeError as e:
            self._mark_unavailable(field, PROBE_ERROR, str(e))
            self.logger.warning(f"{self.collector_name}: {field} indisponible: {e}")
            return None
        except Exception as e:
            self._mark_unavailable(field, PROBE_ERROR, f"{type(e).__name__}: {e}")
            self.logger.warning(f"{self.collector_name}: erreur inattendue pour {field}: {e}")
            return None

        return self._normalize(field, raw, normalizer)

    def _normalize(self, field: str, raw: Any, normalizer: Callable[[Any], Any],
                   unavailable: Optional[List[FieldUnavailable]] = None):
        """
        Normalise une valeur brute déjà obtenue

        Args:
            field: Nom du champ
            raw: Valeur brute (None = capacité absente)
            normalizer: Fonction de normalisation
            unavailable: Liste où consigner l'absence (défaut: self.unavailable)

        Returns:
            Valeur normalisée ou None
        """
        if unavailable is None:
            unavailable = self.unavailable

        if raw is None:
            unavailable.append(FieldUnavailable(field, NOT_SUPPORTED))
            return None

        value = normalizer(raw)
        if value is None:
            unavailable.append(FieldUnavailable(field, INVALID_VALUE, f"valeur brute: {raw!r}"))
            self.logger.debug(f"{self.collector_name}: valeur {field} rejetée: {raw!r}")

        return value

    def _mark_unavailable(self, field: str, reason: str, detail: str = ""):
        self.unavailable.append(FieldUnavailable(field, reason, detail))

    def _mark_inconsistent(self, field: str, detail: str):
        self._mark_unavailable(field, INCONSISTENT, detail)
        self.logger.warning(f"{self.collector_name}: {field} ignoré, {detail}")
