"""
Module d'agrégation de System Info Lite

Ce module orchestre les collecteurs par catégorie :
- Sélection unique de la sonde native de la plateforme
- Une collecte indépendante par appel, sans cache ni verrou
- Assemblage de l'instantané complet
- Conversion de toute erreur résiduelle en enregistrement vide
"""

import time
from typing import Tuple

from ..collectors import CpuCollector, GpuCollector, OsCollector, RamCollector
from ..collectors.platform import NativeProbe, select_probe
from ..models import CpuInfo, GpuInfo, OsInfo, RamInfo, SystemInfo
from .logger import get_logger


class SystemInfoAggregator:
    """
    Point d'entrée des requêtes d'introspection

    Toutes les méthodes sont totales : au pire, chaque champ du résultat
    est absent. Une même instance peut être utilisée depuis plusieurs
    threads, chaque appel construisant ses propres collecteurs.
    """

    def __init__(self, probe: NativeProbe = None, config=None, logger=None):
        """
        Initialise l'agrégateur

        Args:
            probe: Sonde native (défaut: sonde de la plateforme courante)
            config: Instance de InfoConfig
            logger: logging.Logger (défaut: logger du paquet)
        """
        self.config = config
        self.logger = logger or get_logger()
        self.probe = probe or select_probe(config, self.logger)

        self.logger.debug(f"Sonde native sélectionnée: {self.probe.platform_name} ({self.probe.__class__.__name__})")

    def get_cpu_info(self) -> CpuInfo:
        try:
            return CpuCollector(self.probe, self.logger).collect()
        except Exception:
            self.logger.exception("Erreur collecte CPU")
            return CpuInfo()

    def get_ram_info(self) -> RamInfo:
        try:
            return RamCollector(self.probe, self.logger).collect()
        except Exception:
            self.logger.exception("Erreur collecte RAM")
            return RamInfo()

    def get_gpu_info(self) -> Tuple[GpuInfo, ...]:
        try:
            return GpuCollector(self.probe, self.logger).collect()
        except Exception:
            self.logger.exception("Erreur collecte GPU")
            return ()

    def get_os_info(self) -> OsInfo:
        try:
            return OsCollector(self.probe, self.logger).collect()
        except Exception:
            self.logger.exception("Erreur collecte OS")
            return OsInfo()

    def get_system_info(self) -> SystemInfo:
        """
        Lance la collecte complète

        Returns:
            SystemInfo: Instantané CPU, RAM, GPU et OS
        """
        start_time = time.time()

        system_info = SystemInfo(
            cpu=self.get_cpu_info(),
            ram=self.get_ram_info(),
            gpus=self.get_gpu_info(),
            os=self.get_os_info(),
        )

        self.logger.debug(f"Instantané système collecté en {time.time() - start_time:.3f} secondes")
        return system_info
