"""
Interface commune des sondes natives

Une sonde native interroge le système d'exploitation pour une seule
donnée brute à la fois. Chaque méthode de sonde :
- retourne la valeur brute (non validée),
- retourne None si la capacité est absente sur cette plateforme,
- lève ProbeError en cas d'erreur plateforme, limitée à cette donnée.

Les implémentations par défaut reposent sur psutil et le module platform,
disponibles sur toutes les plateformes.
"""

import platform
import subprocess
from abc import ABC, abstractmethod
from collections import namedtuple
from typing import Any, Dict, List, Optional

import psutil

from ...exceptions import ProbeError

# Quantité brute accompagnée de son unité native
Measurement = namedtuple('Measurement', ['value', 'unit', 'page_size'], defaults=(None,))

DEFAULT_COMMAND_TIMEOUT = 10


class NativeProbe(ABC):
    """
    Classe de base abstraite des sondes natives

    Une variante par famille de plateforme ; la sélection est faite une
    seule fois par select_probe(). Les sondes ne conservent aucun état
    entre deux requêtes.
    """

    platform_name = "generic"

    def __init__(self, config=None, logger=None):
        """
        Initialise la sonde

        Args:
            config: Instance de InfoConfig (optionnelle)
            logger: logging.Logger (optionnel)
        """
        self.config = config
        self.logger = logger
        self.command_timeout = (
            config.getint('probes', 'command_timeout', DEFAULT_COMMAND_TIMEOUT)
            if config else DEFAULT_COMMAND_TIMEOUT
        )

    # --- CPU -------------------------------------------------------------

    @abstractmethod
    def cpu_vendor(self) -> Optional[str]:
        """Fabricant brut du processeur"""

    @abstractmethod
    def cpu_model(self) -> Optional[str]:
        """Nom commercial brut du processeur"""

    def cpu_physical_cores(self) -> Optional[int]:
        return self._psutil_call('cpu_physical_cores', psutil.cpu_count, logical=False)

    def cpu_logical_cores(self) -> Optional[int]:
        return self._psutil_call('cpu_logical_cores', psutil.cpu_count, logical=True)

    def cpu_frequency(self) -> Optional[Measurement]:
        """
        Fréquence de base via psutil

        psutil expose la fréquence maximale nominale quand elle est connue,
        sinon la fréquence courante.
        """
        freq = self._psutil_call('cpu_frequency', psutil.cpu_freq)
        if not freq:
            return None
        return Measurement(freq.max or freq.current, 'MHz')

    # --- RAM -------------------------------------------------------------

    def ram_total(self) -> Optional[Measurement]:
        memory = self._psutil_call('ram_total', psutil.virtual_memory)
        return Measurement(memory.total, 'B') if memory else None

    def ram_available(self) -> Optional[Measurement]:
        memory = self._psutil_call('ram_available', psutil.virtual_memory)
        return Measurement(memory.available, 'B') if memory else None

    # --- GPU -------------------------------------------------------------

    @abstractmethod
    def gpu_adapters(self) -> List[Dict[str, Any]]:
        """
        Énumère les adaptateurs graphiques dans l'ordre natif

        Returns:
            list: Un dictionnaire brut par adaptateur, clés possibles :
                  'vendor', 'model', 'memory' (Measurement), 'cores'
        """

    # --- OS --------------------------------------------------------------

    def os_family(self) -> Optional[str]:
        return platform.system() or None

    @abstractmethod
    def os_name(self) -> Optional[str]:
        """Nom lisible du système (distribution, édition)"""

    @abstractmethod
    def os_version(self) -> Optional[str]:
        """Version du système"""

    def os_kernel(self) -> Optional[str]:
        return platform.release() or None

    def os_architecture(self) -> Optional[str]:
        return platform.machine() or None

    # --- Utilitaires -----------------------------------------------------

    def _psutil_call(self, fact: str, func, *args, **kwargs):
        """
        Appelle psutil en convertissant ses erreurs en ProbeError

        Returns:
            Résultat de psutil, None si la fonction n'existe pas sur la plateforme
        """
        try:
            return func(*args, **kwargs)
        except (AttributeError, NotImplementedError):
            return None
        except Exception as e:
            raise ProbeError(f"psutil a échoué pour {fact}: {e}", fact) from e

    def _execute_command(self, command: str) -> str:
        """
        Exécute une commande système et retourne sa sortie

        Args:
            command: Commande à exécuter

        Returns:
            str: Sortie standard nettoyée

        Raises:
            ProbeError: Commande introuvable, en échec ou expirée
        """
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.command_timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"Timeout pour la commande: {command}") from e
        except OSError as e:
            raise ProbeError(f"Erreur lors de l'exécution de '{command}': {e}") from e

        if result.returncode != 0:
            raise ProbeError(f"Commande échouée: {command} (code: {result.returncode})")

        return result.stdout.strip()

    def _read_file(self, file_path: str) -> Optional[str]:
        """
        Lit un fichier système

        Returns:
            str: Contenu du fichier, None s'il n'existe pas

        Raises:
            ProbeError: Fichier présent mais illisible
        """
        try:
            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                return f.read().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise ProbeError(f"Erreur lecture fichier {file_path}: {e}") from e

    def _debug(self, message: str):
        if self.logger:
            self.logger.debug(message)


class GenericProbe(NativeProbe):
    """
    Sonde de repli pour les plateformes sans variante dédiée

    Se limite à psutil et au module platform ; aucune énumération GPU.
    """

    def cpu_vendor(self) -> Optional[str]:
        return None

    def cpu_model(self) -> Optional[str]:
        return platform.processor() or None

    def gpu_adapters(self) -> List[Dict[str, Any]]:
        return []

    def os_name(self) -> Optional[str]:
        return platform.system() or None

    def os_version(self) -> Optional[str]:
        return platform.version() or None
