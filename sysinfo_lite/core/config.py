"""
Module de configuration de System Info Lite

La configuration ne modifie jamais le contenu d'un instantané : elle
règle uniquement la journalisation et le délai maximal des commandes
exécutées par les sondes natives.
"""

import configparser
import os
import sys
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigError
from .logger import get_logger

CONFIG_ENV_VAR = "SYSINFO_LITE_CONFIG"

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class InfoConfig:
    """
    Gestionnaire de configuration

    Valeurs par défaut définies en code, surchargées par un fichier INI
    optionnel.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialise la configuration

        Args:
            config_file: Chemin vers le fichier de configuration (optionnel)
        """
        self.config = configparser.ConfigParser()
        self.config_file = config_file or os.environ.get(CONFIG_ENV_VAR) or self._get_default_config_path()
        self.loaded = False

        self._set_defaults()
        self._load_config()

    def _get_default_config_path(self) -> str:
        """
        Détermine le chemin par défaut du fichier de configuration selon la plateforme

        Returns:
            str: Chemin vers le fichier de configuration
        """
        if sys.platform == "win32":
            return os.path.join(
                os.environ.get("APPDATA", os.path.expanduser("~")),
                "system-info-lite",
                "config.ini"
            )
        elif sys.platform == "darwin":
            return os.path.expanduser("~/Library/Application Support/system-info-lite/config.ini")
        else:
            config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
            return os.path.join(config_home, "system-info-lite", "config.ini")

    def _set_defaults(self):
        # Configuration logging
        self.config.add_section('logging')
        self.config.set('logging', 'log_level', 'WARNING')
        self.config.set('logging', 'log_file', '')
        self.config.set('logging', 'max_log_size', '10485760')  # 10MB
        self.config.set('logging', 'backup_count', '5')
        self.config.set('logging', 'console', 'false')

        # Configuration sondes natives
        self.config.add_section('probes')
        self.config.set('probes', 'command_timeout', '10')

    def _load_config(self):
        """
        Charge la configuration depuis le fichier

        Si le fichier n'existe pas ou est illisible, les valeurs par défaut
        sont conservées.
        """
        logger = get_logger()

        if not os.path.exists(self.config_file):
            logger.debug(f"Fichier de configuration non trouvé: {self.config_file}")
            return

        try:
            self.config.read(self.config_file, encoding='utf-8')
            self.loaded = True
            logger.debug(f"Configuration chargée depuis: {self.config_file}")
        except (configparser.Error, OSError) as e:
            logger.warning(f"Erreur lors du chargement de la configuration: {e}")

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        return self.config.get(section, option, fallback=fallback)

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except ValueError:
            return fallback

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        try:
            return self.config.getint(section, option, fallback=fallback)
        except ValueError:
            return fallback

    def set(self, section: str, option: str, value: Any):
        """
        Définit une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            value: Nouvelle valeur
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def save(self):
        """
        Sauvegarde la configuration dans le fichier

        Crée les dossiers parents si nécessaire.

        Raises:
            OSError: Écriture impossible
        """
        config_dir = os.path.dirname(self.config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            self.config.write(f)

        get_logger().info(f"Configuration sauvegardée dans: {self.config_file}")

    def get_logging_config(self) -> Dict[str, Any]:
        return {
            'log_level': self.get('logging', 'log_level', 'WARNING'),
            'log_file': self.get('logging', 'log_file', ''),
            'max_log_size': self.getint('logging', 'max_log_size', 10485760),
            'backup_count': self.getint('logging', 'backup_count', 5),
            'console': self.getboolean('logging', 'console', False),
        }

    def get_probe_config(self) -> Dict[str, Any]:
        return {
            'command_timeout': self.getint('probes', 'command_timeout', 10),
        }

    def validate(self, strict: bool = False) -> List[str]:
        """
        Valide la configuration courante

        Args:
            strict: Lève ConfigError au lieu de retourner les erreurs

        Returns:
            list: Messages d'erreur, vide si la configuration est valide

        Raises:
            ConfigError: En mode strict, si au moins une valeur est invalide
        """
        errors = []

        log_level = self.get('logging', 'log_level', '').upper()
        if log_level not in LOG_LEVELS:
            errors.append(f"Niveau de log invalide: {log_level or '(vide)'}")

        for option in ('max_log_size', 'backup_count'):
            try:
                if self.config.getint('logging', option) < 0:
                    errors.append(f"logging.{option} doit être positif")
            except ValueError:
                errors.append(f"logging.{option} doit être un entier")

        try:
            if self.config.getint('probes', 'command_timeout') <= 0:
                errors.append("probes.command_timeout doit être strictement positif")
        except ValueError:
            errors.append("probes.command_timeout doit être un entier")

        try:
            self.config.getboolean('logging', 'console')
        except ValueError:
            errors.append("logging.console doit être un booléen")

        if errors and strict:
            raise ConfigError("; ".join(errors))

        return errors


def create_default_config(config_path: str) -> InfoConfig:
    """
    Crée un fichier de configuration par défaut

    Args:
        config_path: Chemin où créer le fichier de configuration

    Returns:
        InfoConfig: Instance de configuration créée
    """
    config = InfoConfig(config_path)
    config.save()
    return config
