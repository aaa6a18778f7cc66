"""
Module de logging de System Info Lite

En tant que bibliothèque, le paquet n'émet rien par défaut (NullHandler).
InfoLogger ajoute à la demande :
- Un fichier de log avec rotation automatique
- Une sortie console sur stderr
"""

import logging
import logging.handlers
import os
import sys

LOGGER_NAME = 'SystemInfoLite'

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class InfoLogger:
    """
    Gestionnaire de logging

    Configure le logger nommé du paquet une seule fois par processus,
    à partir d'une instance de InfoConfig.
    """

    def __init__(self, config=None):
        """
        Initialise le système de logging

        Args:
            config: Instance de InfoConfig pour récupérer les paramètres de log
        """
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

        # Éviter la duplication si déjà configuré
        if not any(not isinstance(handler, logging.NullHandler) for handler in self.logger.handlers):
            self._setup_logging()

    def _setup_logging(self):
        if self.config:
            logging_config = self.config.get_logging_config()
        else:
            logging_config = {
                'log_level': 'WARNING',
                'log_file': '',
                'max_log_size': 10485760,  # 10MB
                'backup_count': 5,
                'console': False,
            }

        log_level = getattr(logging, str(logging_config['log_level']).upper(), logging.WARNING)
        self.logger.setLevel(log_level)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        log_file = logging_config['log_file']
        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=log_file,
                    maxBytes=logging_config['max_log_size'],
                    backupCount=logging_config['backup_count'],
                    encoding='utf-8'
                )
                file_handler.setLevel(log_level)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

            except OSError as e:
                sys.stderr.write(f"Erreur lors de la configuration du logging fichier: {e}\n")

        if logging_config['console']:
            # stdout est réservé à la sortie JSON de la CLI
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(fmt='%(levelname)s - %(message)s'))
            self.logger.addHandler(console_handler)

        self.logger.debug("Système de logging initialisé")

    def get_logger(self) -> logging.Logger:
        return self.logger

    def reset(self):
        """Retire les handlers ajoutés, pour reconfigurer le logging"""
        for handler in list(self.logger.handlers):
            if isinstance(handler, logging.NullHandler):
                continue
            self.logger.removeHandler(handler)
            handler.close()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Fonction utilitaire pour récupérer un logger nommé

    Args:
        name: Nom du logger

    Returns:
        logging.Logger: Instance du logger
    """
    return logging.getLogger(name)
