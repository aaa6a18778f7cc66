"""
Exceptions de System Info Lite

Seules les sondes natives et la configuration lèvent des exceptions.
Aucune ne traverse l'API publique : les collecteurs les convertissent
en champs absents (voir FieldUnavailable dans models).
"""


class SysInfoError(Exception):
    """Classe de base de toutes les erreurs du paquet"""


class ProbeError(SysInfoError):
    """
    Erreur plateforme levée par une sonde native

    Portée limitée à la seule donnée demandée (permission refusée,
    API absente, commande en échec ou expirée).
    """

    def __init__(self, message: str, fact: str = None):
        super().__init__(message)
        self.fact = fact


class ConfigError(SysInfoError):
    """Valeur de configuration invalide"""
