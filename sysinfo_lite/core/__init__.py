"""
Module Core - Composants principaux de System Info Lite

Ce module contient :
- Configuration
- Logging
- Agrégation des collecteurs
"""
