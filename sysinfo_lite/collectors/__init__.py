"""
Package des collecteurs de données

Ce package contient :
- Le collecteur de base (classe abstraite, isolation par champ)
- Le normaliseur de valeurs brutes
- Les collecteurs CPU, RAM, GPU et OS
- Les sondes natives par plateforme
"""

from .cpu import CpuCollector
from .gpu import GpuCollector
from .operating_system import OsCollector
from .ram import RamCollector

__all__ = ['CpuCollector', 'GpuCollector', 'OsCollector', 'RamCollector']
