"""
Estrategias de dump para diferentes motores de BD
"""
from .base_strategy import DumpStrategy
from .mysql import MySQLDumpStrategy

__all__ = [
    'DumpStrategy',
    'MySQLDumpStrategy'
]
