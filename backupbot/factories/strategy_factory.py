"""
Factory para crear estrategias de dump
"""
from typing import Optional
from ..models import DatabaseSettings, DumpSettings
from ..strategies.base_strategy import DumpStrategy
from ..strategies.mysql import MySQLDumpStrategy


class DumpStrategyFactory:
    """Factory para crear estrategias de dump (Factory Pattern)"""

    # Mapeo de tipos a estrategias
    _strategies = {
        'mysql': MySQLDumpStrategy,
        'mariadb': MySQLDumpStrategy,
    }

    @classmethod
    def create(cls, db_settings: DatabaseSettings,
               dump_settings: Optional[DumpSettings] = None) -> Optional[DumpStrategy]:
        """
        Crea la estrategia correspondiente al tipo de servidor configurado

        Args:
            db_settings: Parámetros de conexión (incluye el tipo)
            dump_settings: Opciones de generación del dump

        Returns:
            Instancia de DumpStrategy o None si el tipo no es soportado
        """
        strategy_class = cls._strategies.get(db_settings.type.lower())
        if strategy_class:
            return strategy_class(db_settings, dump_settings)
        return None

    @classmethod
    def register_strategy(cls, db_type: str, strategy_class: type):
        """
        Registra una nueva estrategia (permite extender sin modificar - Open/Closed)

        Args:
            db_type: Tipo de base de datos
            strategy_class: Clase que acepta (db_settings, dump_settings)
        """
        cls._strategies[db_type.lower()] = strategy_class

    @classmethod
    def get_supported_types(cls) -> list:
        """Lista de tipos de base de datos soportados"""
        return list(cls._strategies.keys())
