"""
Factories de la aplicación
"""
from .strategy_factory import DumpStrategyFactory

__all__ = ['DumpStrategyFactory']
