"""
Interfaz del canal de notificación
"""
from abc import ABC, abstractmethod
from ..logger import LoggerService


class Notifier(ABC):
    """Destino que recibe el dump y los datos de la ejecución"""

    def __init__(self):
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    @abstractmethod
    def send(self, content: bytes, database_name: str, elapsed_seconds: float):
        """
        Entrega un dump

        Args:
            content: Contenido del dump en bytes
            database_name: Base de datos de origen
            elapsed_seconds: Segundos que tomó generar el dump

        Raises:
            NotificationError: si la entrega falla
        """
        pass
