"""
Excepciones del sistema de backup
"""
from typing import Optional


class BackupBotError(Exception):
    """
    Excepción base del sistema

    Attributes:
        message: Mensaje de error
        database: Base de datos involucrada (opcional)
        table: Tabla involucrada (opcional)
    """

    def __init__(self, message: str, database: Optional[str] = None, table: Optional[str] = None):
        self.message = message
        self.database = database
        self.table = table
        super().__init__(message)


class ConfigurationError(BackupBotError):
    """Configuración inválida o incompleta"""


class DumpError(BackupBotError):
    """Error durante la generación de un dump"""


class DatabaseConnectionError(DumpError):
    """No se pudo abrir o autenticar la conexión"""


class IntrospectionError(DumpError):
    """Falló la consulta de tablas o de estructura"""


class RowFetchError(DumpError):
    """Falló la lectura de filas de una tabla"""


class SerializationError(DumpError):
    """Valor de un tipo que no se sabe serializar"""


class NotificationError(BackupBotError):
    """Falló la entrega del dump al canal de notificación"""
