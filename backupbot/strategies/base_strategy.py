"""
Estrategia base para dumps (Strategy Pattern)
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
import time
from ..exceptions import BackupBotError
from ..logger import LoggerService
from ..models import DumpResult


class DumpStrategy(ABC):
    """Interfaz abstracta para estrategias de dump (Open/Closed Principle)"""

    def __init__(self):
        """Inicializa la estrategia"""
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    @abstractmethod
    def connect(self, database_name: str):
        """
        Abre una conexión exclusiva a la base de datos

        Args:
            database_name: Nombre de la base de datos

        Returns:
            Conexión DB-API

        Raises:
            DatabaseConnectionError: si no se puede conectar
        """
        pass

    @abstractmethod
    def list_tables(self, conn) -> list:
        """Devuelve los nombres de las tablas en el orden del servidor"""
        pass

    @abstractmethod
    def dump_header(self, database_name: str) -> str:
        """Comentario inicial del dump"""
        pass

    @abstractmethod
    def dump_table(self, conn, table: str) -> str:
        """Fragmento de dump de una tabla"""
        pass

    @contextmanager
    def _open_connection(self, database_name: str):
        """
        Ámbito de la conexión: se cierra en todas las salidas.
        Si ``connect`` falla no hay nada que cerrar.
        """
        conn = self.connect(database_name)
        try:
            yield conn
        finally:
            try:
                conn.close()
            except Exception as e:
                # Un fallo al cerrar no debe ocultar el error original
                self.logger.warning(f"Error cerrando la conexión a {database_name}: {e}")

    def execute_dump(self, database_name: str) -> DumpResult:
        """
        Template method: genera el dump completo midiendo el tiempo

        Args:
            database_name: Nombre de la base de datos

        Returns:
            DumpResult con el contenido en bytes y los segundos transcurridos
        """
        self.logger.info(f"Iniciando dump de {database_name}...")

        with self._open_connection(database_name) as conn:
            start_time = time.time()
            table = None
            try:
                parts = [self.dump_header(database_name)]
                for table in self.list_tables(conn):
                    parts.append(self.dump_table(conn, table))
                table = None
                content = "".join(parts)
            except Exception as e:
                context = f" (tabla: {table})" if table is not None else ""
                self.logger.error(f"Error generando dump de `{database_name}`{context}: {e}")
                if isinstance(e, BackupBotError) and e.database is None:
                    e.database = database_name
                raise

            elapsed = round(time.time() - start_time, 2)

        result = DumpResult(content=content.encode("utf-8"), elapsed_seconds=elapsed)
        self.logger.info(
            f"Dump exitoso: {database_name} ({result.size_mb:.2f} MB, {elapsed:.2f}s)"
        )
        return result
