import pymysql

from ..base_strategy import DumpStrategy
from ...exceptions import DatabaseConnectionError, IntrospectionError
from ...models import DatabaseSettings, DumpSettings
from .row_serializer import RowSerializer
from .table_dumper import TableDumper


class MySQLDumpStrategy(DumpStrategy):
    """Dump de MySQL/MariaDB generado con consultas SHOW/SELECT"""

    def __init__(self, db_settings: DatabaseSettings, dump_settings: DumpSettings = None,
                 connector=pymysql.connect):
        super().__init__()
        self.db_settings = db_settings
        self.dump_settings = dump_settings or DumpSettings()
        self._connector = connector
        self.table_dumper = TableDumper(
            RowSerializer(strict=self.dump_settings.strict_escaping), self.logger
        )

    def connect(self, database_name: str):
        try:
            self.logger.info(f"[MYSQL] Connecting to {self.db_settings.host}/{database_name}")
            return self._connector(
                host=self.db_settings.host,
                port=self.db_settings.port,
                user=self.db_settings.user,
                password=self.db_settings.password,
                database=database_name,
                charset=self.db_settings.charset,
                connect_timeout=self.db_settings.connect_timeout,
            )
        except pymysql.MySQLError as e:
            self.logger.error(f"[MYSQL] Connection error ({database_name}): {e}")
            raise DatabaseConnectionError(
                f"No se pudo conectar a {database_name}: {e}", database=database_name
            ) from e

    def list_tables(self, conn) -> list:
        try:
            with conn.cursor() as cursor:
                cursor.execute("SHOW TABLES")
                return [row[0] for row in cursor.fetchall()]
        except pymysql.MySQLError as e:
            raise IntrospectionError(f"No se pudieron listar las tablas: {e}") from e

    def dump_header(self, database_name: str) -> str:
        return f"-- MySQL dump for database: {database_name}\n"

    def dump_table(self, conn, table: str) -> str:
        return self.table_dumper.dump(conn, table)
