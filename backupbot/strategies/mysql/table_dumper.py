import pymysql

from ...exceptions import IntrospectionError, RowFetchError, SerializationError
from ...models import TableDescriptor
from .row_serializer import RowSerializer


def quote_identifier(name: str) -> str:
    """Encierra un identificador entre backticks, duplicando los internos"""
    return "`" + name.replace("`", "``") + "`"


class TableDumper:
    """Genera la estructura y los INSERT de una tabla"""

    def __init__(self, serializer: RowSerializer, logger):
        self.serializer = serializer
        self.logger = logger

    def describe(self, conn, table: str) -> TableDescriptor:
        """
        Obtiene la sentencia CREATE TABLE de una tabla

        Raises:
            IntrospectionError: si falla ``SHOW CREATE TABLE``
        """
        try:
            with conn.cursor() as cursor:
                cursor.execute(f"SHOW CREATE TABLE {quote_identifier(table)}")
                row = cursor.fetchone()
        except pymysql.MySQLError as e:
            raise IntrospectionError(
                f"No se pudo obtener la estructura de {table}: {e}", table=table
            ) from e

        if not row or len(row) < 2:
            raise IntrospectionError(f"SHOW CREATE TABLE no devolvió datos para {table}", table=table)

        return TableDescriptor(name=table, create_statement=row[1])

    def fetch_rows(self, conn, table: str):
        try:
            with conn.cursor() as cursor:
                cursor.execute(f"SELECT * FROM {quote_identifier(table)}")
                return cursor.fetchall()
        except pymysql.MySQLError as e:
            raise RowFetchError(f"No se pudieron leer las filas de {table}: {e}", table=table) from e

    def dump(self, conn, table: str) -> str:
        """
        Genera el fragmento de dump de una tabla

        Args:
            conn: Conexión abierta (DB-API)
            table: Nombre de la tabla

        Returns:
            Texto con la estructura y, si hay filas, un INSERT por fila
        """
        descriptor = self.describe(conn, table)
        rows = self.fetch_rows(conn, table)
        quoted = quote_identifier(table)

        parts = [f"\n\n-- Structure for table {quoted}\n{descriptor.create_statement};\n"]

        if rows:
            parts.append(f"\n-- Data for table {quoted}\n")
            for row in rows:
                try:
                    values = self.serializer.serialize(row)
                except SerializationError as e:
                    e.table = table
                    raise
                parts.append(f"INSERT INTO {quoted} VALUES {values};\n")

        self.logger.debug(f"Tabla {table}: {len(rows)} fila(s)")
        return "".join(parts)
