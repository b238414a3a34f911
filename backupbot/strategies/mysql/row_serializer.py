import datetime
import math
from decimal import Decimal

from pymysql.converters import escape_string, escape_timedelta

from ...exceptions import SerializationError


class RowSerializer:
    """
    Convierte una fila en una tupla de literales SQL: ``(1, 'A', NULL)``

    Por defecto solo se escapa la comilla simple (``'`` -> ``\\'``).
    Con ``strict=True`` se aplican las reglas de escape de MySQL
    (NUL, barra invertida, saltos de línea, Ctrl-Z y comillas).
    """

    _TEMPORAL_TYPES = (datetime.datetime, datetime.date, datetime.time)

    def __init__(self, strict: bool = False):
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def serialize(self, row) -> str:
        """
        Serializa una fila respetando el orden de sus columnas

        Args:
            row: Secuencia de valores tal como la devuelve el cursor

        Returns:
            Lista de literales separados por coma, entre paréntesis

        Raises:
            SerializationError: si algún valor es de un tipo no soportado
        """
        values = []
        for index, value in enumerate(row):
            try:
                values.append(self.literal(value))
            except SerializationError as e:
                raise SerializationError(f"Columna {index}: {e.message}") from None
        return "(" + ", ".join(values) + ")"

    def literal(self, value) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, str):
            return self.quote(value)
        # bool antes que int: bool es subclase de int
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, (float, Decimal)):
            finite = value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)
            if not finite:
                raise SerializationError(f"Valor numérico no representable: {value!r}")
            return str(value)
        # TIME admite valores negativos y mayores de 24h: '-01:00:00', '25:00:00'
        if isinstance(value, datetime.timedelta):
            return escape_timedelta(value)
        if isinstance(value, self._TEMPORAL_TYPES):
            return self.quote(str(value))
        if isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            return "0x" + raw.hex() if raw else "''"
        raise SerializationError(f"Tipo no soportado: {type(value).__name__}")

    def quote(self, text: str) -> str:
        if self._strict:
            return "'" + escape_string(text) + "'"
        return "'" + text.replace("'", "\\'") + "'"
