"""
Generación de dumps de MySQL/MariaDB
"""
from .mysql_dump_strategy import MySQLDumpStrategy
from .row_serializer import RowSerializer
from .table_dumper import TableDumper, quote_identifier

__all__ = [
    'MySQLDumpStrategy',
    'RowSerializer',
    'TableDumper',
    'quote_identifier'
]
