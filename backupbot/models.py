"""
Modelos de datos del sistema
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .config import Config


BYTES_PER_MB = 1024 * 1024


def parse_schedule_time(time_str: str) -> Tuple[int, int]:
    """
    Parsea una hora HH:MM en formato 24h

    Args:
        time_str: Hora en formato HH:MM

    Returns:
        Tupla (hora, minuto)

    Raises:
        ValueError: si el formato o el rango no son válidos
    """
    try:
        parts = time_str.split(":")
        if len(parts) != 2:
            raise ValueError
        hours, minutes = int(parts[0]), int(parts[1])
    except (ValueError, AttributeError):
        raise ValueError(f"El formato de schedule debe ser HH:MM: {time_str!r}")

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Hora fuera de rango: {time_str!r}")
    return hours, minutes


@dataclass(frozen=True)
class DatabaseSettings:
    """Parámetros de conexión al servidor (la BD se indica por petición)"""
    host: str
    user: str
    password: str = ""
    port: int = 3306
    type: str = "mysql"
    charset: str = "utf8mb4"
    connect_timeout: int = 10

    def __post_init__(self):
        if not self.host:
            raise ValueError("El host de la base de datos es obligatorio")
        if not self.user:
            raise ValueError("El usuario de la base de datos es obligatorio")
        if not self.type:
            raise ValueError("El tipo de base de datos es obligatorio")


@dataclass(frozen=True)
class DumpSettings:
    """Opciones de generación del dump"""
    strict_escaping: bool = False


@dataclass(frozen=True)
class ScheduleSettings:
    """Configuración del backup automático diario"""
    time: str = Config.DEFAULT_SCHEDULE
    databases: Tuple[str, ...] = ()
    continue_on_error: bool = True

    def __post_init__(self):
        parse_schedule_time(self.time)

    @property
    def normalized_time(self) -> str:
        """Hora con ceros a la izquierda, tal como la espera ``schedule``"""
        hours, minutes = parse_schedule_time(self.time)
        return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True)
class PermissionSettings:
    """Roles autorizados para el comando manual"""
    roles: Tuple[str, ...] = ()
    no_permission_message: str = Config.DEFAULT_NO_PERMISSION_MESSAGE


@dataclass(frozen=True)
class EmbedSettings:
    """Textos del mensaje enviado junto al dump"""
    title: str = "Backup Bot"
    description: str = "Backup for database `${databaseName}` created"
    field_file_size: str = "File Size"
    field_creation_date: str = "Creation Date"
    field_duration: str = "Duration"
    footer: str = "Backup completed"
    color: int = 0xED4245


@dataclass(frozen=True)
class NotifierSettings:
    """Destino de las notificaciones"""
    webhook_url: str = ""
    embed: EmbedSettings = field(default_factory=EmbedSettings)
    timeout: int = 30


@dataclass(frozen=True)
class CommandSettings:
    """Comando manual de backup"""
    name: str = "backup"
    description: str = "Create a new database backup"
    option_name: str = "database"
    success_message: str = "Backup for ${databaseName} created"
    failure_message: str = "Backup for ${databaseName} failed: ${error}"


@dataclass(frozen=True)
class AppSettings:
    """Configuración completa, ensamblada una vez al arrancar"""
    database: DatabaseSettings
    dump: DumpSettings = field(default_factory=DumpSettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)
    permissions: PermissionSettings = field(default_factory=PermissionSettings)
    notifier: NotifierSettings = field(default_factory=NotifierSettings)
    command: CommandSettings = field(default_factory=CommandSettings)


@dataclass(frozen=True)
class BackupRequest:
    """Petición de backup de una base de datos"""
    database_name: str

    def __post_init__(self):
        if not self.database_name or not self.database_name.strip():
            raise ValueError("El nombre de la base de datos es obligatorio")


@dataclass(frozen=True)
class TableDescriptor:
    """Nombre y sentencia CREATE de una tabla"""
    name: str
    create_statement: str


@dataclass(frozen=True)
class DumpResult:
    """Contenido del dump y tiempo que tomó generarlo"""
    content: bytes
    elapsed_seconds: float

    @property
    def size_mb(self) -> float:
        return len(self.content) / BYTES_PER_MB


@dataclass
class BackupResult:
    """Resultado de una operación de backup"""
    database_name: str
    success: bool
    elapsed_seconds: float = 0.0
    size_bytes: int = 0
    error: Optional[str] = None

    def __str__(self):
        if self.success:
            return (f"✓ {self.database_name}: {self.size_bytes / BYTES_PER_MB:.2f} MB "
                    f"({self.elapsed_seconds:.2f}s)")
        else:
            return f"✗ {self.database_name}: {self.error}"


@dataclass(frozen=True)
class CommandReply:
    """Respuesta del comando manual para el solicitante"""
    message: str
    success: bool
