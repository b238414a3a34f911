"""
Repositorio que construye la configuración a partir del entorno
"""
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple
from ..config import Config
from ..exceptions import ConfigurationError
from ..logger import LoggerService
from ..models import (
    AppSettings,
    CommandSettings,
    DatabaseSettings,
    DumpSettings,
    EmbedSettings,
    NotifierSettings,
    PermissionSettings,
    ScheduleSettings,
)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigRepository:
    """Repositorio para manejar configuración"""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            env: Variables de entorno (por defecto ``os.environ``, ya cargado desde .env)
        """
        self.env = env if env is not None else os.environ
        self.logger = LoggerService.get_logger("ConfigRepository")

    def load(self) -> AppSettings:
        """
        Construye la configuración inmutable de la aplicación

        Returns:
            AppSettings

        Raises:
            ConfigurationError: si falta un valor obligatorio o alguno es inválido
        """
        try:
            settings = AppSettings(
                database=DatabaseSettings(
                    host=self._require("DB_HOST"),
                    user=self._require("DB_USER"),
                    password=self._get("DB_PASSWORD", ""),
                    port=self._get_int("DB_PORT", 3306),
                    type=self._get("DB_TYPE", "mysql"),
                ),
                dump=DumpSettings(
                    strict_escaping=self._get_bool("STRICT_ESCAPING", False),
                ),
                schedule=ScheduleSettings(
                    time=self._get("AUTO_BACKUP_TIME", Config.DEFAULT_SCHEDULE),
                    databases=self._get_list("AUTO_BACKUP_DATABASES"),
                    continue_on_error=self._get_bool("CONTINUE_ON_ERROR", True),
                ),
                permissions=PermissionSettings(
                    roles=self._get_list("PERMISSION_ROLES"),
                    no_permission_message=self._get(
                        "NO_PERMISSION_MESSAGE", Config.DEFAULT_NO_PERMISSION_MESSAGE
                    ),
                ),
                notifier=NotifierSettings(
                    webhook_url=self._get("DISCORD_WEBHOOK_URL", ""),
                    embed=self._load_embed(),
                ),
                command=CommandSettings(
                    name=self._get("COMMAND_NAME", "backup"),
                    description=self._get("COMMAND_DESCRIPTION", "Create a new database backup"),
                    option_name=self._get("COMMAND_OPTION_NAME", "database"),
                ),
            )
        except ValueError as e:
            self.logger.error(f"Configuración inválida: {e}")
            raise ConfigurationError(str(e)) from e

        self.logger.info(
            f"Configuración cargada: {settings.database.type}://{settings.database.host}:{settings.database.port}"
        )
        return settings

    def _load_embed(self) -> EmbedSettings:
        defaults = EmbedSettings()
        return EmbedSettings(
            title=self._get("EMBED_TITLE", defaults.title),
            description=self._get("EMBED_DESCRIPTION", defaults.description),
            field_file_size=self._get("EMBED_FIELDS_FILESIZE", defaults.field_file_size),
            field_creation_date=self._get("EMBED_FIELDS_CREATIONDATE", defaults.field_creation_date),
            field_duration=self._get("EMBED_FIELDS_DURATION", defaults.field_duration),
            footer=self._get("EMBED_FOOTER", defaults.footer),
        )

    def _get(self, key: str, default: str) -> str:
        value = self.env.get(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _require(self, key: str) -> str:
        value = self._get(key, "")
        if not value:
            raise ValueError(f"Variable de entorno obligatoria no definida: {key}")
        return value

    def _get_int(self, key: str, default: int) -> int:
        raw = self._get(key, str(default))
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{key} debe ser un número entero: {raw!r}")

    def _get_bool(self, key: str, default: bool) -> bool:
        raw = self.env.get(key)
        # Una variable vacía (CLAVE=) cuenta como no definida
        if raw is None or not raw.strip():
            return default
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"{key} debe ser true/false: {raw!r}")

    def _get_list(self, key: str) -> Tuple[str, ...]:
        """Lista separada por comas, sin espacios ni elementos vacíos"""
        raw = self.env.get(key, "")
        return tuple(item.strip() for item in raw.split(",") if item.strip())

    def create_example_env(self, path: Optional[Path] = None) -> bool:
        """
        Crea un archivo .env de ejemplo

        Args:
            path: Ruta destino (por defecto ``Config.ENV_EXAMPLE_FILE``)

        Returns:
            True si se creó exitosamente
        """
        target = path or Config.ENV_EXAMPLE_FILE
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(Config.ENV_EXAMPLE, encoding='utf-8')
            self.logger.info(f"Archivo de ejemplo creado: {target}")
            return True
        except OSError as e:
            self.logger.error(f"Error creando {target}: {e}")
            return False
