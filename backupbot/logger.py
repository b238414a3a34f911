"""
Servicio de logging del bot de backups
"""
import logging
import sys
from datetime import datetime
from .config import Config


class LoggerService:
    """Servicio centralizado de logging"""

    ROOT_NAME = "backupbot"

    _loggers = {}
    _configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Obtiene o crea un logger hijo de ``backupbot``

        Args:
            name: Nombre del componente (ej. "BackupService")

        Returns:
            Logger configurado
        """
        if name in cls._loggers:
            return cls._loggers[name]

        cls._setup_root()
        logger = logging.getLogger(f"{cls.ROOT_NAME}.{name}")
        cls._loggers[name] = logger
        return logger

    @classmethod
    def _setup_root(cls):
        """
        Configura una única vez los handlers del logger raíz del paquete.
        Los loggers hijos propagan hacia él.
        """
        if cls._configured:
            return

        root = logging.getLogger(cls.ROOT_NAME)
        root.setLevel(Config.LOG_LEVEL)

        # Evitar duplicar handlers
        if not root.handlers:
            formatter = logging.Formatter(Config.LOG_FORMAT)

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root.addHandler(console_handler)

            try:
                Config.ensure_directories()
                log_file = Config.LOG_DIR / f"backupbot_{datetime.now().strftime('%Y%m%d')}.log"
                file_handler = logging.FileHandler(log_file, encoding='utf-8')
                file_handler.setFormatter(formatter)
                root.addHandler(file_handler)
            except OSError as e:
                root.warning(f"No se pudo crear el log en archivo ({Config.LOG_DIR}): {e}")

        cls._configured = True
