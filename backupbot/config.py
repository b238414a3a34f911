"""
Constantes y rutas del sistema de backup
"""
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv


class Config:
    """Rutas y constantes estáticas del proceso"""

    ENV_FILE = find_dotenv(usecwd=True)

    # Cargar variables de entorno desde la raíz real del proyecto
    load_dotenv(ENV_FILE)

    # BASE_DIR es la raíz donde está main.py
    BASE_DIR = Path(ENV_FILE).parent if ENV_FILE else Path(__file__).resolve().parents[1]

    LOG_DIR = Path(os.getenv("LOG_DIR")) if os.getenv("LOG_DIR") else (BASE_DIR / "Logs")
    ENV_EXAMPLE_FILE = BASE_DIR / ".env.example"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    DEFAULT_SCHEDULE = "00:00"
    DEFAULT_NO_PERMISSION_MESSAGE = "You do not have permission to execute this command"

    # Plantilla de .env.example
    ENV_EXAMPLE = """# Variables de entorno del bot de backups
# Copia este archivo como .env y completa con tus credenciales

# MySQL/MariaDB
DB_HOST=localhost
DB_PORT=3306
DB_USER=backup_user
DB_PASSWORD=tu_password_seguro
DB_TYPE=mysql

# Permisos del comando manual (IDs de rol separados por coma)
PERMISSION_ROLES=123456789012345678
NO_PERMISSION_MESSAGE=You do not have permission to execute this command

# Backup automático diario (HH:MM, 24h)
AUTO_BACKUP_TIME=00:00
AUTO_BACKUP_DATABASES=shop,crm
CONTINUE_ON_ERROR=true
STRICT_ESCAPING=false

# Canal de notificación
DISCORD_WEBHOOK_URL=https://discord.com/api/webhooks/ID/TOKEN
EMBED_TITLE=Backup Bot
EMBED_DESCRIPTION=Backup for database `${databaseName}` created
EMBED_FOOTER=Backup completed

LOG_LEVEL=INFO
"""

    @classmethod
    def ensure_directories(cls):
        """Crea los directorios necesarios si no existen"""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
