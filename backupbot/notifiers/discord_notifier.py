"""
Entrega de dumps a un canal de Discord mediante webhook
"""
import json
from datetime import datetime, timezone
from typing import Optional

import requests

from ..exceptions import NotificationError
from ..models import BYTES_PER_MB, EmbedSettings, NotifierSettings
from .base_notifier import Notifier


def build_filename(database_name: str, moment: datetime) -> str:
    """Nombre del adjunto: ``<db>-YYYY-MM-DD_HH-MM-SS.sql`` en UTC"""
    stamp = moment.astimezone(timezone.utc).strftime('%Y-%m-%d_%H-%M-%S')
    return f"{database_name}-{stamp}.sql"


def format_size_mb(size_bytes: int) -> str:
    return f"{size_bytes / BYTES_PER_MB:.2f} MB"


def build_embed(embed: EmbedSettings, database_name: str, size_bytes: int,
                elapsed_seconds: float, moment: datetime) -> dict:
    """
    Construye el embed que acompaña al adjunto

    Args:
        embed: Textos configurados
        database_name: Base de datos de origen
        size_bytes: Tamaño del dump
        elapsed_seconds: Duración del dump
        moment: Momento de la entrega (con zona horaria)

    Returns:
        Diccionario con el formato de embed de Discord
    """
    created = moment.astimezone().strftime('%Y-%m-%d %H:%M:%S')
    return {
        "title": embed.title,
        "description": embed.description.replace("${databaseName}", database_name),
        "color": embed.color,
        "fields": [
            {"name": embed.field_file_size, "value": format_size_mb(size_bytes), "inline": False},
            {"name": embed.field_creation_date, "value": created, "inline": False},
            {"name": embed.field_duration, "value": f"{elapsed_seconds:.2f} seconds", "inline": False},
        ],
        "timestamp": moment.astimezone(timezone.utc).isoformat(),
        "footer": {"text": embed.footer},
    }


class DiscordWebhookNotifier(Notifier):
    """Sube el dump como adjunto de un webhook de Discord"""

    def __init__(self, settings: NotifierSettings, session: Optional[requests.Session] = None):
        super().__init__()
        if not settings.webhook_url:
            raise ValueError("DISCORD_WEBHOOK_URL no está configurado")
        self.settings = settings
        self.session = session or requests.Session()

    def send(self, content: bytes, database_name: str, elapsed_seconds: float):
        moment = datetime.now(timezone.utc)
        filename = build_filename(database_name, moment)
        payload = {
            "embeds": [
                build_embed(self.settings.embed, database_name, len(content), elapsed_seconds, moment)
            ]
        }

        try:
            response = self.session.post(
                self.settings.webhook_url,
                data={"payload_json": json.dumps(payload)},
                files={"files[0]": (filename, content, "application/sql")},
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Error enviando {filename}: {e}")
            raise NotificationError(
                f"No se pudo entregar el backup de {database_name}: {e}", database=database_name
            ) from e

        self.logger.info(f"Backup entregado: {filename} ({format_size_mb(len(content))})")
