"""
Canales de notificación
"""
from .base_notifier import Notifier
from .discord_notifier import DiscordWebhookNotifier

__all__ = [
    'Notifier',
    'DiscordWebhookNotifier'
]
