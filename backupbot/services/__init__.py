"""
Servicios de la aplicación
"""
from .backup_service import BackupService
from .command_service import CommandService
from .scheduler_service import SchedulerService

__all__ = [
    'BackupService',
    'CommandService',
    'SchedulerService'
]
