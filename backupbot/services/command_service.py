"""
Comando manual de backup protegido por roles
"""
from typing import Iterable
from ..exceptions import BackupBotError
from ..logger import LoggerService
from ..models import CommandReply, CommandSettings, PermissionSettings
from .backup_service import BackupService


class CommandService:
    """Valida los permisos del solicitante y lanza un backup manual"""

    def __init__(self, backup_service: BackupService, permissions: PermissionSettings,
                 command: CommandSettings = None):
        self.backup_service = backup_service
        self.permissions = permissions
        self.command = command or CommandSettings()
        self.logger = LoggerService.get_logger("CommandService")

    def is_authorized(self, principal_roles: Iterable[str]) -> bool:
        """True si el solicitante tiene al menos uno de los roles autorizados"""
        allowed = set(self.permissions.roles)
        return any(role in allowed for role in principal_roles)

    def handle(self, principal_roles: Iterable[str], database_name: str) -> CommandReply:
        """
        Atiende una invocación del comando

        Args:
            principal_roles: Roles del solicitante
            database_name: Base de datos a respaldar

        Returns:
            CommandReply con el mensaje para el solicitante
        """
        if not self.is_authorized(principal_roles):
            self.logger.warning(f"Comando /{self.command.name} rechazado para {database_name}: sin permisos")
            return CommandReply(self.permissions.no_permission_message, success=False)

        self.logger.info(f"Backup manual solicitado: {database_name}")
        try:
            self.backup_service.run_manual(database_name)
        except (BackupBotError, ValueError) as e:
            self.logger.error(f"Backup manual fallido de {database_name}: {e}")
            message = (self.command.failure_message
                       .replace("${databaseName}", database_name)
                       .replace("${error}", str(e)))
            return CommandReply(message, success=False)

        return CommandReply(self.command.success_message.replace("${databaseName}", database_name), success=True)
