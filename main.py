#!/usr/bin/env python3
"""
Bot de backups de bases de datos MySQL/MariaDB
Punto de entrada principal

Uso:
    python main.py                              # Modo scheduler (automático)
    python main.py once                         # Backup programado una sola vez
    python main.py --db nombre_db --role ID     # Backup manual de una BD
    python main.py --init                       # Crear .env.example

Los roles de --role los declara quien ejecuta el CLI: es un sustituto local
de la consulta de roles que hace el front end de chat. Cualquiera con acceso
al CLI puede indicar un rol autorizado, así que restrinja quién lo ejecuta.
"""
import sys
import argparse
import traceback

from backupbot.config import Config
from backupbot.exceptions import ConfigurationError
from backupbot.factories.strategy_factory import DumpStrategyFactory
from backupbot.logger import LoggerService
from backupbot.models import AppSettings
from backupbot.notifiers import DiscordWebhookNotifier
from backupbot.repositories.config_repository import ConfigRepository
from backupbot.services import BackupService, CommandService, SchedulerService


def build_parser() -> argparse.ArgumentParser:
    """
    Construye el parser de línea de comandos

    Returns:
        ArgumentParser configurado
    """
    parser = argparse.ArgumentParser(
        description='Bot de backups de bases de datos MySQL/MariaDB',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                          # Iniciar servicio automático
  python main.py once                     # Ejecutar el backup programado una vez
  python main.py --db shop --role 1234    # Backup manual con los roles indicados
  python main.py --init                   # Crear .env.example
        """
    )

    parser.add_argument(
        'mode',
        nargs='?',
        choices=['once', 'scheduler'],
        default='scheduler',
        help='Modo de ejecución (default: scheduler)'
    )

    parser.add_argument(
        '--db',
        type=str,
        metavar='NOMBRE',
        help='Backup manual de una base de datos específica'
    )

    parser.add_argument(
        '--role',
        action='append',
        default=[],
        metavar='ID',
        help=('Rol del solicitante para el backup manual (repetible). '
              'Sustituto local de la consulta de roles del front end de chat: '
              'no se verifica, lo declara quien ejecuta el CLI')
    )

    parser.add_argument(
        '--init',
        action='store_true',
        help='Crear archivo .env.example'
    )

    parser.add_argument(
        '--now',
        action='store_true',
        help='Ejecutar backup inmediatamente al iniciar scheduler'
    )

    return parser


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    return build_parser().parse_args(argv)


def build_backup_service(settings: AppSettings) -> BackupService:
    """
    Ensambla estrategia, notificador y servicio de backup

    Args:
        settings: Configuración de la aplicación

    Returns:
        BackupService listo para usar
    """
    strategy = DumpStrategyFactory.create(settings.database, settings.dump)
    if strategy is None:
        raise ConfigurationError(f"Tipo de base de datos no soportado: {settings.database.type}")

    notifier = DiscordWebhookNotifier(settings.notifier)
    return BackupService(strategy, notifier, settings.schedule)


def main():
    """Función principal"""
    args = parse_arguments()
    logger = LoggerService.get_logger("Main")

    # Modo inicialización
    if args.init:
        if not ConfigRepository().create_example_env():
            sys.exit(1)
        logger.info(f"Copia {Config.ENV_EXAMPLE_FILE.name} como .env y completa tus credenciales")
        return

    try:
        settings = ConfigRepository().load()
        backup_service = build_backup_service(settings)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Error de configuración: {e}")
        logger.error("Ejecuta: python main.py --init")
        sys.exit(1)

    # Modo backup manual
    if args.db:
        command = CommandService(backup_service, settings.permissions, settings.command)
        reply = command.handle(args.role, args.db)
        logger.info(reply.message)
        sys.exit(0 if reply.success else 1)

    # Modo once (una sola ejecución)
    if args.mode == 'once':
        logger.info("Modo: Ejecución única")
        results = backup_service.run_scheduled()

        # Exit code basado en resultados
        failed = sum(1 for r in results if not r.success)
        sys.exit(1 if failed > 0 else 0)

    # Modo scheduler (por defecto)
    scheduler = SchedulerService(backup_service, settings.schedule)
    scheduler.start(run_immediately=args.now)


def run():
    """Ejecuta main() con el manejo de errores de nivel superior"""
    try:
        main()
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario")
        sys.exit(0)
    except Exception as e:
        print(f"Error crítico: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    run()
