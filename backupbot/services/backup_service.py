"""
Servicio que ejecuta los backups y los entrega al canal de notificación
"""
from typing import Iterable, List, Optional
from ..logger import LoggerService
from ..models import BackupRequest, BackupResult, DumpResult, ScheduleSettings
from ..notifiers.base_notifier import Notifier
from ..strategies.base_strategy import DumpStrategy


class BackupService:
    """Ejecuta dumps de forma secuencial y los reenvía al notificador"""

    def __init__(self, strategy: DumpStrategy, notifier: Notifier,
                 schedule_settings: Optional[ScheduleSettings] = None):
        """
        Inicializa el servicio de backup

        Args:
            strategy: Estrategia que genera los dumps
            notifier: Destino de los dumps
            schedule_settings: Bases de datos del backup programado y política de errores
        """
        self.strategy = strategy
        self.notifier = notifier
        self.schedule_settings = schedule_settings or ScheduleSettings()
        self.logger = LoggerService.get_logger("BackupService")

    def run_manual(self, database_name: str) -> DumpResult:
        """
        Backup de una sola base de datos. Cualquier error se propaga.

        Args:
            database_name: Nombre de la base de datos

        Returns:
            Resultado del dump ya entregado
        """
        request = BackupRequest(database_name)
        return self._backup(request)

    def run_scheduled(self, database_names: Optional[Iterable[str]] = None) -> List[BackupResult]:
        """
        Backup secuencial de varias bases de datos

        Con ``continue_on_error`` un fallo se registra y se continúa con
        la siguiente base de datos; sin él, el primer fallo aborta la ejecución.

        Args:
            database_names: Bases de datos a respaldar (por defecto las configuradas)

        Returns:
            Lista de resultados, uno por base de datos intentada
        """
        names = list(database_names) if database_names is not None else list(self.schedule_settings.databases)

        self.logger.info("=" * 70)
        self.logger.info(f"INICIANDO BACKUP PROGRAMADO ({len(names)} base(s) de datos)")
        self.logger.info("=" * 70)

        results = []
        for name in names:
            self.logger.info("-" * 70)
            try:
                dump = self._backup(BackupRequest(name))
            except Exception as e:
                self.logger.error(f"Backup fallido de {name}: {e}", exc_info=True)
                results.append(BackupResult(database_name=name, success=False, error=str(e)))
                if not self.schedule_settings.continue_on_error:
                    self._print_summary(results)
                    raise
                continue

            results.append(BackupResult(
                database_name=name,
                success=True,
                elapsed_seconds=dump.elapsed_seconds,
                size_bytes=len(dump.content)
            ))

        self._print_summary(results)
        return results

    def _backup(self, request: BackupRequest) -> DumpResult:
        dump = self.strategy.execute_dump(request.database_name)
        self.notifier.send(dump.content, request.database_name, dump.elapsed_seconds)
        return dump

    def _print_summary(self, results: List[BackupResult]):
        """
        Imprime resumen de la operación de backup

        Args:
            results: Lista de resultados
        """
        success_count = sum(1 for r in results if r.success)
        failed_count = len(results) - success_count
        total_time = sum(r.elapsed_seconds for r in results)
        total_mb = sum(r.size_bytes for r in results) / (1024 * 1024)

        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DEL BACKUP PROGRAMADO")
        self.logger.info("=" * 70)

        for result in results:
            self.logger.info(str(result))

        self.logger.info("-" * 70)
        self.logger.info(f"Backups exitosos: {success_count}")
        self.logger.info(f"Backups fallidos: {failed_count}")
        self.logger.info(f"Tiempo total: {total_time:.2f}s")
        self.logger.info(f"Tamaño total: {total_mb:.2f} MB")
        self.logger.info("=" * 70)

        if failed_count > 0:
            self.logger.warning(
                f"ATENCIÓN: {failed_count} backup(s) fallaron. "
                "Revisa los errores arriba."
            )
