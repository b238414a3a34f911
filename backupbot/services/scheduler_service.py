"""
Servicio de programación del backup diario
"""
import schedule
import time
import signal
from typing import Optional
from ..logger import LoggerService
from ..models import ScheduleSettings
from .backup_service import BackupService


class SchedulerService:
    """Servicio para programar y ejecutar backups automáticos"""

    def __init__(self, backup_service: BackupService, schedule_settings: ScheduleSettings,
                 scheduler: Optional[schedule.Scheduler] = None, poll_interval: int = 30):
        """
        Inicializa el servicio de programación

        Args:
            backup_service: Servicio de backup a ejecutar
            schedule_settings: Hora diaria y bases de datos a respaldar
            scheduler: Instancia de ``schedule.Scheduler`` (una propia por defecto)
            poll_interval: Segundos entre revisiones de tareas pendientes
        """
        self.backup_service = backup_service
        self.schedule_settings = schedule_settings
        self.scheduler = scheduler or schedule.Scheduler()
        self.poll_interval = poll_interval
        self.logger = LoggerService.get_logger("SchedulerService")
        self.running = False
        self.job = None

    def register(self):
        """Registra la tarea diaria (idempotente)"""
        if self.job is None:
            self.job = self.scheduler.every().day.at(self.schedule_settings.normalized_time).do(
                self._run_daily_backup_job
            )
        return self.job

    def start(self, run_immediately: bool = False):
        """
        Inicia el programador de tareas; bloquea hasta recibir SIGINT/SIGTERM

        Args:
            run_immediately: Si es True, ejecuta un backup inmediatamente al iniciar
        """
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        self.register()

        self.logger.info("=" * 70)
        self.logger.info("SERVICIO DE BACKUP AUTOMÁTICO INICIADO")
        self.logger.info("=" * 70)
        self.logger.info(f"Backup diario a las {self.schedule_settings.normalized_time}")
        self.logger.info(f"Bases de datos configuradas: {len(self.schedule_settings.databases)}")
        for name in self.schedule_settings.databases:
            self.logger.info(f"  - {name}")
        policy = "continuar" if self.schedule_settings.continue_on_error else "abortar"
        self.logger.info(f"Ante un fallo: {policy}")
        self.logger.info("-" * 70)
        self.logger.info(f"Próxima ejecución: {self.get_next_run()}")
        self.logger.info("Presiona Ctrl+C para detener el servicio")
        self.logger.info("=" * 70)

        if run_immediately:
            self.logger.info("Ejecutando backup inicial...")
            self._run_daily_backup_job()

        # Loop principal
        self.running = True
        while self.running:
            self.scheduler.run_pending()
            time.sleep(self.poll_interval)

        self._shutdown()

    def stop(self):
        self.running = False

    def _run_daily_backup_job(self):
        """Ejecuta el trabajo de backup diario"""
        try:
            self.logger.info(f"Ejecutando backup programado a las {time.strftime('%Y-%m-%d %H:%M:%S')}")
            results = self.backup_service.run_scheduled(self.schedule_settings.databases)

            failed = [r for r in results if not r.success]
            if failed:
                self.logger.warning(
                    f"Backup diario completado con {len(failed)} error(es). "
                    "Revisa los logs para más detalles."
                )
            else:
                self.logger.info("Backup diario completado exitosamente")

        except Exception as e:
            self.logger.error(f"Error crítico durante backup: {e}", exc_info=True)

    def _signal_handler(self, signum, frame):
        """
        Manejador de señales para shutdown graceful

        Args:
            signum: Número de señal
            frame: Frame actual
        """
        try:
            signal_name = signal.Signals(signum).name
        except ValueError:
            signal_name = str(signum)

        self.logger.info(f"Señal recibida: {signal_name}")
        self.stop()

    def _shutdown(self):
        """Detiene el servicio de forma ordenada"""
        self.logger.info("Deteniendo servicio de backup...")
        self.scheduler.clear()
        self.job = None
        self.logger.info("Servicio detenido correctamente")

    def get_next_run(self) -> str:
        """
        Obtiene la fecha de la próxima ejecución

        Returns:
            String con la fecha de la próxima ejecución
        """
        next_run = self.scheduler.next_run
        if next_run:
            return next_run.strftime('%Y-%m-%d %H:%M:%S')
        return "No hay ejecuciones programadas"
