"""
Tests unitarios para el sistema de backup
"""
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock
import json
import shutil
import sys
import tempfile

import pymysql
import requests
import schedule

# Agregar raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backupbot.config import Config
from backupbot.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    NotificationError,
    RowFetchError,
)
from backupbot.factories.strategy_factory import DumpStrategyFactory
from backupbot.models import (
    BackupRequest,
    BackupResult,
    CommandSettings,
    DatabaseSettings,
    DumpResult,
    DumpSettings,
    EmbedSettings,
    NotifierSettings,
    PermissionSettings,
    ScheduleSettings,
)
from backupbot.notifiers.base_notifier import Notifier
from backupbot.notifiers.discord_notifier import (
    DiscordWebhookNotifier,
    build_embed,
    build_filename,
    format_size_mb,
)
from backupbot.repositories.config_repository import ConfigRepository
from backupbot.services.backup_service import BackupService
from backupbot.services.command_service import CommandService
from backupbot.services.scheduler_service import SchedulerService
from backupbot.strategies.base_strategy import DumpStrategy
from backupbot.strategies.mysql import MySQLDumpStrategy
from tests.fakes import FakeConnector


class RecordingNotifier(Notifier):
    """Notificador que guarda lo recibido"""

    def __init__(self, error=None):
        super().__init__()
        self.sent = []
        self.error = error

    def send(self, content, database_name, elapsed_seconds):
        if self.error:
            raise self.error
        self.sent.append((content, database_name, elapsed_seconds))


class TestModels(unittest.TestCase):
    """Tests para modelos de datos"""

    def test_database_settings_validation(self):
        with self.assertRaises(ValueError):
            DatabaseSettings(host="", user="root")
        with self.assertRaises(ValueError):
            DatabaseSettings(host="localhost", user="")

    def test_schedule_time_validation(self):
        """Test validación de formato de hora"""
        for value in ["24:00", "12:60", "noon", "1:2:3", ""]:
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    ScheduleSettings(time=value)

    def test_schedule_time_bounds(self):
        self.assertEqual(ScheduleSettings(time="23:59").normalized_time, "23:59")
        self.assertEqual(ScheduleSettings(time="0:5").normalized_time, "00:05")

    def test_backup_request_requires_name(self):
        with self.assertRaises(ValueError):
            BackupRequest("  ")

    def test_dump_result_size(self):
        result = DumpResult(content=b"x" * (1024 * 1024), elapsed_seconds=1.5)
        self.assertEqual(result.size_mb, 1.0)

    def test_backup_result_str(self):
        ok = BackupResult(database_name="shop", success=True, elapsed_seconds=2.5, size_bytes=1024 * 1024)
        failed = BackupResult(database_name="crm", success=False, error="Access denied")
        self.assertIn("shop", str(ok))
        self.assertIn("1.00 MB", str(ok))
        self.assertIn("Access denied", str(failed))


class TestConfigRepository(unittest.TestCase):
    """Tests para ConfigRepository"""

    BASE_ENV = {
        "DB_HOST": "db.local",
        "DB_USER": "backup",
        "DB_PASSWORD": "secret",
    }

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_defaults(self):
        settings = ConfigRepository(dict(self.BASE_ENV)).load()

        self.assertEqual(settings.database.host, "db.local")
        self.assertEqual(settings.database.port, 3306)
        self.assertEqual(settings.database.type, "mysql")
        self.assertFalse(settings.dump.strict_escaping)
        self.assertEqual(settings.schedule.time, "00:00")
        self.assertEqual(settings.schedule.databases, ())
        self.assertTrue(settings.schedule.continue_on_error)
        self.assertEqual(settings.permissions.no_permission_message, Config.DEFAULT_NO_PERMISSION_MESSAGE)
        self.assertEqual(settings.notifier.embed.title, "Backup Bot")

    def test_lists_and_flags(self):
        env = dict(self.BASE_ENV,
                   DB_PORT="3307",
                   PERMISSION_ROLES=" 111, 222 ,,",
                   AUTO_BACKUP_DATABASES="shop, crm",
                   AUTO_BACKUP_TIME="03:30",
                   CONTINUE_ON_ERROR="false",
                   STRICT_ESCAPING="yes",
                   EMBED_TITLE="Backups",
                   NO_PERMISSION_MESSAGE="Nope")
        settings = ConfigRepository(env).load()

        self.assertEqual(settings.database.port, 3307)
        self.assertEqual(settings.permissions.roles, ("111", "222"))
        self.assertEqual(settings.permissions.no_permission_message, "Nope")
        self.assertEqual(settings.schedule.databases, ("shop", "crm"))
        self.assertEqual(settings.schedule.time, "03:30")
        self.assertFalse(settings.schedule.continue_on_error)
        self.assertTrue(settings.dump.strict_escaping)
        self.assertEqual(settings.notifier.embed.title, "Backups")

    def test_missing_required_value(self):
        with self.assertRaises(ConfigurationError):
            ConfigRepository({"DB_USER": "backup"}).load()

    def test_invalid_values(self):
        for key, value in [("DB_PORT", "abc"), ("AUTO_BACKUP_TIME", "25:00"), ("CONTINUE_ON_ERROR", "maybe")]:
            with self.subTest(key=key):
                with self.assertRaises(ConfigurationError):
                    ConfigRepository(dict(self.BASE_ENV, **{key: value})).load()

    def test_empty_flags_use_defaults(self):
        env = dict(self.BASE_ENV, CONTINUE_ON_ERROR="", STRICT_ESCAPING="  ")
        settings = ConfigRepository(env).load()

        self.assertTrue(settings.schedule.continue_on_error)
        self.assertFalse(settings.dump.strict_escaping)

    def test_create_example_env(self):
        target = self.temp_dir / ".env.example"
        self.assertTrue(ConfigRepository({}).create_example_env(target))
        content = target.read_text(encoding="utf-8")
        self.assertIn("DB_HOST=", content)
        self.assertIn("AUTO_BACKUP_DATABASES=", content)


class TestDumpStrategyFactory(unittest.TestCase):
    """Tests para DumpStrategyFactory"""

    def test_create_mysql_strategy(self):
        strategy = DumpStrategyFactory.create(DatabaseSettings(host="h", user="u"))
        self.assertIsInstance(strategy, MySQLDumpStrategy)

    def test_create_mariadb_strategy_with_settings(self):
        strategy = DumpStrategyFactory.create(
            DatabaseSettings(host="h", user="u", type="MariaDB"), DumpSettings(strict_escaping=True)
        )
        self.assertIsInstance(strategy, MySQLDumpStrategy)
        self.assertTrue(strategy.table_dumper.serializer.strict)

    def test_create_unsupported_strategy(self):
        self.assertIsNone(DumpStrategyFactory.create(DatabaseSettings(host="h", user="u", type="oracle")))

    def test_get_supported_types(self):
        types = DumpStrategyFactory.get_supported_types()
        self.assertIn('mysql', types)
        self.assertIn('mariadb', types)


class TestBackupService(unittest.TestCase):
    """Tests para BackupService"""

    def setUp(self):
        self.strategy = mock.create_autospec(DumpStrategy, instance=True)
        self.strategy.execute_dump.side_effect = lambda name: DumpResult(
            content=f"-- dump {name}\n".encode("utf-8"), elapsed_seconds=0.25
        )
        self.notifier = RecordingNotifier()

    def _service(self, **schedule_kwargs):
        return BackupService(self.strategy, self.notifier, ScheduleSettings(**schedule_kwargs))

    def test_run_manual_forwards_result(self):
        result = self._service().run_manual("shop")

        self.assertEqual(result.content, b"-- dump shop\n")
        self.assertEqual(self.notifier.sent, [(b"-- dump shop\n", "shop", 0.25)])

    def test_run_manual_propagates_errors(self):
        self.strategy.execute_dump.side_effect = DatabaseConnectionError("Access denied", database="shop")

        with self.assertRaises(DatabaseConnectionError):
            self._service().run_manual("shop")
        self.assertEqual(self.notifier.sent, [])

    def test_run_scheduled_uses_configured_databases(self):
        results = self._service(databases=("shop", "crm")).run_scheduled()

        self.assertEqual([r.database_name for r in results], ["shop", "crm"])
        self.assertTrue(all(r.success for r in results))
        self.assertEqual([sent[1] for sent in self.notifier.sent], ["shop", "crm"])
        self.assertEqual(results[0].size_bytes, len(b"-- dump shop\n"))

    def test_run_scheduled_continues_after_failure(self):
        def dump(name):
            if name == "crm":
                raise RowFetchError("Lost connection", database="crm", table="leads")
            return DumpResult(content=b"ok", elapsed_seconds=0.1)

        self.strategy.execute_dump.side_effect = dump
        results = self._service(databases=("shop", "crm", "blog")).run_scheduled()

        self.assertEqual([r.success for r in results], [True, False, True])
        self.assertIn("Lost connection", results[1].error)
        self.assertEqual([sent[1] for sent in self.notifier.sent], ["shop", "blog"])

    def test_run_scheduled_aborts_when_configured(self):
        self.strategy.execute_dump.side_effect = [
            DumpResult(content=b"ok", elapsed_seconds=0.1),
            DatabaseConnectionError("down", database="crm"),
        ]

        with self.assertRaises(DatabaseConnectionError):
            self._service(databases=("shop", "crm", "blog"), continue_on_error=False).run_scheduled()

        self.assertEqual(self.strategy.execute_dump.call_count, 2)

    def test_run_scheduled_records_delivery_failure(self):
        self.notifier.error = NotificationError("webhook down")
        results = self._service(databases=("shop",)).run_scheduled()

        self.assertFalse(results[0].success)
        self.assertIn("webhook down", results[0].error)

    def test_run_scheduled_explicit_names(self):
        results = self._service(databases=("shop",)).run_scheduled(["other"])
        self.assertEqual([r.database_name for r in results], ["other"])


class TestCommandService(unittest.TestCase):
    """Tests para CommandService"""

    def setUp(self):
        self.connector = FakeConnector()
        strategy = MySQLDumpStrategy(DatabaseSettings(host="h", user="u"), connector=self.connector)
        self.notifier = RecordingNotifier()
        self.backup_service = BackupService(strategy, self.notifier)
        self.permissions = PermissionSettings(roles=("admin-role", "ops-role"), no_permission_message="Denied")
        self.command = CommandService(self.backup_service, self.permissions, CommandSettings())

    def test_is_authorized(self):
        self.assertTrue(self.command.is_authorized(["guest", "ops-role"]))
        self.assertFalse(self.command.is_authorized(["guest"]))
        self.assertFalse(self.command.is_authorized([]))

    def test_unauthorized_never_connects(self):
        reply = self.command.handle(["guest"], "shop")

        self.assertFalse(reply.success)
        self.assertEqual(reply.message, "Denied")
        self.assertEqual(self.connector.calls, [])
        self.assertEqual(self.notifier.sent, [])

    def test_authorized_runs_backup(self):
        reply = self.command.handle(["admin-role"], "shop")

        self.assertTrue(reply.success)
        self.assertEqual(reply.message, "Backup for shop created")
        self.assertEqual(len(self.connector.calls), 1)
        self.assertEqual(self.notifier.sent[0][1], "shop")

    def test_failure_is_reported_to_requester(self):
        self.connector.error = pymysql.err.OperationalError(1049, "Unknown database")
        reply = self.command.handle(["admin-role"], "missing")

        self.assertFalse(reply.success)
        self.assertIn("Backup for missing failed", reply.message)
        self.assertEqual(self.notifier.sent, [])


class TestSchedulerService(unittest.TestCase):
    """Tests para SchedulerService"""

    def setUp(self):
        self.backup_service = mock.create_autospec(BackupService, instance=True)
        self.backup_service.run_scheduled.return_value = [BackupResult(database_name="shop", success=True)]
        self.settings = ScheduleSettings(time="2:30", databases=("shop", "crm"))
        self.scheduler = schedule.Scheduler()
        self.service = SchedulerService(self.backup_service, self.settings, scheduler=self.scheduler)

    def test_register_daily_job(self):
        job = self.service.register()

        self.assertIs(self.service.register(), job)
        self.assertEqual(len(self.scheduler.jobs), 1)
        self.assertEqual(job.unit, "days")
        self.assertEqual((job.at_time.hour, job.at_time.minute), (2, 30))
        self.assertNotEqual(self.service.get_next_run(), "No hay ejecuciones programadas")

    def test_next_run_without_jobs(self):
        self.assertEqual(self.service.get_next_run(), "No hay ejecuciones programadas")

    def test_job_runs_configured_databases(self):
        self.service._run_daily_backup_job()
        self.backup_service.run_scheduled.assert_called_once_with(("shop", "crm"))

    def test_job_errors_do_not_escape(self):
        self.backup_service.run_scheduled.side_effect = RuntimeError("boom")
        self.service._run_daily_backup_job()

    def test_start_run_immediately_and_stop(self):
        with mock.patch("backupbot.services.scheduler_service.signal.signal"), \
                mock.patch("backupbot.services.scheduler_service.time.sleep",
                           side_effect=lambda _: self.service.stop()):
            self.service.start(run_immediately=True)

        self.backup_service.run_scheduled.assert_called_once_with(("shop", "crm"))
        self.assertFalse(self.service.running)
        self.assertEqual(self.scheduler.jobs, [])


class TestDiscordWebhookNotifier(unittest.TestCase):
    """Tests para DiscordWebhookNotifier"""

    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.settings = NotifierSettings(webhook_url="https://discord.test/webhook", embed=EmbedSettings())

    def test_build_filename_uses_utc(self):
        moment = datetime(2026, 10, 19, 8, 30, 5, 123000, tzinfo=timezone.utc)
        self.assertEqual(build_filename("shop", moment), "shop-2026-10-19_08-30-05.sql")

    def test_format_size_mb(self):
        self.assertEqual(format_size_mb(1024 * 1024), "1.00 MB")
        self.assertEqual(format_size_mb(1536 * 1024), "1.50 MB")
        self.assertEqual(format_size_mb(0), "0.00 MB")

    def test_build_embed(self):
        moment = datetime(2026, 10, 19, 8, 30, 5, tzinfo=timezone.utc)
        embed = build_embed(EmbedSettings(), "shop", 2 * 1024 * 1024, 1.5, moment)

        self.assertEqual(embed["description"], "Backup for database `shop` created")
        values = {field["name"]: field["value"] for field in embed["fields"]}
        self.assertEqual(values["File Size"], "2.00 MB")
        self.assertEqual(values["Duration"], "1.50 seconds")
        self.assertIn("Creation Date", values)
        self.assertEqual(embed["color"], 0xED4245)
        self.assertEqual(embed["footer"], {"text": "Backup completed"})

    def test_send_posts_file_and_embed(self):
        notifier = DiscordWebhookNotifier(self.settings, session=self.session)
        notifier.send(b"-- dump\n", "shop", 0.5)

        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://discord.test/webhook")
        filename, content, _ = kwargs["files"]["files[0]"]
        self.assertTrue(filename.startswith("shop-") and filename.endswith(".sql"))
        self.assertEqual(content, b"-- dump\n")
        payload = json.loads(kwargs["data"]["payload_json"])
        self.assertEqual(payload["embeds"][0]["title"], "Backup Bot")
        self.session.post.return_value.raise_for_status.assert_called_once_with()

    def test_send_http_error(self):
        self.session.post.return_value.raise_for_status.side_effect = requests.HTTPError("413")
        notifier = DiscordWebhookNotifier(self.settings, session=self.session)

        with self.assertRaises(NotificationError) as ctx:
            notifier.send(b"x", "shop", 0.1)
        self.assertEqual(ctx.exception.database, "shop")

    def test_requires_webhook_url(self):
        with self.assertRaises(ValueError):
            DiscordWebhookNotifier(NotifierSettings())


if __name__ == '__main__':
    unittest.main()
