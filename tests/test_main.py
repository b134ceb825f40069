"""
Тесты для модуля main.py
"""

import pytest
from unittest.mock import Mock, patch
import argparse
from datetime import datetime
from pathlib import Path

from scan_archiver.main import ScanArchiverCLI, create_parser, main
from scan_archiver.config_loader import Config, PathsConfig, ClassifierConfig, WatcherConfig, LoggingConfig
from scan_archiver.relocator import BatchReport, FileFailure, RelocationStats
from scan_archiver.classifier import MissingSeparatorError
from scan_archiver.file_ops import FileOperationError


class TestScanArchiverCLI:
    """Тесты для класса ScanArchiverCLI."""

    @pytest.fixture
    def mock_config(self):
        """Создает конфигурацию для тестов."""
        return Config(
            paths=PathsConfig(source_path=Path('inbox'), target_path=Path('archive')),
            classifier=ClassifierConfig(),
            watcher=WatcherConfig(poll_interval=1.0),
            logging=LoggingConfig(
                level='INFO',
                log_file=Path('logs/test.log'),
                max_log_size=10,
                backup_count=5
            )
        )

    @pytest.fixture
    def mock_watcher(self):
        """Создает мок цикла опроса."""
        return Mock()

    @pytest.fixture
    def cli(self, mock_config, mock_watcher):
        """Создает CLI с подставленными зависимостями."""
        cli = ScanArchiverCLI()
        cli.config = mock_config
        cli.logger = Mock()
        cli.watcher = mock_watcher
        return cli

    @patch('scan_archiver.main.load_config')
    @patch('scan_archiver.main.ScanArchiverLogger')
    @patch('scan_archiver.main.create_watcher')
    def test_setup_success(self, mock_create_watcher, mock_logger_class, mock_load_config, mock_config):
        """Тест успешной инициализации CLI."""
        mock_load_config.return_value = mock_config
        mock_logger_instance = Mock()
        mock_logger_class.return_value = mock_logger_instance
        mock_watcher_instance = Mock()
        mock_create_watcher.return_value = mock_watcher_instance

        cli = ScanArchiverCLI()
        result = cli.setup("test_config.ini")

        assert result is True
        assert cli.config == mock_config
        assert cli.logger == mock_logger_instance
        assert cli.watcher == mock_watcher_instance

        mock_load_config.assert_called_once_with("test_config.ini")
        mock_logger_class.assert_called_once_with(mock_config.logging)
        mock_create_watcher.assert_called_once_with(mock_config, mock_logger_instance)
        mock_logger_instance.log_config_loaded.assert_called_once_with("test_config.ini")

    @patch('scan_archiver.main.load_config')
    def test_setup_failure(self, mock_load_config):
        """Тест неудачной инициализации CLI."""
        mock_load_config.side_effect = ValueError("Config error")

        cli = ScanArchiverCLI()
        result = cli.setup("test_config.ini")

        assert result is False
        assert cli.config is None
        assert cli.logger is None
        assert cli.watcher is None

    def test_cmd_run_once_success(self, cli, mock_watcher):
        """Тест успешного прохода."""
        report = BatchReport(1)
        report.archived.append((Path('inbox/a_01012024.pdf'), Path('archive/2024/01/01/a.pdf')))
        mock_watcher.run_once.return_value = report

        assert cli.cmd_run_once(Mock()) == 0
        mock_watcher.run_once.assert_called_once()

    def test_cmd_run_once_with_failures(self, cli, mock_watcher, capsys):
        """Тест прохода с ошибками по отдельным файлам."""
        report = BatchReport(1)
        report.archived.append((Path('inbox/a_01012024.pdf'), Path('archive/2024/01/01/a.pdf')))
        report.failures.append(FileFailure(Path('inbox/notes.txt'), MissingSeparatorError('notes.txt')))
        report.failures.append(FileFailure(Path('inbox/b_01012024.pdf'), FileOperationError('disk full')))
        mock_watcher.run_once.return_value = report

        assert cli.cmd_run_once(Mock()) == 1

        output = capsys.readouterr().out
        assert "Заархивировано: 1" in output
        assert "Отклонено: 1" in output
        assert "Ошибок ввода-вывода: 1" in output
        assert "notes.txt" in output

    def test_cmd_run_once_empty(self, cli, mock_watcher):
        """Тест прохода по пустому каталогу."""
        mock_watcher.run_once.return_value = BatchReport(1)

        assert cli.cmd_run_once(Mock()) == 0

    def test_cmd_run_once_inbox_unreadable(self, cli, mock_watcher):
        """Тест прохода при недоступном входящем каталоге."""
        mock_watcher.run_once.return_value = None

        assert cli.cmd_run_once(Mock()) == 1

    def test_cmd_watch(self, cli, mock_watcher):
        """Тест команды наблюдения."""
        mock_watcher.run_forever.return_value = RelocationStats()
        mock_watcher.passes = 2
        args = Mock()
        args.max_passes = 2

        assert cli.cmd_watch(args) == 0
        mock_watcher.run_forever.assert_called_once_with(max_passes=2)

    def test_cmd_watch_counts_skipped_passes(self, cli, mock_watcher, capsys):
        """Тест: проходы с недоступным каталогом входят в число проходов."""
        stats = RelocationStats()
        stats.batch_count = 1
        stats.processed_files = 4
        stats.archived_files = 3
        stats.rejected_files = 1
        stats.start_time = datetime(2024, 1, 1, 10, 0, 0)
        stats.end_time = datetime(2024, 1, 1, 10, 0, 30)
        mock_watcher.run_forever.return_value = stats
        mock_watcher.passes = 3
        args = Mock()
        args.max_passes = 3

        assert cli.cmd_watch(args) == 0

        output = capsys.readouterr().out
        assert "Проходов: 3" in output
        assert "Заархивировано: 3" in output
        assert "Отклонено: 1" in output
        assert "Успешность: 75.0%" in output
        assert "Время работы: 30.0 сек" in output

    def test_cmd_watch_interrupted(self, cli, mock_watcher):
        """Тест остановки наблюдения пользователем."""
        mock_watcher.run_forever.side_effect = KeyboardInterrupt
        args = Mock()
        args.max_passes = None

        assert cli.cmd_watch(args) == 0

    def test_cmd_classify(self, cli, capsys):
        """Тест проверки имен файлов."""
        args = Mock()
        args.names = ['example-about_01102024.txt']

        assert cli.cmd_classify(args) == 0

        output = capsys.readouterr().out
        assert str(Path('archive/2024/10/01/example-about.txt')) in output

    def test_cmd_classify_rejected(self, cli, capsys):
        """Тест проверки некорректных имен файлов."""
        args = Mock()
        args.names = ['example-about_01102024.txt', 'example-about.txt', 'about_32132024.txt']

        assert cli.cmd_classify(args) == 1

        output = capsys.readouterr().out
        assert "[separator]" in output
        assert "[date]" in output

    def test_cmd_status(self, cli, mock_watcher):
        """Тест просмотра статистики."""
        mock_watcher.relocator.file_ops.get_storage_statistics.return_value = {
            'source_path': 'inbox',
            'target_path': 'archive',
            'inbox_files_count': 2,
            'inbox_files_size': 2048,
            'year_directories_count': 1,
            'archived_files_count': 5,
            'archived_files_size': 4096
        }

        assert cli.cmd_status(Mock()) == 0
        mock_watcher.relocator.file_ops.get_storage_statistics.assert_called_once()

    def test_cmd_status_error(self, cli, mock_watcher):
        """Тест ошибки получения статистики."""
        mock_watcher.relocator.file_ops.get_storage_statistics.side_effect = PermissionError("denied")

        assert cli.cmd_status(Mock()) == 1

    def test_cmd_cleanup(self, cli, mock_watcher):
        """Тест очистки пустых каталогов."""
        mock_watcher.relocator.file_ops.cleanup_empty_directories.return_value = 3

        assert cli.cmd_cleanup(Mock()) == 0
        mock_watcher.relocator.file_ops.cleanup_empty_directories.assert_called_once()


class TestMain:
    """Тесты для функции main."""

    def test_main_without_command(self):
        """Тест запуска без команды."""
        assert main([]) == 1

    @patch('scan_archiver.main.ScanArchiverCLI')
    def test_main_setup_failure(self, mock_cli_class):
        """Тест запуска с неудачной инициализацией."""
        mock_cli_class.return_value.setup.return_value = False

        assert main(['status']) == 1

    @patch('scan_archiver.main.ScanArchiverCLI')
    def test_main_dispatches_command(self, mock_cli_class):
        """Тест вызова команды."""
        cli = mock_cli_class.return_value
        cli.setup.return_value = True
        cli.cmd_run_once.return_value = 0

        assert main(['--config', 'test.ini', 'run-once']) == 0
        cli.setup.assert_called_once_with('test.ini')
        cli.cmd_run_once.assert_called_once()

    @patch('scan_archiver.main.ScanArchiverCLI')
    def test_main_unexpected_error(self, mock_cli_class):
        """Тест неожиданной ошибки команды."""
        cli = mock_cli_class.return_value
        cli.setup.return_value = True
        error = RuntimeError("boom")
        cli.cmd_cleanup.side_effect = error

        assert main(['cleanup']) == 1
        cli.logger.log_critical_error.assert_called_once_with(
            "Команда cleanup завершилась ошибкой", error
        )

    def test_main_end_to_end(self, tmp_path):
        """Тест полного прохода с настоящей конфигурацией."""
        inbox = tmp_path / "inbox"
        inbox.mkdir()
        (inbox / "invoice_15032023.pdf").write_text("pdf")
        config_path = tmp_path / "settings.ini"
        config_path.write_text(
            f"[paths]\nsource_path = {inbox}\ntarget_path = {tmp_path / 'archive'}\n\n"
            f"[logging]\nlevel = INFO\nlog_file = {tmp_path / 'logs' / 'test.log'}\n",
            encoding='utf-8'
        )

        try:
            assert main(['--config', str(config_path), 'run-once']) == 0
        finally:
            import logging
            logger = logging.getLogger('scan_archiver')
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)

        assert (tmp_path / "archive" / "2023" / "03" / "15" / "invoice.pdf").read_text() == "pdf"
        assert not (inbox / "invoice_15032023.pdf").exists()


class TestCreateParser:
    """Тесты для функции create_parser."""

    def test_create_parser(self):
        """Тест создания парсера аргументов."""
        parser = create_parser()

        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.description == "Архивирование сканов в структуру каталогов по датам"

    def test_parser_arguments(self):
        """Тест аргументов парсера."""
        parser = create_parser()

        args = parser.parse_args(['--config', 'test.ini', '--verbose', 'status'])
        assert args.config == 'test.ini'
        assert args.verbose is True
        assert args.command == 'status'

        args = parser.parse_args(['watch', '--max-passes', '3'])
        assert args.command == 'watch'
        assert args.max_passes == 3

        args = parser.parse_args(['watch'])
        assert args.max_passes is None

        args = parser.parse_args(['classify', 'a_01012024.pdf', 'b.pdf'])
        assert args.command == 'classify'
        assert args.names == ['a_01012024.pdf', 'b.pdf']

        for command in ['run-once', 'cleanup']:
            assert parser.parse_args([command]).command == command

    def test_classify_requires_names(self):
        """Тест: команда classify требует хотя бы одно имя."""
        parser = create_parser()

        with pytest.raises(SystemExit):
            parser.parse_args(['classify'])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
