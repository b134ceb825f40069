"""
Главный модуль CLI интерфейса архиватора сканов.

Предоставляет командный интерфейс для запуска наблюдения за входящим
каталогом, разового прохода, проверки имен файлов и просмотра статистики.
"""

import argparse
import sys

try:
    from .config_loader import load_config
    from .logger import ScanArchiverLogger
    from .classifier import ClassificationError, FilenameClassifier
    from .watcher import create_watcher
except ImportError:
    from config_loader import load_config
    from logger import ScanArchiverLogger
    from classifier import ClassificationError, FilenameClassifier
    from watcher import create_watcher


class ScanArchiverCLI:
    """Класс для обработки команд CLI."""

    def __init__(self):
        self.config = None
        self.logger = None
        self.watcher = None

    def setup(self, config_path: str = "config/settings.ini") -> bool:
        """
        Инициализирует CLI с конфигурацией.

        Args:
            config_path: Путь к файлу конфигурации

        Returns:
            bool: True если инициализация успешна
        """
        try:
            self.config = load_config(config_path)
            self.logger = ScanArchiverLogger(self.config.logging)
            self.watcher = create_watcher(self.config, self.logger)

            self.logger.log_config_loaded(config_path)
            return True

        except Exception as e:
            print(f"❌ Ошибка инициализации: {e}")
            return False

    def cmd_watch(self, args) -> int:
        """
        Команда запуска наблюдения за входящим каталогом.

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        try:
            stats = self.watcher.run_forever(max_passes=args.max_passes)
        except KeyboardInterrupt:
            print("\n⚠️ Наблюдение остановлено пользователем")
            return 0

        summary = stats.to_dict()
        print(f"📊 Проходов: {self.watcher.passes}")
        print(f"   • Обработано: {summary['processed_files']}")
        print(f"   • Заархивировано: {summary['archived_files']}")
        print(f"   • Отклонено: {summary['rejected_files']}")
        print(f"   • Ошибок ввода-вывода: {summary['failed_files']}")
        print(f"   • Успешность: {summary['success_rate']:.1f}%")
        if summary['duration_seconds'] is not None:
            print(f"   • Время работы: {summary['duration_seconds']:.1f} сек")
        return 0

    def cmd_run_once(self, args) -> int:
        """
        Команда одного прохода по входящему каталогу.

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        report = self.watcher.run_once()

        if report is None:
            print(f"❌ Не удалось прочитать каталог: {self.config.paths.source_path}")
            return 1

        if report.processed == 0:
            print("ℹ️ Нет файлов для архивирования")
            return 0

        print(f"📊 Результат прохода:")
        print(f"   • Обработано: {report.processed}")
        print(f"   • Заархивировано: {len(report.archived)}")
        print(f"   • Отклонено: {len(report.rejected)}")
        print(f"   • Ошибок ввода-вывода: {len(report.failed)}")

        if report.failures:
            print(f"\n⚠️ Файлы с ошибками:")
            for failure in report.failures[:10]:
                print(f"   • {failure.path.name}: {failure.error}")
            if len(report.failures) > 10:
                print(f"   ... и еще {len(report.failures) - 10} ошибок")

        return 0 if report.ok else 1

    def cmd_classify(self, args) -> int:
        """
        Команда проверки имен файлов без переноса.

        Returns:
            int: Код возврата (0 - все имена корректны, 1 - есть ошибки)
        """
        classifier = FilenameClassifier(self.config.classifier, self.config.paths.target_path)

        rejected = 0
        for name in args.names:
            try:
                target = classifier.classify(name)
                print(f"✅ {name} → {target.destination}")
            except ClassificationError as e:
                rejected += 1
                print(f"🚫 {name}: [{e.kind}] {e}")

        return 0 if rejected == 0 else 1

    def cmd_status(self, args) -> int:
        """
        Команда просмотра статистики входящего каталога и архива.

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        try:
            stats = self.watcher.relocator.file_ops.get_storage_statistics()
        except OSError as e:
            print(f"❌ Ошибка получения статуса: {e}")
            return 1

        print("📊 Состояние архива сканов")
        print("=" * 50)
        print(f"\n📥 Входящие: {stats['source_path']}")
        print(f"   • Файлов: {stats['inbox_files_count']}")
        print(f"   • Размер: {stats['inbox_files_size']:,} байт")
        print(f"\n🗄️ Архив: {stats['target_path']}")
        print(f"   • Каталогов по годам: {stats['year_directories_count']}")
        print(f"   • Файлов: {stats['archived_files_count']}")
        print(f"   • Размер: {stats['archived_files_size']:,} байт")
        return 0

    def cmd_cleanup(self, args) -> int:
        """
        Команда удаления пустых каталогов архива.

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        print("🧹 Удаление пустых каталогов архива...")
        removed_dirs = self.watcher.relocator.file_ops.cleanup_empty_directories()
        print(f"   • Удалено пустых каталогов: {removed_dirs}")
        print("✅ Очистка завершена")
        return 0


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        description="Архивирование сканов в структуру каталогов по датам",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Наблюдение за входящим каталогом
  scan-archiver watch

  # Один проход
  scan-archiver run-once

  # Проверка имен файлов без переноса
  scan-archiver classify invoice_01102024.pdf letter_31122023.pdf

  # Состояние входящего каталога и архива
  scan-archiver status

  # Удаление пустых каталогов архива
  scan-archiver cleanup
        """
    )

    parser.add_argument(
        '--config',
        default='config/settings.ini',
        help='Путь к файлу конфигурации (по умолчанию: config/settings.ini)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    watch_parser = subparsers.add_parser('watch', help='Наблюдение за входящим каталогом')
    watch_parser.add_argument(
        '--max-passes',
        type=int,
        help='Остановиться после указанного числа проходов'
    )

    subparsers.add_parser('run-once', help='Один проход по входящему каталогу')

    classify_parser = subparsers.add_parser('classify', help='Проверка имен файлов без переноса')
    classify_parser.add_argument('names', nargs='+', help='Имена файлов')

    subparsers.add_parser('status', help='Состояние входящего каталога и архива')
    subparsers.add_parser('cleanup', help='Удаление пустых каталогов архива')

    return parser


def main(argv=None):
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ScanArchiverCLI()

    if not cli.setup(args.config):
        return 1

    commands = {
        'watch': cli.cmd_watch,
        'run-once': cli.cmd_run_once,
        'classify': cli.cmd_classify,
        'status': cli.cmd_status,
        'cleanup': cli.cmd_cleanup,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем")
        return 1
    except Exception as e:
        print(f"❌ Неожиданная ошибка: {e}")
        cli.logger.log_critical_error(f"Команда {args.command} завершилась ошибкой", e)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
