"""
Модуль бизнес-логики архивирования сканов.

Объединяет разбор имен файлов и операции с файловой системой: каждый файл
из снимка входящего каталога переносится в архив независимо от остальных,
ошибки по отдельным файлам собираются в отчет прохода.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

try:
    from .config_loader import Config
    from .logger import ScanArchiverLogger
    from .classifier import ClassificationError, FilenameClassifier
    from .file_ops import FileOps, FileOperationError
except ImportError:
    from config_loader import Config
    from logger import ScanArchiverLogger
    from classifier import ClassificationError, FilenameClassifier
    from file_ops import FileOps, FileOperationError


class RelocationStats:
    """Класс для хранения накопленной статистики по всем проходам."""

    def __init__(self):
        self.batch_count = 0
        self.processed_files = 0
        self.archived_files = 0
        self.rejected_files = 0
        self.failed_files = 0
        self.skipped_files = 0
        self.start_time = None
        self.end_time = None
        self.errors = []

    def add_error(self, file_name: str, error: Exception):
        """Добавляет ошибку в список."""
        self.errors.append({
            'file_name': file_name,
            'kind': getattr(error, 'kind', 'io'),
            'error': str(error),
            'timestamp': datetime.now()
        })

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность работы в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def get_success_rate(self) -> float:
        """Возвращает процент заархивированных файлов."""
        if self.processed_files == 0:
            return 0.0
        return (self.archived_files / self.processed_files) * 100

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'batch_count': self.batch_count,
            'processed_files': self.processed_files,
            'archived_files': self.archived_files,
            'rejected_files': self.rejected_files,
            'failed_files': self.failed_files,
            'skipped_files': self.skipped_files,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
            'success_rate': self.get_success_rate(),
            'error_count': len(self.errors)
        }


class FileFailure:
    """Ошибка обработки одного файла прохода."""

    def __init__(self, path: Path, error: Exception):
        self.path = path
        self.error = error

    @property
    def kind(self) -> str:
        return getattr(self.error, 'kind', 'io')

    def __repr__(self):
        return f"FileFailure({self.path!r}, {self.kind})"


class BatchReport:
    """Результат одного прохода по снимку входящего каталога."""

    def __init__(self, batch_number: int):
        self.batch_number = batch_number
        self.archived: List[Tuple[Path, Path]] = []
        self.failures: List[FileFailure] = []
        self.skipped: List[Path] = []

    @property
    def processed(self) -> int:
        return len(self.archived) + len(self.failures)

    @property
    def ok(self) -> bool:
        """True если ни один файл прохода не завершился ошибкой."""
        return not self.failures

    @property
    def rejected(self) -> List[FileFailure]:
        return [f for f in self.failures if isinstance(f.error, ClassificationError)]

    @property
    def failed(self) -> List[FileFailure]:
        return [f for f in self.failures if not isinstance(f.error, ClassificationError)]


class BatchRelocator:
    """Основной класс для переноса файлов прохода в архив."""

    def __init__(self, config: Config, logger: ScanArchiverLogger,
                 file_ops: Optional[FileOps] = None,
                 classifier: Optional[FilenameClassifier] = None):
        """
        Инициализация.

        Args:
            config: Конфигурация приложения
            logger: Логгер для записи операций
            file_ops: Операции с файлами (по умолчанию создаются из конфигурации)
            classifier: Классификатор имен (по умолчанию создается из конфигурации)
        """
        self.config = config
        self.logger = logger
        self.file_ops = file_ops or FileOps(config.paths, logger)
        self.classifier = classifier or FilenameClassifier(config.classifier, config.paths.target_path)
        self.stats = RelocationStats()

    def process_batch(self, entries: Iterable[Path]) -> BatchReport:
        """
        Переносит в архив все файлы одного снимка входящего каталога.

        Каждый файл обрабатывается независимо: ошибка разбора имени или
        ввода-вывода по одному файлу не мешает архивированию остальных.
        Пустой снимок не вызывает никаких операций.

        Args:
            entries: Пути из снимка входящего каталога

        Returns:
            BatchReport: Заархивированные файлы и ошибки по файлам
        """
        entries = list(entries)

        self.stats.batch_count += 1
        report = BatchReport(self.stats.batch_count)

        if not entries:
            return report

        if self.stats.start_time is None:
            self.stats.start_time = datetime.now()

        self.logger.log_batch_start(report.batch_number, len(entries))

        for entry in entries:
            entry = Path(entry)

            # Исчезнувший файл не пропускается: relocate сообщит об ошибке
            try:
                not_a_file = entry.exists() and not entry.is_file()
            except OSError:
                not_a_file = True
            if not_a_file:
                self.logger.log_skipped(entry, "не является файлом")
                report.skipped.append(entry)
                continue

            try:
                destination = self._relocate_single_file(entry)
                report.archived.append((entry, destination))
            except ClassificationError as e:
                self.logger.log_file_rejected(entry.name, e)
                report.failures.append(FileFailure(entry, e))
            except FileOperationError as e:
                self.logger.log_file_error(entry.name, e)
                report.failures.append(FileFailure(entry, e))

        self._update_stats(report)

        self.logger.log_batch_end(
            report.batch_number,
            report.processed,
            len(report.archived),
            len(report.failures)
        )

        return report

    def _relocate_single_file(self, entry: Path) -> Path:
        """
        Разбирает имя файла и переносит его в архив.

        Returns:
            Path: Путь к файлу в архиве
        """
        target = self.classifier.classify(entry)
        destination = self.file_ops.relocate(
            entry,
            target.destination,
            verify=self.config.watcher.verify_copy
        )
        self.logger.log_file_archived(entry, destination)
        return destination

    def _update_stats(self, report: BatchReport) -> None:
        self.stats.processed_files += report.processed
        self.stats.archived_files += len(report.archived)
        self.stats.rejected_files += len(report.rejected)
        self.stats.failed_files += len(report.failed)
        self.stats.skipped_files += len(report.skipped)
        for failure in report.failures:
            self.stats.add_error(failure.path.name, failure.error)
        self.stats.end_time = datetime.now()


def create_relocator(config: Config, logger: ScanArchiverLogger) -> BatchRelocator:
    """
    Удобная функция для создания объекта переноса файлов.

    Args:
        config: Конфигурация приложения
        logger: Логгер

    Returns:
        BatchRelocator: Объект переноса файлов
    """
    return BatchRelocator(config, logger)
