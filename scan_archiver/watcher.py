"""
Цикл опроса входящего каталога.

Каждый проход читает снимок входящего каталога и передает его в
BatchRelocator, затем ожидает poll_interval секунд. Ошибка чтения
каталога записывается в лог, проход пропускается.
"""

import time
from typing import Optional

try:
    from .config_loader import Config
    from .logger import ScanArchiverLogger
    from .relocator import BatchRelocator, BatchReport, RelocationStats
    from .file_ops import InboxReadError
except ImportError:
    from config_loader import Config
    from logger import ScanArchiverLogger
    from relocator import BatchRelocator, BatchReport, RelocationStats
    from file_ops import InboxReadError


class InboxWatcher:
    """Периодически переносит файлы из входящего каталога в архив."""

    def __init__(self, config: Config, logger: ScanArchiverLogger,
                 relocator: Optional[BatchRelocator] = None):
        self.config = config
        self.logger = logger
        self.relocator = relocator or BatchRelocator(config, logger)
        self.passes = 0

    def run_once(self) -> Optional[BatchReport]:
        """
        Выполняет один проход.

        Returns:
            BatchReport или None: Отчет прохода или None, если каталог не прочитан
        """
        self.passes += 1
        try:
            entries = self.relocator.file_ops.list_inbox(recursive=self.config.watcher.recursive)
        except InboxReadError as e:
            self.logger.log_inbox_error(self.config.paths.source_path, e)
            return None

        return self.relocator.process_batch(entries)

    def run_forever(self, max_passes: Optional[int] = None) -> RelocationStats:
        """
        Выполняет проходы с паузой poll_interval между ними.

        Args:
            max_passes: Остановиться после указанного числа проходов

        Returns:
            RelocationStats: Накопленная статистика
        """
        watcher_config = self.config.watcher
        self.logger.log_watch_start(
            self.config.paths.source_path,
            self.config.paths.target_path,
            watcher_config.poll_interval
        )

        completed = 0
        try:
            while True:
                self.run_once()
                completed += 1

                if max_passes is not None and completed >= max_passes:
                    break

                time.sleep(watcher_config.poll_interval)
        finally:
            stats = self.relocator.stats
            self.logger.log_watch_end(
                self.passes,
                stats.archived_files,
                stats.rejected_files + stats.failed_files
            )

        return self.relocator.stats


def create_watcher(config: Config, logger: ScanArchiverLogger) -> InboxWatcher:
    """Удобная функция для создания цикла опроса."""
    return InboxWatcher(config, logger)
