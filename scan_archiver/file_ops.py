"""
Модуль для операций с файловой системой.

Обеспечивает чтение входящего каталога и перенос файлов в архив
со структурой каталогов по датам (ГГГГ/ММ/ДД).
"""

import hashlib
import os
import shutil
from pathlib import Path
from typing import List, Optional

try:
    from .config_loader import PathsConfig
    from .logger import ScanArchiverLogger
except ImportError:
    from config_loader import PathsConfig
    from logger import ScanArchiverLogger


PARTIAL_SUFFIX = '.part'


class FileOperationError(Exception):
    """Исключение для ошибок операций с файлами."""

    kind = 'io'


class SourceNotFoundError(FileOperationError):
    """Исходный файл исчез между чтением каталога и обработкой."""
    pass


class InboxReadError(FileOperationError):
    """Входящий каталог не удалось прочитать."""
    pass


class FileOps:
    """Класс для операций с файловой системой."""

    def __init__(self, paths_config: PathsConfig, logger: ScanArchiverLogger):
        """
        Инициализация операций с файлами.

        Args:
            paths_config: Конфигурация путей
            logger: Логгер для записи операций
        """
        self.paths_config = paths_config
        self.logger = logger
        self.source_path = Path(paths_config.source_path)
        self.target_path = Path(paths_config.target_path)

    def list_inbox(self, recursive: bool = False) -> List[Path]:
        """
        Получает снимок файлов во входящем каталоге.

        Порядок соответствует порядку перечисления файловой системы.
        Записи, тип которых не удалось определить, пропускаются.

        Args:
            recursive: Обходить вложенные каталоги

        Returns:
            List[Path]: Пути к обычным файлам

        Raises:
            InboxReadError: Если каталог не существует или недоступен
        """
        try:
            entries = list(self.source_path.rglob('*') if recursive else self.source_path.iterdir())
        except OSError as e:
            raise InboxReadError(f"Ошибка чтения каталога {self.source_path}: {e}")

        files = []
        for entry in entries:
            try:
                is_file = entry.is_file()
            except OSError as e:
                self.logger.log_skipped(entry, str(e))
                continue

            if is_file:
                files.append(entry)
            else:
                self.logger.log_skipped(entry, "не является файлом")

        return files

    def relocate(self, source: Path, destination: Path, verify: bool = True) -> Path:
        """
        Переносит файл в архив: создает каталоги, копирует, удаляет исходный.

        Копия пишется во временный файл рядом с назначением и заменяет
        существующий файл назначения только после успешной записи.
        При ошибке копирования или проверки временный файл удаляется,
        созданные каталоги остаются. Если не удалось удалить исходный
        файл, копия в архиве сохраняется.

        Args:
            source: Путь к файлу во входящем каталоге
            destination: Путь в архиве
            verify: Сравнивать хеши исходного файла и копии

        Returns:
            Path: Путь к файлу в архиве

        Raises:
            SourceNotFoundError: Если исходный файл не найден
            FileOperationError: Если одна из операций завершилась ошибкой
        """
        source = Path(source)
        destination = Path(destination)

        if not source.is_file():
            raise SourceNotFoundError(f"Исходный файл не найден: {source}")

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.log_file_operation("mkdir", destination.parent, False)
            raise FileOperationError(f"Ошибка создания каталога {destination.parent}: {e}")

        partial_path = destination.with_name(f".{destination.name}{PARTIAL_SUFFIX}")

        try:
            shutil.copy2(source, partial_path)
        except OSError as e:
            self.logger.log_file_operation("copy", destination, False)
            self._discard_partial_copy(partial_path)
            raise FileOperationError(f"Ошибка копирования {source} → {destination}: {e}")

        if verify:
            source_hash = self.get_file_hash(source)
            copy_hash = self.get_file_hash(partial_path)
            if source_hash is None or source_hash != copy_hash:
                self.logger.log_file_operation("verify", destination, False)
                self._discard_partial_copy(partial_path)
                raise FileOperationError(f"Ошибка целостности копии: {destination}")

        try:
            os.replace(partial_path, destination)
        except OSError as e:
            self.logger.log_file_operation("copy", destination, False)
            self._discard_partial_copy(partial_path)
            raise FileOperationError(f"Ошибка записи {destination}: {e}")

        self.logger.log_file_operation("copy", destination, True)

        try:
            source.unlink()
        except OSError as e:
            self.logger.log_file_operation("delete", source, False)
            raise FileOperationError(f"Файл скопирован, но не удален из входящих {source}: {e}")

        self.logger.log_file_operation("delete", source, True)
        return destination

    def _discard_partial_copy(self, partial_path: Path) -> None:
        try:
            partial_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.log_warning(f"Не удалось удалить неполную копию {partial_path}: {e}")

    def get_file_hash(self, file_path: Path, algorithm: str = 'md5') -> Optional[str]:
        """
        Получает хеш файла для проверки целостности.

        Args:
            file_path: Путь к файлу
            algorithm: Алгоритм хеширования (md5, sha1, sha256)

        Returns:
            str или None: Хеш файла или None если файл не найден или недоступен
        """
        if algorithm not in ('md5', 'sha1', 'sha256'):
            raise ValueError(f"Неподдерживаемый алгоритм: {algorithm}")

        hasher = hashlib.new(algorithm)
        try:
            with open(file_path, 'rb') as f:
                for chunk in iter(lambda: f.read(4096), b""):
                    hasher.update(chunk)
        except OSError as e:
            self.logger.log_file_error(Path(file_path).name, e)
            return None

        return hasher.hexdigest()

    def cleanup_empty_directories(self) -> int:
        """
        Удаляет пустые каталоги в архиве, начиная с самых глубоких.

        Returns:
            int: Количество удаленных каталогов
        """
        if not self.target_path.exists():
            return 0

        removed_count = 0
        directories = sorted(
            (d for d in self.target_path.rglob('*') if d.is_dir()),
            key=lambda d: len(d.parts),
            reverse=True
        )

        for directory in directories:
            try:
                if not any(directory.iterdir()):
                    directory.rmdir()
                    removed_count += 1
                    self.logger.log_system_info(f"Удален пустой каталог: {directory}")
            except OSError as e:
                self.logger.log_warning(f"Не удалось удалить каталог {directory}: {e}")

        if removed_count > 0:
            self.logger.log_system_info(f"Удалено пустых каталогов: {removed_count}")

        return removed_count

    def get_storage_statistics(self) -> dict:
        """
        Получает статистику входящего каталога и архива.

        Returns:
            dict: Статистика использования пространства
        """
        stats = {
            'source_path': str(self.source_path),
            'target_path': str(self.target_path),
            'inbox_files_count': 0,
            'inbox_files_size': 0,
            'year_directories_count': 0,
            'archived_files_count': 0,
            'archived_files_size': 0
        }

        if self.source_path.is_dir():
            inbox_files = [f for f in self.source_path.iterdir() if f.is_file()]
            stats['inbox_files_count'] = len(inbox_files)
            stats['inbox_files_size'] = sum(f.stat().st_size for f in inbox_files)

        if self.target_path.is_dir():
            stats['year_directories_count'] = sum(1 for d in self.target_path.iterdir() if d.is_dir())
            archived_files = [f for f in self.target_path.rglob('*') if f.is_file()]
            stats['archived_files_count'] = len(archived_files)
            stats['archived_files_size'] = sum(f.stat().st_size for f in archived_files)

        return stats


def create_file_ops(paths_config: PathsConfig, logger: ScanArchiverLogger) -> FileOps:
    """
    Удобная функция для создания объекта операций с файлами.

    Args:
        paths_config: Конфигурация путей
        logger: Логгер

    Returns:
        FileOps: Объект операций с файлами
    """
    return FileOps(paths_config, logger)
