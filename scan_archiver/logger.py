"""
Модуль для настройки и управления логированием приложения.

Обеспечивает централизованную настройку логирования с ротацией файлов,
цветным выводом в консоль и различными уровнями детализации.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

try:
    from .config_loader import LoggingConfig
except ImportError:
    from config_loader import LoggingConfig


LOGGER_NAME = 'scan_archiver'


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Форматирует запись лога с цветом."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Запись разделяется с файловым обработчиком
            record.levelname = levelname


class ScanArchiverLogger:
    """Класс для управления логированием архиватора сканов."""

    def __init__(self, config: LoggingConfig):
        """
        Инициализация логгера.

        Args:
            config: Конфигурация логирования
        """
        self.config = config
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с файловым и консольным выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        # Повторная настройка не должна дублировать обработчики
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        fmt = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        datefmt = '%Y-%m-%d %H:%M:%S'
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)
        colored_formatter = ColoredFormatter(fmt=fmt, datefmt=datefmt)

        log_file_path = Path(self.config.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=self.config.max_log_size * 1024 * 1024,  # MB -> байты
            backupCount=self.config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(colored_formatter)
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        self.logger.propagate = False

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def log_watch_start(self, source_path: Path, target_path: Path, poll_interval: float) -> None:
        """
        Логирует запуск цикла опроса.

        Args:
            source_path: Входящий каталог
            target_path: Корень архива
            poll_interval: Интервал опроса в секундах
        """
        self.logger.info("🚀 Запуск наблюдения за входящим каталогом")
        self.logger.info(f"📥 Входящие: {source_path}")
        self.logger.info(f"🗄️ Архив: {target_path}")
        self.logger.info(f"⏱️ Интервал опроса: {poll_interval} сек")

    def log_watch_end(self, passes: int, archived: int, failed: int) -> None:
        """
        Логирует остановку цикла опроса.

        Args:
            passes: Выполнено проходов
            archived: Заархивировано файлов
            failed: Файлов с ошибками
        """
        self.logger.info("🛑 Наблюдение остановлено")
        self.logger.info(f"📊 Проходов: {passes}, заархивировано: {archived}, ошибок: {failed}")
        self.logger.info(f"⏰ Время завершения: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_batch_start(self, batch_number: int, batch_size: int) -> None:
        """
        Логирует начало обработки прохода.

        Args:
            batch_number: Номер прохода
            batch_size: Количество файлов во входящем каталоге
        """
        self.logger.info(f"📦 Проход #{batch_number}: файлов во входящих {batch_size}")

    def log_batch_end(self, batch_number: int, processed: int, archived: int, failed: int) -> None:
        """
        Логирует завершение прохода.

        Args:
            batch_number: Номер прохода
            processed: Обработано файлов
            archived: Заархивировано
            failed: Ошибок
        """
        self.logger.info(f"✅ Проход #{batch_number} завершен: {archived}/{processed} заархивировано, {failed} ошибок")

    def log_file_archived(self, source_path: Path, target_path: Path) -> None:
        """
        Логирует успешное архивирование файла.

        Args:
            source_path: Исходный путь
            target_path: Путь в архиве
        """
        self.logger.info(f"📁 Файл заархивирован: {source_path} → {target_path}")

    def log_file_rejected(self, file_name: str, error: Exception) -> None:
        """
        Логирует файл, имя которого не удалось разобрать.

        Args:
            file_name: Имя файла
            error: Ошибка классификации
        """
        self.logger.warning(f"🚫 Файл {file_name} отклонен: {error}")

    def log_file_error(self, file_name: str, error: Exception) -> None:
        """
        Логирует ошибку при обработке файла.

        Args:
            file_name: Имя файла
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка при обработке файла {file_name}: {error}")

    def log_inbox_error(self, source_path: Path, error: Exception) -> None:
        """
        Логирует ошибку чтения входящего каталога.

        Args:
            source_path: Входящий каталог
            error: Исключение
        """
        self.logger.error(f"📥 Не удалось прочитать каталог {source_path}: {error}")

    def log_config_loaded(self, config_path: str) -> None:
        """
        Логирует успешную загрузку конфигурации.

        Args:
            config_path: Путь к файлу конфигурации
        """
        self.logger.info(f"⚙️ Конфигурация загружена из {config_path}")

    def log_file_operation(self, operation: str, file_path: Path, success: bool = True) -> None:
        """
        Логирует операцию с файлом.

        Args:
            operation: Тип операции (mkdir, copy, verify, delete)
            file_path: Путь к файлу
            success: Успешность операции
        """
        status = "✅" if success else "❌"
        self.logger.debug(f"{status} {operation.upper()}: {file_path}")

    def log_skipped(self, file_path: Path, reason: str) -> None:
        """Логирует пропущенную запись каталога."""
        self.logger.debug(f"⏭️ Пропуск {file_path}: {reason}")

    def log_system_info(self, info: str) -> None:
        """
        Логирует системную информацию.

        Args:
            info: Информационное сообщение
        """
        self.logger.info(f"ℹ️ {info}")

    def log_warning(self, message: str) -> None:
        """
        Логирует предупреждение.

        Args:
            message: Сообщение предупреждения
        """
        self.logger.warning(f"⚠️ {message}")

    def log_critical_error(self, message: str, error: Exception = None) -> None:
        """
        Логирует критическую ошибку.

        Args:
            message: Сообщение об ошибке
            error: Исключение (опционально)
        """
        if error:
            self.logger.critical(f"💥 {message}: {error}")
        else:
            self.logger.critical(f"💥 {message}")


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Удобная функция для быстрой настройки логгера.

    Args:
        config: Конфигурация логирования

    Returns:
        logging.Logger: Настроенный логгер
    """
    archiver_logger = ScanArchiverLogger(config)
    return archiver_logger.get_logger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Получает логгер по имени.

    Args:
        name: Имя логгера

    Returns:
        logging.Logger: Логгер
    """
    return logging.getLogger(name)
