"""
Модуль для загрузки и валидации конфигурации приложения.

Обеспечивает централизованную загрузку параметров из config/settings.ini
с валидацией и удобным доступом к настройкам.
"""

import configparser
from pathlib import Path
from typing import Optional
from dataclasses import dataclass


@dataclass
class PathsConfig:
    """Конфигурация путей: входящий каталог сканов и корень архива."""
    source_path: Path
    target_path: Path


@dataclass
class ClassifierConfig:
    """Параметры разбора имени файла."""
    separator: str = '_'
    max_day: int = 31
    max_month: int = 12
    max_year: int = 2099


@dataclass
class WatcherConfig:
    """Параметры цикла опроса входящего каталога."""
    poll_interval: float = 60.0
    recursive: bool = False
    verify_copy: bool = True


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str
    log_file: Path
    max_log_size: int
    backup_count: int


@dataclass
class Config:
    """Основная конфигурация приложения."""
    paths: PathsConfig
    classifier: ClassifierConfig
    watcher: WatcherConfig
    logging: LoggingConfig


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: str = "config/settings.ini"):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к файлу конфигурации
        """
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """
        Загружает конфигурацию из файла.

        Returns:
            Config: Объект конфигурации

        Raises:
            FileNotFoundError: Если файл конфигурации не найден
            ValueError: Если конфигурация некорректна
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")

        config_parser = configparser.ConfigParser()
        config_parser.read(self.config_path, encoding='utf-8')

        try:
            paths_config = self._load_paths_config(config_parser)
            classifier_config = self._load_classifier_config(config_parser)
            watcher_config = self._load_watcher_config(config_parser)
            logging_config = self._load_logging_config(config_parser)

            self._config = Config(
                paths=paths_config,
                classifier=classifier_config,
                watcher=watcher_config,
                logging=logging_config
            )

            self._validate_config()

            return self._config

        except Exception as e:
            self._config = None
            raise ValueError(f"Ошибка загрузки конфигурации: {e}")

    def _load_paths_config(self, parser: configparser.ConfigParser) -> PathsConfig:
        """Загружает конфигурацию путей."""
        section = 'paths'

        if not parser.has_section(section):
            raise ValueError(f"Секция '{section}' не найдена в конфигурации")

        return PathsConfig(
            source_path=Path(parser.get(section, 'source_path')),
            target_path=Path(parser.get(section, 'target_path'))
        )

    def _load_classifier_config(self, parser: configparser.ConfigParser) -> ClassifierConfig:
        """Загружает параметры разбора имен файлов (секция необязательна)."""
        section = 'classifier'

        if not parser.has_section(section):
            return ClassifierConfig()

        # raw=True: символ '%' допустим как разделитель
        return ClassifierConfig(
            separator=parser.get(section, 'separator', fallback='_', raw=True),
            max_day=parser.getint(section, 'max_day', fallback=31),
            max_month=parser.getint(section, 'max_month', fallback=12),
            max_year=parser.getint(section, 'max_year', fallback=2099)
        )

    def _load_watcher_config(self, parser: configparser.ConfigParser) -> WatcherConfig:
        """Загружает параметры цикла опроса (секция необязательна)."""
        section = 'watcher'

        if not parser.has_section(section):
            return WatcherConfig()

        return WatcherConfig(
            poll_interval=parser.getfloat(section, 'poll_interval', fallback=60.0),
            recursive=parser.getboolean(section, 'recursive', fallback=False),
            verify_copy=parser.getboolean(section, 'verify_copy', fallback=True)
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'

        if not parser.has_section(section):
            raise ValueError(f"Секция '{section}' не найдена в конфигурации")

        log_file = Path(parser.get(section, 'log_file', fallback='logs/scan_archiver.log'))

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='INFO'),
            log_file=log_file,
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )

    def _validate_config(self) -> None:
        """Валидирует загруженную конфигурацию."""
        if not self._config:
            raise ValueError("Конфигурация не загружена")

        # Входящий каталог не обязан существовать при старте:
        # его отсутствие обрабатывается на каждом проходе опроса
        if self._config.paths.source_path == self._config.paths.target_path:
            raise ValueError("Входящий каталог и корень архива должны различаться")

        separator = self._config.classifier.separator
        if len(separator) != 1:
            raise ValueError(f"Разделитель должен быть одним символом: '{separator}'")

        if separator in ('.', '/', '\\') or separator.isdigit() or separator.isspace():
            raise ValueError(f"Недопустимый разделитель: '{separator}'")

        classifier = self._config.classifier
        for name in ('max_day', 'max_month', 'max_year'):
            if getattr(classifier, name) <= 0:
                raise ValueError(f"Параметр {name} должен быть больше 0")

        if self._config.watcher.poll_interval <= 0:
            raise ValueError("Интервал опроса должен быть больше 0")

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self._config.logging.level.upper() not in valid_levels:
            raise ValueError(f"Некорректный уровень логирования: {self._config.logging.level}")

    def get_config(self) -> Config:
        """
        Возвращает загруженную конфигурацию.

        Returns:
            Config: Объект конфигурации

        Raises:
            ValueError: Если конфигурация не загружена
        """
        if self._config is None:
            raise ValueError("Конфигурация не загружена. Вызовите load_config() сначала.")
        return self._config

    def reload_config(self) -> Config:
        """
        Перезагружает конфигурацию из файла.

        Returns:
            Config: Обновленный объект конфигурации
        """
        self._config = None
        return self.load_config()


def load_config(config_path: str = "config/settings.ini") -> Config:
    """
    Удобная функция для быстрой загрузки конфигурации.

    Args:
        config_path: Путь к файлу конфигурации

    Returns:
        Config: Объект конфигурации
    """
    loader = ConfigLoader(config_path)
    return loader.load_config()
