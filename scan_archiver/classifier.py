"""
Модуль разбора имен файлов сканов.

Имя файла вида <категория><разделитель><ДДММГГГГ>.<расширение> превращается
в путь архива <корень>/<ГГГГ>/<ММ>/<ДД>/<категория>.<расширение>.
Модуль не выполняет операций ввода-вывода.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

try:
    from .config_loader import ClassifierConfig
except ImportError:
    from config_loader import ClassifierConfig


DATE_LENGTH = 8
ASCII_DIGITS = frozenset('0123456789')


class ClassificationError(Exception):
    """Базовое исключение для имен файлов, которые не удалось разобрать."""

    kind = 'classification'
    message = "Имя файла не удалось разобрать"

    def __init__(self, filename: str, detail: str = None):
        self.filename = filename
        self.detail = detail
        text = f"{self.message}: {filename}"
        if detail:
            text = f"{text} ({detail})"
        super().__init__(text)


class MissingExtensionError(ClassificationError):
    """У файла нет расширения."""

    kind = 'extension'
    message = "Нет корректного расширения файла"


class MissingPartsError(ClassificationError):
    """Имя файла не содержит ожидаемых частей."""

    kind = 'parts'
    message = "Имя файла не содержит ожидаемых частей"


class MissingSeparatorError(ClassificationError):
    """В имени файла нет разделителя категории и даты."""

    kind = 'separator'
    message = "Имя файла не содержит разделитель"


class InvalidDateError(ClassificationError):
    """Дата в имени файла имеет неверный формат или выходит за границы."""

    kind = 'date'
    message = "Некорректный формат даты"


@dataclass(frozen=True)
class ParsedFilename:
    """Поля, извлеченные из имени файла."""
    category: str
    day: str
    month: str
    year: str
    extension: str


@dataclass(frozen=True)
class ArchiveTarget:
    """Каталог исходного файла и вычисленный путь в архиве."""
    source_dir: Path
    destination: Path


def is_valid_date_format(date: str) -> bool:
    """Проверяет, что дата состоит ровно из 8 ASCII-цифр."""
    return len(date) == DATE_LENGTH and all(c in ASCII_DIGITS for c in date)


def is_valid_range(value: str, maximum: int) -> bool:
    """
    Проверяет, что строка является беззнаковым числом не больше maximum.

    Нижняя граница не проверяется: "00" допустимо для любого поля.
    """
    if not value or not all(c in ASCII_DIGITS for c in value):
        return False
    return int(value) <= maximum


class FilenameClassifier:
    """Вычисляет путь в архиве по имени файла."""

    def __init__(self, config: ClassifierConfig, target_root: Union[str, Path]):
        """
        Args:
            config: Параметры разбора имени файла
            target_root: Корень архива
        """
        self.config = config
        self.target_root = Path(target_root)

    def parse(self, path: Union[str, Path]) -> ParsedFilename:
        """
        Разбирает имя файла на категорию, дату и расширение.

        Проверки выполняются строго по порядку, первая неудачная
        прерывает разбор.

        Args:
            path: Путь к файлу (используется только имя)

        Returns:
            ParsedFilename: Разобранные поля

        Raises:
            MissingExtensionError: Нет расширения
            MissingPartsError: Основу имени нельзя представить как текст или пустая категория
            MissingSeparatorError: Нет разделителя
            InvalidDateError: Дата не из 8 цифр или поле вне границ
        """
        name = Path(path).name

        stem, extension = self._split_extension(name)
        category, date = self._split_category_date(name, stem)
        day, month, year = self._parse_date(name, date)

        return ParsedFilename(
            category=category,
            day=day,
            month=month,
            year=year,
            extension=extension
        )

    def classify(self, path: Union[str, Path]) -> ArchiveTarget:
        """
        Вычисляет путь в архиве для файла.

        Args:
            path: Путь к файлу во входящем каталоге

        Returns:
            ArchiveTarget: Каталог исходного файла и путь назначения
        """
        path = Path(path)
        parsed = self.parse(path)
        destination = (
            self.target_root
            / parsed.year
            / parsed.month
            / parsed.day
            / f"{parsed.category}.{parsed.extension}"
        )
        return ArchiveTarget(source_dir=path.parent, destination=destination)

    def _split_extension(self, name: str) -> Tuple[str, str]:
        stem, dot, extension = name.rpartition('.')
        # "name", "name." и ".txt" не имеют расширения
        if not dot or not stem or not extension:
            raise MissingExtensionError(name)

        try:
            extension.encode('utf-8')
        except UnicodeEncodeError:
            raise MissingExtensionError(name, "расширение не является текстом")

        try:
            stem.encode('utf-8')
        except UnicodeEncodeError:
            raise MissingPartsError(name, "основа имени не является текстом")

        return stem, extension

    def _split_category_date(self, name: str, stem: str) -> Tuple[str, str]:
        separator = self.config.separator
        category, found, rest = stem.partition(separator)
        if not found:
            raise MissingSeparatorError(name, f"ожидается '{separator}'")
        if not category:
            raise MissingPartsError(name, "пустая категория")

        # Дата - только второй сегмент, дальнейшие сегменты не рассматриваются
        date = rest.split(separator, 1)[0]
        return category, date

    def _parse_date(self, name: str, date: str) -> Tuple[str, str, str]:
        if not is_valid_date_format(date):
            raise InvalidDateError(name, f"ожидается ДДММГГГГ, получено '{date}'")

        day, month, year = date[0:2], date[2:4], date[4:8]

        if not (is_valid_range(day, self.config.max_day)
                and is_valid_range(month, self.config.max_month)
                and is_valid_range(year, self.config.max_year)):
            raise InvalidDateError(name, f"дата вне допустимого диапазона: '{date}'")

        return day, month, year


def create_classifier(config: ClassifierConfig, target_root: Union[str, Path]) -> FilenameClassifier:
    """
    Удобная функция для создания классификатора.

    Args:
        config: Параметры разбора имени файла
        target_root: Корень архива

    Returns:
        FilenameClassifier: Классификатор имен файлов
    """
    return FilenameClassifier(config, target_root)
