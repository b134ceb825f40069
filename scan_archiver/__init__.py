"""
Scan Archiver

Утилита для переноса сканов из входящего каталога в архив по датам (ГГГГ/ММ/ДД),
извлеченным из имени файла.
"""

__version__ = "1.0.0"
__author__ = "Scan Archiver Team"
__description__ = "Utility for archiving scans into a date-based directory structure"
