"""
Logger — логирование ordered_collections

По умолчанию логгер библиотеки имеет только NullHandler: настройка вывода
остаётся за приложением. Вывод в stdout включается вызовом setup_logger()
или переменной окружения LOG_LEVEL.
"""

import logging
import os
import sys
from typing import Final

__all__ = ["LOGGER_NAME", "logger", "setup_logger"]

LOGGER_NAME: Final[str] = "ordered_collections"

DEFAULT_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    level: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Подключить stdout-обработчик к логгеру библиотеки.

    Повторный вызов не добавляет второй обработчик, а только меняет уровень.

    Args:
        level: DEBUG, INFO, WARNING, ERROR, CRITICAL (по умолчанию LOG_LEVEL
               из окружения или WARNING)
        format_string: Формат записи

    Returns:
        Настроенный логгер
    """
    level = level or os.getenv("LOG_LEVEL", "WARNING")

    configured = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(handler, logging.StreamHandler) for handler in configured.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(fmt=format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        configured.addHandler(handler)
    configured.setLevel(getattr(logging, level.upper()))
    return configured


logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())

if os.getenv("LOG_LEVEL"):
    setup_logger()
