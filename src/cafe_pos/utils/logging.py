"""
Настройка логирования сервиса cafe_pos.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "cafe_pos"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Настраивает логгер ``cafe_pos``.

    Args:
        level: уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: необязательный файл, куда логи пишутся вдобавок к stdout
        format_string: свой формат записей

    Returns:
        Настроенный логгер пакета
    """
    level_num = getattr(logging, (level or "INFO").upper(), logging.INFO)

    if format_string is None:
        format_string = (
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
    formatter = logging.Formatter(format_string)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level_num)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level_num)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Логгер внутри логгера пакета (обычно вызывается с ``__name__``)."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
