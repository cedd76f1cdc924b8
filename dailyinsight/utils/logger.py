import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def setup_logger(log_file: Union[str, Path, None] = "logs/insight.log", max_bytes: int = 10_000_000,
                 backup_count: int = 5, level: Union[int, str] = logging.INFO,
                 fmt: str = DEFAULT_FORMAT, datefmt: Optional[str] = None,
                 console: bool = False) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)
        # Повторный вызов не должен дублировать записи в тот же файл
        for existing in logger.handlers:
            if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(log_path):
                break
        else:
            handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    if console and not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    return logger
