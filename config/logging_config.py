"""
Configuração de logging da aplicação
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from config.settings import Settings, get_settings


class InterceptHandler(logging.Handler):
    """Redirecionar registros do logging padrão para o loguru"""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# bibliotecas que usam o logging padrão
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "openai", "httpx")


def resolve_log_level(settings: Settings) -> str:
    """Nível efetivo: modo debug sempre registra DEBUG"""
    if settings.debug:
        return "DEBUG"

    level = (settings.log_level or "").strip().upper()
    try:
        logger.level(level)
    except ValueError:
        logger.warning(f"⚠️ Nível de log desconhecido '{settings.log_level}', usando INFO")
        return "INFO"
    return level


def setup_logging(settings: Optional[Settings] = None) -> Path:
    """Configurar sistema de logging e retornar o diretório de logs"""
    settings = settings or get_settings()
    level = resolve_log_level(settings)

    logger.remove()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level,
        colorize=True,
        backtrace=settings.debug,
        diagnose=settings.debug
    )

    logger.add(
        log_dir / "finance_dashboard.log",
        format=LOG_FORMAT,
        level=level,
        rotation="1 day",
        retention="30 days",
        compression="zip",
        backtrace=settings.debug,
        diagnose=settings.debug
    )

    logger.add(
        log_dir / "errors.log",
        format=LOG_FORMAT,
        level="ERROR",
        rotation="1 week",
        retention="4 weeks",
        backtrace=True,
        diagnose=settings.debug
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # sem debug, o ruído de requisições HTTP das bibliotecas fica de fora
    library_level = logging.DEBUG if settings.debug else logging.WARNING
    for logger_name in INTERCEPTED_LOGGERS:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
        if logger_name in ("openai", "httpx"):
            logging_logger.setLevel(library_level)

    logger.info(f"📝 Logging configurado em {level} ({log_dir})")
    return log_dir
