"""로깅 설정 모듈.

Logging configuration for the sprintboard package.
Repositories log through module loggers under the "sprintboard" namespace;
configure_logging attaches a console handler and, when Axiom credentials
are configured, an Axiom handler that ships the same records.
"""

import logging
import sys

from axiom_py import Client as AxiomClient
from axiom_py.logging import AxiomHandler

from sprintboard.config import Settings, settings as default_settings

# 패키지 루트 로거 이름 (Root logger name of the package)
LOGGER_NAME: str = "sprintboard"

_CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def build_axiom_handler(settings: Settings) -> AxiomHandler | None:
    """Axiom 로그 핸들러를 생성합니다.

    Build an Axiom handler when both AXIOM_API_TOKEN and AXIOM_DATASET are
    set; otherwise return None.
    """
    if not (settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET):
        return None
    client: AxiomClient = AxiomClient(token=settings.AXIOM_API_TOKEN)
    return AxiomHandler(client, settings.AXIOM_DATASET)


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """패키지 로거를 설정합니다.

    Configure the "sprintboard" logger: level from LOG_LEVEL, a stdout
    console handler, and the Axiom handler when configured. Calling it
    again replaces the previously installed handlers.

    Args:
        settings: 사용할 설정, None이면 전역 설정 (Settings to use; defaults to the global settings)

    Returns:
        logging.Logger: 설정된 패키지 로거 (The configured package logger)
    """
    cfg: Settings = settings or default_settings
    level: int = logging.getLevelName(cfg.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    package_logger: logging.Logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    for old_handler in list(package_logger.handlers):
        # AxiomHandler buffers records until flush
        old_handler.flush()
        old_handler.close()
        package_logger.removeHandler(old_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(fmt=_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    package_logger.addHandler(console_handler)

    axiom_handler: AxiomHandler | None = build_axiom_handler(cfg)
    if axiom_handler is not None:
        package_logger.addHandler(axiom_handler)

    return package_logger
