import logging.config
import sys


def setup_logging(log_level: str = "INFO", sql_echo: bool = False):
    """dictConfig 기반 로깅 설정

    Args:
        log_level: gachaapi / uvicorn 로거 레벨
        sql_echo: True면 sqlalchemy.engine SQL 로그 출력 (DEBUG 환경)
    """
    log_level = log_level.upper()
    app_handlers = ["console", "error_console"]

    LOGGING_CONFIG = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d\n%(message)s",
            },
            "simple": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s",
            },
        },
        "handlers": {
            "console": {
                "formatter": "simple",
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
            },
            # 경고 이상은 위치 정보와 함께 stderr로 (Lambda 로그에서 분리)
            "error_console": {
                "formatter": "detailed",
                "class": "logging.StreamHandler",
                "stream": sys.stderr,
                "level": "WARNING",
            },
        },
        "loggers": {
            "gachaapi": {
                "handlers": app_handlers,
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": app_handlers,
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if sql_echo else "WARNING",
                "propagate": False,
            },
            "httpx": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "handlers": app_handlers,
            "level": "WARNING",
        },
    }
    logging.config.dictConfig(LOGGING_CONFIG)
