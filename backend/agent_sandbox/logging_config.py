import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(name: str) -> int:
    return _LEVELS.get(name.lower(), logging.INFO)


def uvicorn_level(name: str) -> str:
    """uvicorn only knows the long spelling of warning."""
    return logging.getLevelName(resolve_level(name)).lower()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT, force=True)
