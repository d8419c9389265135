"""Process-wide logging setup."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at startup.

    Modules log through ``logging.getLogger(__name__)``; this only decides
    where records go and which level passes. Uvicorn's access log is left
    at its own level.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    # SQLAlchemy logs every statement at INFO when its logger is enabled
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
