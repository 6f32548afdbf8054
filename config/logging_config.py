import logging
import sys

from config.settings import LoggingSettings


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """
    Configures the root logger once at process start.
    Modules only call logging.getLogger(__name__).
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(
        level=getattr(logging, settings.level, logging.INFO),
        format=settings.format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # googleapiclient logs every discovery request at INFO
    logging.getLogger("googleapiclient.discovery").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
