"""
Logging setup shared by the API, the pollers and the Lambda handlers.
"""
import logging
import sys
from typing import Optional
from catalog_ingest.core import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Log level name; defaults to the LOG_LEVEL setting
    """
    level_name = (level or config.settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True
    )
    # boto is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
