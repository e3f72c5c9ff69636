"""Logging setup shared by the API and the CLI."""
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once, using the settings log level by default."""
    if level is None:
        from uploader.settings import get_settings
        level = get_settings().log_level

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
