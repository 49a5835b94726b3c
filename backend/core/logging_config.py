import logging
from typing import Optional

from .config import get_pricing_settings


def configure_logging(level: Optional[str] = None):
    """Configure root logging for a host application embedding the engine"""
    logging.basicConfig(
        level=level or get_pricing_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
