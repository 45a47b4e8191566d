"""Logging setup shared by the Chorus service entry points."""

import logging

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: str = 'INFO') -> None:
    """Configure the root logger. A no-op once the root logger has handlers."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
