"""
Configuration Module for Chorus.
Centralizes settings for the profile and song services with environment variable support.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _optional_float(name):
    raw = os.getenv(name, '').strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning('Ignoring %s=%r: not a number, falling back to no timeout', name, raw)
        return None


class Config:
    """Application configuration with sensible defaults."""

    # Paths
    BASE_DIR = Path(__file__).parent.parent
    PROFILE_DATABASE_PATH = BASE_DIR / 'profiles.db'
    SONG_DATABASE_PATH = BASE_DIR / 'songs.db'

    # Databases: the profile graph and the song store never share a connection
    PROFILE_DATABASE_URI = os.getenv('PROFILE_DATABASE_URI', f'sqlite:///{PROFILE_DATABASE_PATH}')
    SONG_DATABASE_URI = os.getenv('SONG_DATABASE_URI', f'sqlite:///{SONG_DATABASE_PATH}')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Peer services
    SONG_SERVICE_URL = os.getenv('SONG_SERVICE_URL', 'http://localhost:3001')
    PROFILE_SERVICE_URL = os.getenv('PROFILE_SERVICE_URL', 'http://localhost:3002')
    HTTP_TIMEOUT = _optional_float('HTTP_TIMEOUT')
    TITLE_LOOKUP_WORKERS = int(os.getenv('TITLE_LOOKUP_WORKERS', '1'))

    # What happens when a favourites counter at 0 is decremented: 'reject' or 'clamp'
    FAVOURITES_DECREMENT_POLICY = os.getenv('FAVOURITES_DECREMENT_POLICY', 'reject').lower()

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


# Create default instance
config = Config()
