"""
Services package for Chorus.
"""

from .cascade import DeleteCascade, HttpDeleteCascade
from .clients import PlaylistServiceClient, SongServiceClient
from .playlist_driver import PlaylistDriver
from .profile_driver import ProfileDriver
from .song_store import SongStore

__all__ = [
    'DeleteCascade', 'HttpDeleteCascade', 'PlaylistServiceClient', 'SongServiceClient',
    'PlaylistDriver', 'ProfileDriver', 'SongStore',
]
