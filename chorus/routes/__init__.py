"""
Routes package for Chorus.
Blueprints for the profile service and the song service.
"""

from .playlist import bp as playlist_bp
from .profile import bp as profile_bp
from .songs import bp as songs_bp

__all__ = ['playlist_bp', 'profile_bp', 'songs_bp']
