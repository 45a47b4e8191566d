"""
Models package for Chorus.
"""

from .database import graph_db, song_db, init_graph_db, init_song_db, transaction
from .graph import Profile, Follow, Playlist, SongNode, PlaylistSong, favourites_name
from .song import Song, SONG_FIELDS

__all__ = [
    'graph_db', 'song_db', 'init_graph_db', 'init_song_db', 'transaction',
    'Profile', 'Follow', 'Playlist', 'SongNode', 'PlaylistSong', 'favourites_name',
    'Song', 'SONG_FIELDS',
]
