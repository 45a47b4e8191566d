"""
Profile graph models: profiles, follow edges, favourites playlists and
the song references they contain.
"""

from datetime import datetime

from werkzeug.security import generate_password_hash

from .database import graph_db as db

FAVOURITES_SUFFIX = '-favourites'


def favourites_name(user_name):
    """Derived name of a profile's favourites playlist."""
    return f'{user_name}{FAVOURITES_SUFFIX}'


class Profile(db.Model):
    """A user profile node."""

    __tablename__ = 'profiles'

    user_name = db.Column(db.String(100), primary_key=True)
    full_name = db.Column(db.String(200), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    playlists = db.relationship('Playlist', back_populates='owner', lazy='dynamic')

    def set_password(self, password):
        """Hash and store password."""
        self.password_hash = generate_password_hash(password)


class Follow(db.Model):
    """Directed follows edge between two profiles."""

    __tablename__ = 'follows'
    __table_args__ = (
        db.UniqueConstraint('follower_user_name', 'followee_user_name', name='uq_follow'),
    )

    id = db.Column(db.Integer, primary_key=True)
    follower_user_name = db.Column(
        db.String(100),
        db.ForeignKey('profiles.user_name', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    followee_user_name = db.Column(
        db.String(100),
        db.ForeignKey('profiles.user_name', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Playlist(db.Model):
    """Per-profile favourites playlist, created together with the profile."""

    __tablename__ = 'playlists'

    id = db.Column(db.Integer, primary_key=True)
    pl_name = db.Column(db.String(120), nullable=False, unique=True, index=True)
    owner_user_name = db.Column(
        db.String(100),
        db.ForeignKey('profiles.user_name', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    owner = db.relationship('Profile', back_populates='playlists')
    songs = db.relationship(
        'PlaylistSong',
        back_populates='playlist',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )


class SongNode(db.Model):
    """Graph-side reference to a song record held by the song service."""

    __tablename__ = 'song_nodes'

    song_id = db.Column(db.String(64), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class PlaylistSong(db.Model):
    """The ``contains`` edge: this playlist's owner likes this song."""

    __tablename__ = 'playlist_contains'
    __table_args__ = (
        db.UniqueConstraint('playlist_id', 'song_id', name='uq_playlist_song'),
    )

    id = db.Column(db.Integer, primary_key=True)
    playlist_id = db.Column(
        db.Integer,
        db.ForeignKey('playlists.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    song_id = db.Column(
        db.String(64),
        db.ForeignKey('song_nodes.song_id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    added_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    playlist = db.relationship('Playlist', back_populates='songs')
