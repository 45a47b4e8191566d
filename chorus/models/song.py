"""
Song record stored by the song service.
"""

import secrets

from .database import song_db as db

KEY_SONG_NAME = 'songName'
KEY_SONG_ARTIST_FULL_NAME = 'songArtistFullName'
KEY_SONG_ALBUM = 'songAlbum'
KEY_SONG_AMOUNT_FAVOURITES = 'songAmountFavourites'

SONG_FIELDS = (KEY_SONG_NAME, KEY_SONG_ARTIST_FULL_NAME, KEY_SONG_ALBUM)


def new_song_id():
    """Store-generated identity, shaped like a 12-byte object id."""
    return secrets.token_hex(12)


class Song(db.Model):
    """A song with its favourites counter."""

    __tablename__ = 'songs'
    __table_args__ = (
        db.CheckConstraint('song_amount_favourites >= 0', name='ck_song_favourites_non_negative'),
    )

    id = db.Column(db.String(24), primary_key=True, default=new_song_id)
    song_name = db.Column(db.String(255), nullable=False, index=True)
    song_artist_full_name = db.Column(db.String(255), nullable=False)
    song_album = db.Column(db.String(255), nullable=False)
    song_amount_favourites = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        """Serialize song for API responses."""
        return {
            'id': self.id,
            KEY_SONG_NAME: self.song_name,
            KEY_SONG_ARTIST_FULL_NAME: self.song_artist_full_name,
            KEY_SONG_ALBUM: self.song_album,
            KEY_SONG_AMOUNT_FAVOURITES: self.song_amount_favourites or 0,
        }
