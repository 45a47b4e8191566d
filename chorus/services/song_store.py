"""
Song Store - CRUD over song records and their favourites counters.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from chorus.models import Song, transaction
from chorus.status import QueryResult, QueryStatus

logger = logging.getLogger(__name__)

POLICY_REJECT = 'reject'
POLICY_CLAMP = 'clamp'
DECREMENT_POLICIES = (POLICY_REJECT, POLICY_CLAMP)


class SongStore:
    """
    Data access for the song service.

    Usage:
        store = SongStore(song_db, decrement_policy='clamp')
        status = store.add_song('Song', 'Artist', 'Album')
    """

    def __init__(self, db, decrement_policy: str = POLICY_REJECT):
        """
        Args:
            db: Flask-SQLAlchemy handle bound to the song database
            decrement_policy: 'reject' refuses to take a counter below zero,
                'clamp' leaves it at zero and reports success
        """
        if decrement_policy not in DECREMENT_POLICIES:
            raise ValueError(f'Unknown decrement policy: {decrement_policy}')
        self.db = db
        self.decrement_policy = decrement_policy

    def add_song(self, song_name: str, artist_full_name: str, album: str) -> QueryStatus:
        """Insert a song with a zero favourites counter."""
        try:
            with transaction(self.db) as session:
                song = Song(
                    song_name=song_name,
                    song_artist_full_name=artist_full_name,
                    song_album=album,
                    song_amount_favourites=0,
                )
                session.add(song)
                session.flush()
                data = song.to_dict()
        except SQLAlchemyError as e:
            logger.exception('Failed to add song %r: %s', song_name, e)
            return QueryStatus('failed to add song', QueryResult.GENERIC_ERROR)

        logger.info('Added song %s', data['id'])
        return QueryStatus('song added', QueryResult.OK, data)

    def find_song_by_id(self, song_id: str) -> QueryStatus:
        try:
            with transaction(self.db) as session:
                song = session.get(Song, song_id)
                data = song.to_dict() if song else None
        except SQLAlchemyError as e:
            logger.exception('Failed to load song %s: %s', song_id, e)
            return QueryStatus('failed to find song', QueryResult.GENERIC_ERROR)

        if data is None:
            return QueryStatus('song not found', QueryResult.NOT_FOUND)
        return QueryStatus('song found', QueryResult.OK, data)

    def get_song_title_by_id(self, song_id: str) -> QueryStatus:
        status = self.find_song_by_id(song_id)
        if status.ok:
            status.data = status.data['songName']
        return status

    def delete_song_by_id(self, song_id: str) -> QueryStatus:
        """Remove a song record. Playlist references are the caller's concern."""
        try:
            with transaction(self.db) as session:
                song = session.get(Song, song_id)
                if song is None:
                    return QueryStatus('song not found', QueryResult.NOT_FOUND)
                session.delete(song)
        except SQLAlchemyError as e:
            logger.exception('Failed to delete song %s: %s', song_id, e)
            return QueryStatus('failed to delete song', QueryResult.GENERIC_ERROR)

        logger.info('Deleted song %s', song_id)
        return QueryStatus('song deleted', QueryResult.OK)

    def update_song_favourites_count(self, song_id: str, should_decrement: bool) -> QueryStatus:
        """
        Move the favourites counter by one.

        Read-then-write with no lock: concurrent updates to the same song
        can overwrite each other.
        """
        try:
            with transaction(self.db) as session:
                song = session.get(Song, song_id)
                if song is None:
                    return QueryStatus('song not found', QueryResult.NOT_FOUND)

                count = song.song_amount_favourites or 0
                if not should_decrement:
                    count += 1
                elif count > 0:
                    count -= 1
                elif self.decrement_policy == POLICY_REJECT:
                    return QueryStatus(
                        'favourites count cannot go below zero', QueryResult.GENERIC_ERROR
                    )

                song.song_amount_favourites = count
        except SQLAlchemyError as e:
            logger.exception('Failed to update favourites for song %s: %s', song_id, e)
            return QueryStatus('failed to update favourites count', QueryResult.GENERIC_ERROR)

        return QueryStatus('favourites count updated', QueryResult.OK)
