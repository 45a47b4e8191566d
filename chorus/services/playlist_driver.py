"""
Playlist Driver - favourites edges between playlists and songs.

A like needs both endpoints: the user's favourites playlist in the graph
and the song in the song service. The graph keeps only a reference node
per song id, created on first like and removed by the delete cascade.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from chorus.exceptions import UpstreamError
from chorus.models import Playlist, PlaylistSong, SongNode, favourites_name, transaction
from chorus.status import QueryResult, QueryStatus

logger = logging.getLogger(__name__)


class PlaylistDriver:
    """Favourites-playlist operations for the profile service."""

    def __init__(self, db, song_client):
        """
        Args:
            db: Flask-SQLAlchemy handle bound to the profile graph
            song_client: SongServiceClient used for existence checks and counters
        """
        self.db = db
        self.song_client = song_client

    def _favourites(self, session, user_name):
        return session.query(Playlist).filter_by(
            owner_user_name=user_name,
            pl_name=favourites_name(user_name),
        ).first()

    def _notify_counter(self, song_id, should_decrement):
        """Best-effort favourites counter update on the song service."""
        try:
            code = self.song_client.update_favourites_count(song_id, should_decrement)
        except UpstreamError as e:
            logger.warning('Favourites counter update for song %s failed: %s', song_id, e)
            return
        if code != 200:
            logger.warning('Favourites counter update for song %s returned HTTP %s', song_id, code)

    def like_song(self, user_name: str, song_id: str) -> QueryStatus:
        """Add song to the user's favourites. Liking twice keeps a single edge."""
        try:
            with transaction(self.db) as session:
                if self._favourites(session, user_name) is None:
                    return QueryStatus('like a song', QueryResult.NOT_FOUND)

            if not self.song_client.song_exists(song_id):
                return QueryStatus('like a song', QueryResult.NOT_FOUND)

            with transaction(self.db) as session:
                playlist = self._favourites(session, user_name)
                if playlist is None:
                    return QueryStatus('like a song', QueryResult.NOT_FOUND)

                if session.get(SongNode, song_id) is None:
                    session.add(SongNode(song_id=song_id))
                    session.flush()

                existing = session.query(PlaylistSong).filter_by(
                    playlist_id=playlist.id, song_id=song_id
                ).first()
                created = existing is None
                if created:
                    session.add(PlaylistSong(playlist_id=playlist.id, song_id=song_id))
        except UpstreamError as e:
            logger.warning('Song lookup for like %s/%s failed: %s', user_name, song_id, e)
            return QueryStatus('like a song', QueryResult.GENERIC_ERROR)
        except SQLAlchemyError as e:
            logger.exception('Like %s/%s failed: %s', user_name, song_id, e)
            return QueryStatus('like a song', QueryResult.GENERIC_ERROR)

        if created:
            self._notify_counter(song_id, should_decrement=False)
        return QueryStatus('like a song', QueryResult.OK)

    def unlike_song(self, user_name: str, song_id: str) -> QueryStatus:
        """Remove song from the user's favourites. NOT_FOUND unless it was liked."""
        try:
            with transaction(self.db) as session:
                playlist = self._favourites(session, user_name)
                if playlist is None:
                    return QueryStatus('unlike a song', QueryResult.NOT_FOUND)

                removed = session.query(PlaylistSong).filter_by(
                    playlist_id=playlist.id, song_id=song_id
                ).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            logger.exception('Unlike %s/%s failed: %s', user_name, song_id, e)
            return QueryStatus('unlike a song', QueryResult.GENERIC_ERROR)

        if not removed:
            return QueryStatus('unlike a song', QueryResult.NOT_FOUND)

        self._notify_counter(song_id, should_decrement=True)
        return QueryStatus('unlike a song', QueryResult.OK)

    def delete_song_from_db(self, song_id: str) -> QueryStatus:
        """Detach-delete a song reference and every edge touching it."""
        try:
            with transaction(self.db) as session:
                node = session.get(SongNode, song_id)
                if node is None:
                    return QueryStatus('delete a song', QueryResult.NOT_FOUND)

                edges = session.query(PlaylistSong).filter_by(song_id=song_id).delete(
                    synchronize_session=False
                )
                session.delete(node)
        except SQLAlchemyError as e:
            logger.exception('Delete of song %s from playlists failed: %s', song_id, e)
            return QueryStatus('delete a song', QueryResult.GENERIC_ERROR)

        logger.info('Removed song %s and %d playlist reference(s)', song_id, edges)
        return QueryStatus('delete a song', QueryResult.OK)
