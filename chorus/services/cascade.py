"""
Delete cascade from the song store to the profile graph.

When a song document is removed, every favourites edge pointing at it
must go too. The two stores are never written in one transaction, so
the song service deletes its record first and then hands the id to a
``DeleteCascade``. The HTTP implementation is best-effort: it reports
failure but never raises, and nothing retries a lost cascade.
"""

import logging
from abc import ABC, abstractmethod

from chorus.exceptions import UpstreamError
from chorus.services.clients import PlaylistServiceClient

logger = logging.getLogger(__name__)


class DeleteCascade(ABC):
    """Propagates a completed song deletion to the stores that reference it."""

    @abstractmethod
    def propagate(self, song_id: str) -> bool:
        """Remove references to ``song_id``. True when references were removed."""


class HttpDeleteCascade(DeleteCascade):
    """Fire-and-forget PUT to the profile service's cascade endpoint."""

    def __init__(self, playlist_client: PlaylistServiceClient):
        self.playlist_client = playlist_client

    def propagate(self, song_id: str) -> bool:
        try:
            removed = self.playlist_client.delete_song_references(song_id)
        except UpstreamError as e:
            logger.warning('Delete cascade for song %s failed: %s', song_id, e)
            return False

        if not removed:
            # 404 here just means nobody ever liked the song
            logger.info('Delete cascade for song %s removed no playlist references', song_id)
        return removed
