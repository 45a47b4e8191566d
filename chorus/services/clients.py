"""
HTTP clients for calls between the Chorus services.

Both clients wrap ``requests``. Transport failures, malformed replies
and song service errors surface as ``UpstreamError``; callers decide
whether that is fatal (existence checks, title lookups) or merely logged
(favourites counters, delete cascade).
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Optional
from urllib.parse import quote

import requests

from chorus.exceptions import UpstreamError

logger = logging.getLogger(__name__)

STATUS_OK = 'OK'
STATUS_NOT_FOUND = 'NOT_FOUND'


class _ServiceClient:
    """Shared plumbing: base URL joining, sessions, timeout and error mapping."""

    def __init__(self, base_url: str, session=None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        # An injected session is used as is; otherwise each thread opens its own
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self):
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def _url(self, endpoint: str, *segments: str) -> str:
        parts = [self.base_url + endpoint]
        parts.extend(quote(str(segment), safe='') for segment in segments)
        return '/'.join(parts)

    def _call(self, method: str, url: str, params: dict = None):
        try:
            send = getattr(self.session, method)
            return send(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f'{method.upper()} {url} failed: {e}', url=url) from e

    @staticmethod
    def _json(resp, url: str) -> dict:
        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError(
                f'Non-JSON reply from {url}', url=url, status_code=resp.status_code
            ) from e
        if not isinstance(body, dict):
            raise UpstreamError(f'Unexpected reply from {url}', url=url, status_code=resp.status_code)
        return body


class SongServiceClient(_ServiceClient):
    """Client for the song service."""

    def __init__(
        self,
        base_url: str,
        session=None,
        timeout: Optional[float] = None,
        max_workers: int = 1,
    ):
        super().__init__(base_url, session=session, timeout=timeout)
        self.max_workers = max(1, int(max_workers or 1))

    def get_song_title(self, song_id: str) -> Optional[str]:
        """
        Return the song's title, or None when the song service does not know it.

        Raises:
            UpstreamError: transport failure or any reply other than OK/NOT_FOUND
        """
        url = self._url('/getSongTitleById', song_id)
        resp = self._call('get', url)
        body = self._json(resp, url)
        status = body.get('status')
        if status == STATUS_OK:
            return body.get('data')
        if status == STATUS_NOT_FOUND or resp.status_code == 404:
            return None
        raise UpstreamError(
            f'GET {url} returned {status or resp.status_code}',
            url=url,
            status_code=resp.status_code,
        )

    def song_exists(self, song_id: str) -> bool:
        return self.get_song_title(song_id) is not None

    def get_song_titles(self, song_ids: Iterable[str]) -> Dict[str, Optional[str]]:
        """
        Resolve many ids at once.

        Repeated ids are looked up once. With ``max_workers > 1`` lookups
        are dispatched in parallel, bounded by ``max_workers``; each worker
        thread then uses its own ``requests.Session`` unless a session was
        injected.

        Returns:
            Mapping of every requested id to its title (None if unknown)
        """
        unique_ids = list(dict.fromkeys(song_ids))
        if not unique_ids:
            return {}

        if self.max_workers == 1 or len(unique_ids) == 1:
            return {song_id: self.get_song_title(song_id) for song_id in unique_ids}

        workers = min(self.max_workers, len(unique_ids))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            titles = list(pool.map(self.get_song_title, unique_ids))
        return dict(zip(unique_ids, titles))

    def update_favourites_count(self, song_id: str, should_decrement: bool) -> int:
        """Ask the song service to move a favourites counter by one. Returns the HTTP code."""
        url = self._url('/updateSongFavouritesCount', song_id)
        params = {'shouldDecrement': 'true' if should_decrement else 'false'}
        resp = self._call('put', url, params=params)
        return resp.status_code


class PlaylistServiceClient(_ServiceClient):
    """Client for the playlist endpoints hosted by the profile service."""

    def delete_song_references(self, song_id: str) -> bool:
        """Detach-delete a song from every playlist. True on HTTP 200."""
        url = self._url('/deleteAllSongsFromDb', song_id)
        resp = self._call('put', url)
        return resp.status_code == 200
