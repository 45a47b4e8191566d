"""
Shared fixtures: in-memory databases and two service apps wired together.

``AppSession`` stands in for ``requests.Session`` inside the service
clients and forwards each call to the other app's Flask test client, so
cross-service calls (existence checks, title lookups, delete cascade)
run end to end without sockets.
"""

import os
import sys
from types import SimpleNamespace
from urllib.parse import urlsplit

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


class _Reply:
    """The slice of requests.Response the clients use."""

    def __init__(self, resp):
        self.status_code = resp.status_code
        self._body = resp.get_json(silent=True)

    def json(self):
        if self._body is None:
            raise ValueError('No JSON body')
        return self._body


class AppSession:
    """requests.Session look-alike backed by a Flask app's test client."""

    def __init__(self, app=None):
        self.app = app
        self.calls = []

    def _send(self, method, url, params=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method.upper(), path, params))
        client = self.app.test_client()
        resp = getattr(client, method)(path, query_string=params)
        return _Reply(resp)

    def get(self, url, **kwargs):
        return self._send('get', url, **kwargs)

    def put(self, url, **kwargs):
        return self._send('put', url, **kwargs)


@pytest.fixture
def memory_config():
    """Point both stores at fresh in-memory SQLite databases."""
    from config import config
    config.PROFILE_DATABASE_URI = 'sqlite://'
    config.SONG_DATABASE_URI = 'sqlite://'
    config.FAVOURITES_DECREMENT_POLICY = 'reject'
    config.TITLE_LOOKUP_WORKERS = 1
    config.HTTP_TIMEOUT = None
    return config


@pytest.fixture
def services(memory_config):
    """Profile and song services talking to each other in-process."""
    from chorus import create_profile_app, create_song_app
    from chorus.services import HttpDeleteCascade, PlaylistServiceClient, SongServiceClient

    song_session = AppSession()
    playlist_session = AppSession()

    song_app = create_song_app(
        testing=True,
        cascade=HttpDeleteCascade(
            PlaylistServiceClient('http://profile.test', session=playlist_session)
        ),
    )
    profile_app = create_profile_app(
        testing=True,
        song_client=SongServiceClient('http://song.test', session=song_session),
    )
    song_session.app = song_app
    playlist_session.app = profile_app

    return SimpleNamespace(
        song_app=song_app,
        profile_app=profile_app,
        song=song_app.test_client(),
        profile=profile_app.test_client(),
        song_calls=song_session.calls,
        cascade_calls=playlist_session.calls,
    )
