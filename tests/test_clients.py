"""Tests for the inter-service HTTP clients and the delete cascade."""

import threading
from unittest.mock import MagicMock

import pytest
import requests

from chorus.exceptions import UpstreamError
from chorus.services import (
    DeleteCascade,
    HttpDeleteCascade,
    PlaylistServiceClient,
    SongServiceClient,
)


def _reply(status_code=200, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    if body is None:
        resp.json.side_effect = ValueError('no json')
    else:
        resp.json.return_value = body
    return resp


class FakeSongSession:
    """Answers getSongTitleById from a dict and counts calls per id."""

    def __init__(self, titles):
        self.titles = titles
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, params=None, timeout=None):
        song_id = url.rsplit('/', 1)[-1]
        with self._lock:
            self.calls.append(song_id)
        if song_id in self.titles:
            return _reply(200, {'status': 'OK', 'data': self.titles[song_id]})
        return _reply(404, {'status': 'NOT_FOUND'})


class TestSongServiceClient:
    def test_title_found(self):
        session = FakeSongSession({'a1': 'Alpha'})
        client = SongServiceClient('http://songs.local/', session=session)
        assert client.get_song_title('a1') == 'Alpha'
        assert client.song_exists('a1')

    def test_title_missing(self):
        client = SongServiceClient('http://songs.local', session=FakeSongSession({}))
        assert client.get_song_title('zz') is None
        assert not client.song_exists('zz')

    def test_url_building(self):
        session = MagicMock()
        session.get.return_value = _reply(200, {'status': 'OK', 'data': 'T'})
        client = SongServiceClient('http://songs.local/', session=session, timeout=2.5)
        client.get_song_title('a/b')
        session.get.assert_called_once_with(
            'http://songs.local/getSongTitleById/a%2Fb', params=None, timeout=2.5
        )

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('refused')
        client = SongServiceClient('http://songs.local', session=session)
        with pytest.raises(UpstreamError) as exc:
            client.get_song_title('a1')
        assert exc.value.url == 'http://songs.local/getSongTitleById/a1'

    def test_non_json_reply(self):
        session = MagicMock()
        session.get.return_value = _reply(502)
        client = SongServiceClient('http://songs.local', session=session)
        with pytest.raises(UpstreamError) as exc:
            client.get_song_title('a1')
        assert exc.value.status_code == 502

    def test_song_service_error_raises(self):
        session = MagicMock()
        session.get.return_value = _reply(500, {'status': 'INTERNAL_SERVER_ERROR'})
        client = SongServiceClient('http://songs.local', session=session)
        with pytest.raises(UpstreamError) as exc:
            client.get_song_title('a1')
        assert exc.value.status_code == 500
        with pytest.raises(UpstreamError):
            client.song_exists('a1')

    def test_not_found_status_without_404_code(self):
        session = MagicMock()
        session.get.return_value = _reply(200, {'status': 'NOT_FOUND'})
        client = SongServiceClient('http://songs.local', session=session)
        assert client.get_song_title('a1') is None

    def test_update_favourites_count(self):
        session = MagicMock()
        session.put.return_value = _reply(200, {'status': 'OK'})
        client = SongServiceClient('http://songs.local', session=session)
        assert client.update_favourites_count('a1', True) == 200
        session.put.assert_called_once_with(
            'http://songs.local/updateSongFavouritesCount/a1',
            params={'shouldDecrement': 'true'},
            timeout=None,
        )


class TestGetSongTitles:
    def test_empty(self):
        session = FakeSongSession({})
        client = SongServiceClient('http://songs.local', session=session)
        assert client.get_song_titles([]) == {}
        assert session.calls == []

    def test_repeated_ids_looked_up_once(self):
        session = FakeSongSession({'a': 'A', 'b': 'B'})
        client = SongServiceClient('http://songs.local', session=session)
        titles = client.get_song_titles(['a', 'b', 'a', 'missing', 'a'])
        assert titles == {'a': 'A', 'b': 'B', 'missing': None}
        assert sorted(session.calls) == ['a', 'b', 'missing']

    def test_parallel_lookup(self):
        titles = {f's{i}': f'Song {i}' for i in range(10)}
        session = FakeSongSession(titles)
        client = SongServiceClient('http://songs.local', session=session, max_workers=4)
        assert client.get_song_titles(list(titles)) == titles
        assert sorted(session.calls) == sorted(titles)

    def test_parallel_lookup_propagates_errors(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout('slow')
        client = SongServiceClient('http://songs.local', session=session, max_workers=3)
        with pytest.raises(UpstreamError):
            client.get_song_titles(['a', 'b', 'c'])

    def test_error_reply_fails_whole_batch(self):
        session = MagicMock()
        session.get.side_effect = [
            _reply(200, {'status': 'OK', 'data': 'A'}),
            _reply(500, {'status': 'INTERNAL_SERVER_ERROR'}),
        ]
        client = SongServiceClient('http://songs.local', session=session)
        with pytest.raises(UpstreamError):
            client.get_song_titles(['a', 'b'])

    def test_worker_threads_do_not_share_a_session(self, monkeypatch):
        created = []
        seen = []
        lock = threading.Lock()

        def make_session():
            session = MagicMock()

            def get(url, params=None, timeout=None):
                with lock:
                    seen.append((id(session), threading.get_ident()))
                return _reply(200, {'status': 'OK', 'data': url.rsplit('/', 1)[-1].upper()})

            session.get.side_effect = get
            created.append(session)
            return session

        monkeypatch.setattr(requests, 'Session', make_session)
        client = SongServiceClient('http://songs.local', max_workers=4)
        ids = [f's{i}' for i in range(12)]

        assert client.get_song_titles(ids) == {i: i.upper() for i in ids}
        threads_by_session = {}
        for session_id, thread_id in seen:
            threads_by_session.setdefault(session_id, set()).add(thread_id)
        assert len(threads_by_session) == len(created)
        assert all(len(threads) == 1 for threads in threads_by_session.values())

    def test_injected_session_is_used_by_every_thread(self):
        session = FakeSongSession({'a': 'A', 'b': 'B', 'c': 'C'})
        client = SongServiceClient('http://songs.local', session=session, max_workers=3)
        client.get_song_titles(['a', 'b', 'c'])
        assert client.session is session
        assert sorted(session.calls) == ['a', 'b', 'c']


class TestHttpDeleteCascade:
    def test_delete_cascade_is_abstract(self):
        with pytest.raises(TypeError):
            DeleteCascade()

        class Recording(DeleteCascade):
            def propagate(self, song_id):
                return song_id == 'a1'

        assert Recording().propagate('a1') is True

    def test_success(self):
        session = MagicMock()
        session.put.return_value = _reply(200, {'status': 'OK'})
        cascade = HttpDeleteCascade(PlaylistServiceClient('http://profiles.local', session=session))
        assert cascade.propagate('a1') is True
        session.put.assert_called_once_with(
            'http://profiles.local/deleteAllSongsFromDb/a1', params=None, timeout=None
        )

    def test_not_found_reported(self):
        session = MagicMock()
        session.put.return_value = _reply(404, {'status': 'NOT_FOUND'})
        cascade = HttpDeleteCascade(PlaylistServiceClient('http://profiles.local', session=session))
        assert cascade.propagate('a1') is False

    def test_transport_error_swallowed(self):
        session = MagicMock()
        session.put.side_effect = requests.ConnectionError('refused')
        cascade = HttpDeleteCascade(PlaylistServiceClient('http://profiles.local', session=session))
        assert cascade.propagate('a1') is False
