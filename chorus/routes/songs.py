"""
Song Routes - song CRUD and favourites counters.
"""

from flask import Blueprint, current_app, request

from chorus.models import SONG_FIELDS
from chorus.status import QueryResult, QueryStatus, build_response

bp = Blueprint('songs', __name__)


def _store():
    return current_app.extensions['chorus']['song_store']


def _cascade():
    return current_app.extensions['chorus']['cascade']


def _path():
    return f'{request.method} {request.url}'


def _respond(status):
    return build_response(status, path=_path(), include_message=True)


def _song_params():
    """Read song fields from a JSON body, falling back to form/query values."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.values.to_dict()


@bp.route('/getSongById/<song_id>', methods=['GET'])
def get_song_by_id(song_id):
    return _respond(_store().find_song_by_id(song_id))


@bp.route('/getSongTitleById/<song_id>', methods=['GET'])
def get_song_title_by_id(song_id):
    return _respond(_store().get_song_title_by_id(song_id))


@bp.route('/deleteSongById/<song_id>', methods=['DELETE'])
def delete_song_by_id(song_id):
    """Delete a song, then remove it from every playlist (best effort)."""
    status = _store().delete_song_by_id(song_id)
    if status.ok:
        _cascade().propagate(song_id)
    return _respond(status)


@bp.route('/addSong', methods=['POST'])
def add_song():
    """Add a song. Exactly songName, songArtistFullName and songAlbum are accepted."""
    params = _song_params()

    if set(params) != set(SONG_FIELDS):
        status = QueryStatus(
            f'expected exactly the fields {", ".join(SONG_FIELDS)}', QueryResult.GENERIC_ERROR
        )
        return _respond(status)

    values = [str(params[key] or '').strip() for key in SONG_FIELDS]
    if not all(values):
        return _respond(QueryStatus('song fields must not be empty', QueryResult.GENERIC_ERROR))

    return _respond(_store().add_song(*values))


@bp.route('/updateSongFavouritesCount/<song_id>', methods=['PUT'])
def update_song_favourites_count(song_id):
    should_decrement = request.args.get('shouldDecrement', '')
    if should_decrement not in ('true', 'false'):
        status = QueryStatus('shouldDecrement can only be true or false', QueryResult.GENERIC_ERROR)
        return _respond(status)

    return _respond(_store().update_song_favourites_count(song_id, should_decrement == 'true'))
