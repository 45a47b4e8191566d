"""
Playlist Routes - like, unlike and the song-deletion cascade target.
"""

from flask import Blueprint, current_app

from chorus.status import build_response

bp = Blueprint('playlist', __name__)


def _playlists():
    return current_app.extensions['chorus']['playlist_driver']


@bp.route('/likeSong/<user_name>/<song_id>', methods=['PUT'])
def like_song(user_name, song_id):
    return build_response(_playlists().like_song(user_name, song_id))


@bp.route('/unlikeSong/<user_name>/<song_id>', methods=['PUT'])
def unlike_song(user_name, song_id):
    return build_response(_playlists().unlike_song(user_name, song_id))


@bp.route('/deleteAllSongsFromDb/<song_id>', methods=['PUT'])
def delete_all_songs_from_db(song_id):
    """Internal: called by the song service after it deletes a song."""
    return build_response(_playlists().delete_song_from_db(song_id))
