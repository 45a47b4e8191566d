"""
Profile Routes - profiles, follows and friends' favourite songs.
"""

import logging

from flask import Blueprint, current_app, request

from chorus.exceptions import UpstreamError
from chorus.status import QueryResult, QueryStatus, build_response

logger = logging.getLogger(__name__)

bp = Blueprint('profile', __name__)

KEY_USER_NAME = 'userName'
KEY_USER_FULLNAME = 'fullName'
KEY_USER_PASSWORD = 'password'


def _profiles():
    return current_app.extensions['chorus']['profile_driver']


def _songs():
    return current_app.extensions['chorus']['song_client']


def _error(message):
    return build_response(QueryStatus(message, QueryResult.GENERIC_ERROR))


@bp.route('/profile', methods=['POST'])
def add_profile():
    """Create a profile and its favourites playlist."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.values.to_dict()

    user_name = str(data.get(KEY_USER_NAME) or '').strip()
    full_name = str(data.get(KEY_USER_FULLNAME) or '').strip()
    password = str(data.get(KEY_USER_PASSWORD) or '')

    status = _profiles().create_user_profile(user_name, full_name, password)
    return build_response(status)


@bp.route('/followFriend/<user_name>/<friend_user_name>', methods=['PUT'])
def follow_friend(user_name, friend_user_name):
    return build_response(_profiles().follow_friend(user_name, friend_user_name))


@bp.route('/unfollowFriend/<user_name>/<friend_user_name>', methods=['PUT'])
def unfollow_friend(user_name, friend_user_name):
    return build_response(_profiles().unfollow_friend(user_name, friend_user_name))


@bp.route('/getAllFriendFavouriteSongTitles/<user_name>', methods=['GET'])
def get_all_friend_favourite_song_titles(user_name):
    """
    Map each followed friend to their favourite songs.

    Titles come from the song service in one batched lookup. Ids it no
    longer knows (deleted songs whose cascade was lost) are dropped.
    ``?resolveTitles=false`` returns the raw song ids instead.
    """
    status = _profiles().get_all_song_friends_like(user_name)
    if not status.ok:
        return build_response(status)

    resolve = request.args.get('resolveTitles', 'true').strip().lower() != 'false'
    if not resolve:
        return build_response(status)

    friends_to_ids = status.data
    all_ids = [song_id for ids in friends_to_ids.values() for song_id in ids]
    try:
        titles = _songs().get_song_titles(all_ids)
    except UpstreamError as e:
        logger.warning('Title lookup for %s failed: %s', user_name, e)
        return _error('song service unavailable')

    status.data = {
        friend: [titles[song_id] for song_id in ids if titles.get(song_id) is not None]
        for friend, ids in friends_to_ids.items()
    }
    return build_response(status)
