"""
Profile Driver - profiles, follow edges and friends' favourites.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from chorus.models import Follow, Playlist, PlaylistSong, Profile, favourites_name, transaction
from chorus.status import QueryResult, QueryStatus

logger = logging.getLogger(__name__)


class ProfileDriver:
    """Profile-graph operations for the profile service."""

    def __init__(self, db):
        self.db = db

    def create_user_profile(self, user_name: str, full_name: str, password: str) -> QueryStatus:
        """Create a profile together with its favourites playlist, atomically."""
        if not user_name or not full_name or not password:
            return QueryStatus('userName, fullName and password are required', QueryResult.GENERIC_ERROR)

        try:
            with transaction(self.db) as session:
                profile = Profile(user_name=user_name, full_name=full_name)
                profile.set_password(password)
                session.add(profile)
                session.add(Playlist(pl_name=favourites_name(user_name), owner_user_name=user_name))
                # Duplicate user names fail here on the primary key
                session.flush()
        except SQLAlchemyError as e:
            logger.warning('Could not create profile %r: %s', user_name, e)
            return QueryStatus('create user profile', QueryResult.GENERIC_ERROR)

        logger.info('Created profile %s', user_name)
        return QueryStatus('create user profile', QueryResult.OK)

    def follow_friend(self, user_name: str, friend_user_name: str) -> QueryStatus:
        """Add a follows edge. Following someone twice is a no-op."""
        try:
            with transaction(self.db) as session:
                user = session.get(Profile, user_name)
                friend = session.get(Profile, friend_user_name)
                if user is None or friend is None:
                    return QueryStatus('follow a friend', QueryResult.NOT_FOUND)

                existing = session.query(Follow).filter_by(
                    follower_user_name=user_name,
                    followee_user_name=friend_user_name,
                ).first()
                if existing is None:
                    session.add(Follow(
                        follower_user_name=user_name,
                        followee_user_name=friend_user_name,
                    ))
        except SQLAlchemyError as e:
            logger.exception('Follow %s -> %s failed: %s', user_name, friend_user_name, e)
            return QueryStatus('follow a friend', QueryResult.GENERIC_ERROR)

        return QueryStatus('follow a friend', QueryResult.OK)

    def unfollow_friend(self, user_name: str, friend_user_name: str) -> QueryStatus:
        try:
            with transaction(self.db) as session:
                removed = session.query(Follow).filter_by(
                    follower_user_name=user_name,
                    followee_user_name=friend_user_name,
                ).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            logger.exception('Unfollow %s -> %s failed: %s', user_name, friend_user_name, e)
            return QueryStatus('unfollow a friend', QueryResult.GENERIC_ERROR)

        # An edge can only exist between two existing profiles
        if not removed:
            return QueryStatus('unfollow a friend', QueryResult.NOT_FOUND)
        return QueryStatus('unfollow a friend', QueryResult.OK)

    def get_all_song_friends_like(self, user_name: str) -> QueryStatus:
        """
        Collect the favourite song ids of everyone ``user_name`` follows.

        Returns:
            OK with {friendUserName: [songId, ...]}; friends without
            favourites map to an empty list and a user who follows nobody
            gets an empty mapping. NOT_FOUND if the profile does not exist.
        """
        try:
            with transaction(self.db) as session:
                if session.get(Profile, user_name) is None:
                    return QueryStatus('get all songs friends like', QueryResult.NOT_FOUND)

                friend_names = [
                    row.followee_user_name
                    for row in session.query(Follow.followee_user_name)
                    .filter(Follow.follower_user_name == user_name)
                    .order_by(Follow.created_at, Follow.id)
                ]

                data = {}
                for friend_name in friend_names:
                    rows = (
                        session.query(PlaylistSong.song_id)
                        .join(Playlist, PlaylistSong.playlist_id == Playlist.id)
                        .filter(
                            Playlist.owner_user_name == friend_name,
                            Playlist.pl_name == favourites_name(friend_name),
                        )
                        .order_by(PlaylistSong.added_at, PlaylistSong.id)
                    )
                    data[friend_name] = [row.song_id for row in rows]
        except SQLAlchemyError as e:
            logger.exception('Friends favourites lookup for %s failed: %s', user_name, e)
            return QueryStatus('get all songs friends like', QueryResult.GENERIC_ERROR)

        return QueryStatus('get all songs friends like', QueryResult.OK, data)
