"""
Chorus - profile, playlist and song microservices

Flask application factories. The profile service hosts the profile and
playlist endpoints over the profile graph; the song service hosts the
song catalog. Each factory builds its store drivers and peer-service
clients explicitly and hands them to the routes through
``app.extensions['chorus']``.
"""

import logging

from flask import Flask
from werkzeug.exceptions import HTTPException

from config import config
from chorus.logger import setup_logging
from chorus.status import QueryResult, QueryStatus, build_response

logger = logging.getLogger(__name__)


def _base_app(database_uri, testing):
    setup_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.config['TESTING'] = testing
    app.config['SQLALCHEMY_DATABASE_URI'] = database_uri
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        # Routing errors (404/405) keep their own responses
        if isinstance(error, HTTPException):
            return error
        logger.exception('Unhandled error: %s', error)
        return build_response(QueryStatus('unexpected error', QueryResult.GENERIC_ERROR))

    return app


def create_profile_app(testing=False, song_client=None):
    """
    Create the profile service.

    Args:
        testing: Flask testing flag
        song_client: SongServiceClient override; built from config when omitted
    """
    from chorus.models import graph_db, init_graph_db
    from chorus.services import PlaylistDriver, ProfileDriver, SongServiceClient

    app = _base_app(config.PROFILE_DATABASE_URI, testing)
    init_graph_db(app)

    if song_client is None:
        song_client = SongServiceClient(
            config.SONG_SERVICE_URL,
            timeout=config.HTTP_TIMEOUT,
            max_workers=config.TITLE_LOOKUP_WORKERS,
        )

    app.extensions['chorus'] = {
        'profile_driver': ProfileDriver(graph_db),
        'playlist_driver': PlaylistDriver(graph_db, song_client),
        'song_client': song_client,
    }

    from chorus.routes import playlist_bp, profile_bp
    app.register_blueprint(profile_bp)
    app.register_blueprint(playlist_bp)

    return app


def create_song_app(testing=False, cascade=None, decrement_policy=None):
    """
    Create the song service.

    Args:
        testing: Flask testing flag
        cascade: DeleteCascade run after a song is deleted; defaults to an
            HTTP cascade against the profile service
        decrement_policy: 'reject' or 'clamp'; defaults to config
    """
    from chorus.models import init_song_db, song_db
    from chorus.services import HttpDeleteCascade, PlaylistServiceClient, SongStore

    app = _base_app(config.SONG_DATABASE_URI, testing)
    init_song_db(app)

    if cascade is None:
        cascade = HttpDeleteCascade(
            PlaylistServiceClient(config.PROFILE_SERVICE_URL, timeout=config.HTTP_TIMEOUT)
        )

    policy = decrement_policy or config.FAVOURITES_DECREMENT_POLICY
    app.extensions['chorus'] = {
        'song_store': SongStore(song_db, decrement_policy=policy),
        'cascade': cascade,
    }

    from chorus.routes import songs_bp
    app.register_blueprint(songs_bp)

    return app


__all__ = ['create_profile_app', 'create_song_app']
