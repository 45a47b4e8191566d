"""
Database handles for the two Chorus stores.

The profile graph and the song store are separate databases owned by
separate services, so each gets its own Flask-SQLAlchemy instance.
"""

from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy

graph_db = SQLAlchemy()
song_db = SQLAlchemy()


def init_graph_db(app):
    """Initialize the profile graph with Flask app."""
    graph_db.init_app(app)

    with app.app_context():
        # Import models to register them
        from . import graph

        # Create all tables
        graph_db.create_all()


def init_song_db(app):
    """Initialize the song store with Flask app."""
    song_db.init_app(app)

    with app.app_context():
        from . import song

        song_db.create_all()


@contextmanager
def transaction(db):
    """
    Scope a unit of work on ``db.session``.

    Commits when the block exits cleanly, rolls back on any exception and
    always closes the session. Serialize what you need inside the block;
    instances are detached afterwards.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
