#!/usr/bin/env python3
"""
Chorus - profile, playlist and song microservices

Entry point for running one service.
Run with: python run.py profile
          python run.py song
"""

import os
import sys

from dotenv import load_dotenv
load_dotenv()

from chorus import create_profile_app, create_song_app

SERVICES = {
    'profile': (create_profile_app, 'CHORUS_PROFILE_PORT', '3002'),
    'song': (create_song_app, 'CHORUS_SONG_PORT', '3001'),
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] not in SERVICES:
        print("Usage: python run.py <service>")
        print("Services:")
        print("  profile   Profiles, follows and favourites playlists")
        print("  song      Song catalog")
        sys.exit(1)

    factory, port_var, default_port = SERVICES[sys.argv[1]]
    app = factory()

    host = os.getenv('CHORUS_HOST', '0.0.0.0')
    port = int(os.getenv(port_var, default_port))

    print(f"Chorus {sys.argv[1]} service on http://{host}:{port}")
    print("Press Ctrl+C to stop")

    app.run(debug=False, host=host, port=port, threaded=True)


if __name__ == '__main__':
    main()
