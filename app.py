#!/usr/bin/env python3
"""
Run script for the bus station backend
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from busstation import create_app, env_flag  # noqa: E402
from busstation.build import build_database  # noqa: E402
from busstation.logger import get_logger  # noqa: E402

# Note: SECRET_KEY and the admin password come from the environment.
# Run 'python generate_env.py' to create a .env file with secure values.

app = create_app()
logger = get_logger("bus_station.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Bus station operations backend')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and the admin user, then exit without starting the server')
    parser.add_argument('--skip-build', action='store_true',
                        help='Start the server without touching the database schema')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    if not args.skip_build:
        build_database(app)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = env_flag('FLASK_DEBUG', 'False')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = env_flag('USE_RELOADER', 'False')

    # FLASK_HOST: Server host (default: 127.0.0.1 for security)
    host = os.environ.get('FLASK_HOST', '127.0.0.1')

    # FLASK_PORT: Server port (default: 5000)
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
