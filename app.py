#!/usr/bin/env python3
"""
Run script for the procurement system
"""

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

import argparse
import os
import sys

from app import create_app
from app.build import build_database
from app.utils.logger import get_logger

app = create_app()
logger = get_logger("procurement.run")


def parse_arguments():
    """Parse command line arguments for the build step"""
    parser = argparse.ArgumentParser(description='Procurement Fulfillment System')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and critical data, then exit without starting the server')
    parser.add_argument('--no-seed-data', action='store_false', dest='with_seed_data',
                        help='Skip demonstration users and catalog records')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting Procurement Fulfillment System...")
    build_database(with_seed_data=args.with_seed_data, app=app)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
