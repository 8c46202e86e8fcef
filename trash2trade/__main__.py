"""Entry point: run the API server or seed sample data"""
import logging
import sys
import traceback

import uvicorn

from trash2trade.app import create_app
from trash2trade.config import settings
from trash2trade.db import Database
from trash2trade.seed import seed_sample_data

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

USAGE = "usage: python -m trash2trade [serve|seed]"

def serve() -> None:
    """Start the HTTP server; the app's lifespan opens and closes the database."""
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)

def seed() -> None:
    """Create tables, the reward catalog and sample accounts/pickups."""
    db = Database(settings.database_url, echo=settings.DB_ECHO, seed_rewards=True)
    try:
        db.init()
        seed_sample_data(db, settings.BCRYPT_ROUNDS)
    finally:
        db.dispose()

def run(argv=None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    command = argv[0] if argv else 'serve'
    commands = {'serve': serve, 'seed': seed}

    if command not in commands:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    try:
        commands[command]()
    except Exception as e:
        logger.error(f"Error during {command}: {e}")
        traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    run()
