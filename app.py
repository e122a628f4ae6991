import os
import logging
from flask import Flask
from flask_cors import CORS
import redis
from extensions import db
from dotenv import load_dotenv

load_dotenv() # Load environment variables from .env file BEFORE importing routes

import commands
import routes
from config import LOG_LEVEL, REDIS_URL, load_config
from utilities.llm import OpenAICompletionClient

logger = logging.getLogger(__name__)


def create_app(completion_client=None):
    """Application factory.

    `completion_client` is injected by tests; otherwise an OpenAI client is
    built from the environment, which raises MissingConfiguration when the
    API key or vector database id is missing.
    """
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', LOG_LEVEL))

    app = Flask(__name__)
    CORS(app)

    # Configure the database from the environment variable
    database_url = os.environ.get('DATABASE_URL')
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please create a .env file or set the environment variable.")

    # Heroku/Render use postgres://, but SQLAlchemy needs postgresql://
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Initialize the database with the app
    db.init_app(app)

    # Connect to Redis from the environment variable
    redis_url = os.environ.get('REDIS_URL', REDIS_URL)
    try:
        r = redis.from_url(redis_url, decode_responses=True)
        r.ping() # Check connection
        logger.info("Successfully connected to Redis.")
    except (redis.exceptions.ConnectionError, TypeError, ValueError) as e:
        logger.warning("Could not connect to Redis: %s", e)
        r = None

    if completion_client is None:
        completion_client = OpenAICompletionClient(load_config())

    # Initialize routes and CLI commands
    routes.init_app(app, r, db, completion_client)
    commands.init_app(app, db)

    # Create database tables if they don't exist
    with app.app_context():
        db.create_all()

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(port=5001, debug=True)
