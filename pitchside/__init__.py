from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()


def create_app(config_name='development'):
    app = Flask(__name__)

    # Config
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv(
        'DATABASE_URL',
        'sqlite:///pitchside.db'
    )
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_AUDIENCE'] = os.getenv('JWT_AUDIENCE', 'authenticated')

    # Translation pipeline
    app.config['TRANSLATION_API_URL'] = os.getenv(
        'TRANSLATION_API_URL',
        'https://openrouter.ai/api/v1/chat/completions'
    )
    app.config['TRANSLATION_API_KEY'] = os.getenv('TRANSLATION_API_KEY', '')
    app.config['TRANSLATION_MODEL'] = os.getenv('TRANSLATION_MODEL', 'anthropic/claude-sonnet-4')
    app.config['TRANSLATION_TIMEOUT'] = float(os.getenv('TRANSLATION_TIMEOUT', 60))
    app.config['TRANSLATION_BATCH_DELAY'] = float(os.getenv('TRANSLATION_BATCH_DELAY', 1.0))
    app.config['TRANSLATION_JOBS_EAGER'] = os.getenv(
        'TRANSLATION_JOBS_EAGER', 'false'
    ).lower() in ('true', '1', 'yes')

    # Public site (crawler meta pages link back here)
    app.config['SITE_URL'] = os.getenv('SITE_URL', 'https://menlifoot.ca').rstrip('/')
    app.config['SITE_NAME'] = os.getenv('SITE_NAME', 'Menlifoot')
    app.config['REDIS_URL'] = os.getenv('REDIS_URL', '')
    app.config['RATE_LIMIT_ENABLED'] = os.getenv(
        'RATE_LIMIT_ENABLED', 'true'
    ).lower() in ('true', '1', 'yes')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['TRANSLATION_API_KEY'] = ''
        app.config['TRANSLATION_BATCH_DELAY'] = 0
        app.config['TRANSLATION_JOBS_EAGER'] = True
        app.config['RATE_LIMIT_ENABLED'] = False
        app.config['REDIS_URL'] = ''

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=os.getenv('CORS_ORIGINS', '*').split(','))

    from pitchside.services.translation_jobs import TranslationJobQueue
    app.extensions['translation_jobs'] = TranslationJobQueue(app)

    # Create tables with error handling
    with app.app_context():
        from pitchside import models  # noqa: F401
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(f"Could not create database tables: {e}")

    # Register routes
    from pitchside.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
