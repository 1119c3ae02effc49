# app.py

import logging
import os

import click
from flask import Flask, jsonify, render_template, request

from config import Config
from extensions import ai_generator, mongo
from utils.formatting import register_filters


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    app.logger.setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Method not allowed'}), 405
        return error

    @app.errorhandler(500)
    def internal_error(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('errors/500.html'), 500


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create the MongoDB indexes used by the application."""
        mongo.db.users.create_index('email', unique=True)
        mongo.db.patients.create_index([('user_id', 1), ('created_at', -1)])
        mongo.db.patient_metrics.create_index([('patient_id', 1), ('metric_date', 1)])
        mongo.db.plans.create_index([('user_id', 1), ('created_at', -1)])
        mongo.db.shopping_lists.create_index([('user_id', 1), ('created_at', -1)])
        click.echo("Indexes created.")


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    # ObjectId URL converter is registered by Flask-PyMongo, before the blueprints
    mongo.init_app(app)
    ai_generator.init_app(app)

    from api import bp as api_bp
    from auth import bp as auth_bp
    from views import bp as main_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(main_bp)

    register_filters(app)
    register_error_handlers(app)
    register_commands(app)
    return app


# ✅ Run App
if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=app.config['DEBUG'])
