from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    # Import and register blueprints here
    from fantanome.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from fantanome.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from fantanome.api.submissions import submissions
    flask_app.register_blueprint(submissions, url_prefix='/api/games')

    from fantanome.services.games.errors import GameError, Unauthenticated

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify({'error': exc.message}), exc.status_code

    # Flask-Login user loader
    from fantanome.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        exc = Unauthenticated()
        return jsonify({'error': exc.message}), exc.status_code

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed one parent and two guessers
            seeds = [
                ('parent@example.com', 'parent'),
                ('guest1@example.com', 'participant'),
                ('guest2@example.com', 'participant'),
            ]
            for email, user_type in seeds:
                user = User(email=email, user_type=user_type)
                user.set_password('password')
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
