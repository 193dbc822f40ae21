from flask import Flask
from app.config import DevelopmentConfig


def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        raise RuntimeError('SQLALCHEMY_DATABASE_URI is not configured (set DATABASE_URI).')

    from app.logger import setup_logging
    setup_logging(app)

    # Initialize extensions
    from app import extensions
    extensions.init_app(app)

    # Import models so every table is known before create_all
    from auth import models as auth_models  # noqa
    from friends import models as friends_models  # noqa
    from trips import models as trips_models  # noqa

    from app.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from auth import auth_bp
    from users import users_bp
    from friends import friends_bp
    from trips import trips_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(friends_bp, url_prefix='/api/friends')
    app.register_blueprint(trips_bp, url_prefix='/api/trips')

    # Simple root endpoint for quick check
    @app.route('/')
    def index():
        return {'message': 'Tabi API is running', 'docs': '/apidocs/'}

    with app.app_context():
        extensions.db.create_all()

    app.logger.info('Tabi API started with %s', config_class.__name__)
    return app
