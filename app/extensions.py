from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flasgger import Swagger
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if type(dbapi_connection).__module__.startswith('sqlite3'):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


# Configure Swagger
swagger = Swagger(
    template={
        "swagger": "2.0",
        "info": {
            "title": "Tabi API",
            "description": "API for Tabi, a group travel planner",
            "version": "1.0.0"
        },
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header using the Bearer scheme. Example: \"Authorization: Bearer {token}\""
            }
        },
        "security": [{"Bearer": []}],
        "tags": [
            {"name": "Authentication", "description": "Registration and token issuance"},
            {"name": "Users", "description": "User profiles and search"},
            {"name": "Friends", "description": "Friend requests and friendships"},
            {"name": "Trips", "description": "Trips"},
            {"name": "Trip Members", "description": "Trip membership"},
            {"name": "Activities", "description": "Trip activities and votes"},
            {"name": "Comments", "description": "Trip comments"}
        ],
        "definitions": {
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "username": {"type": "string"},
                    "first_name": {"type": "string"},
                    "last_name": {"type": "string"},
                    "email": {"type": "string"},
                    "picture": {"type": "string"},
                    "bio": {"type": "string"},
                    "is_admin": {"type": "boolean"},
                    "created_at": {"type": "string", "format": "date-time"}
                }
            }
        },
        "schemes": ["http", "https"],
        "consumes": ["application/json"],
        "produces": ["application/json"]
    },
    config={
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/apidocs/"
    }
)

def init_app(app):
    """Initialize all extensions with the app."""
    db.init_app(app)
    jwt.init_app(app)
    swagger.init_app(app)
