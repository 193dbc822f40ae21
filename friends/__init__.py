from flask import Blueprint

# Create blueprint
friends_bp = Blueprint('friends', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
