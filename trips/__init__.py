from flask import Blueprint

# Create blueprint
trips_bp = Blueprint('trips', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
