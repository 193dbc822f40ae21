"""Authorization guards for routes under ``/trips/<trip_id>``.

Each guard verifies the JWT, loads the trip (404 when it does not exist)
and stores it on ``flask.g.trip`` before checking the caller's relation to
it.
"""

from functools import wraps

from flask import g
from flask_jwt_extended import verify_jwt_in_request

from app.errors import forbidden
from auth.decorators import current_identity
from . import members
from .service import get_trip_row


def _load_trip(kwargs):
    verify_jwt_in_request()
    g.trip = get_trip_row(kwargs['trip_id'])
    return g.trip


def trip_required(f):
    """Only checks that the trip exists."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _load_trip(kwargs)
        return f(*args, **kwargs)
    return decorated_function


def trip_viewer_required(f):
    """Public trips are visible to any logged-in user, private ones to members only."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        trip = _load_trip(kwargs)
        if trip.is_private and not members.is_member(current_identity().id, trip.id):
            raise forbidden('Unauthorized to view this trip.')
        return f(*args, **kwargs)
    return decorated_function


def trip_member_required(f):
    """Caller must hold a membership (owner or member) in the trip."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        trip = _load_trip(kwargs)
        if not members.is_member(current_identity().id, trip.id):
            raise forbidden('You must be a member of this trip to perform this action')
        return f(*args, **kwargs)
    return decorated_function


def trip_owner_required(f):
    """Caller must be the trip's creator."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        trip = _load_trip(kwargs)
        if not members.is_owner(current_identity().id, trip.id):
            raise forbidden('Only the trip owner can perform this action.')
        return f(*args, **kwargs)
    return decorated_function
