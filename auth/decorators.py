"""Route guards built on top of Flask-JWT-Extended.

The token's ``sub`` is resolved to a live ``User`` by the user lookup loader
registered in :mod:`app.errors`; a token whose user was deleted is rejected
with 401 before any view runs. Guards read identity from that row, never from
the token's extra claims.
"""

from collections import namedtuple
from functools import wraps

from flask_jwt_extended import current_user, verify_jwt_in_request

from app.errors import unauthorized

Identity = namedtuple('Identity', ['id', 'username', 'is_admin'])


def current_identity():
    """Return the Identity of the caller. Must run after a JWT was verified."""
    return Identity(
        id=current_user.id,
        username=current_user.username,
        is_admin=bool(current_user.is_admin),
    )


def admin_required(f):
    """Only admins may call the wrapped view."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()
        if not current_identity().is_admin:
            raise unauthorized('You must be an admin.')
        return f(*args, **kwargs)
    return decorated_function


def correct_user_or_admin_required(f):
    """The ``username`` in the URL must belong to the caller, unless they are an admin.

    The caller is the row behind the token's user id, so a token issued to a
    deleted account never matches a newer account with the same username.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()
        identity = current_identity()
        if not identity.is_admin and identity.username != kwargs.get('username'):
            raise unauthorized('You do not have permission to access this page.')
        return f(*args, **kwargs)
    return decorated_function
