from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from app.errors import bad_request, unauthorized
from app.extensions import db
from .models import User


def register(username, password, first_name, last_name, email,
             bio=None, picture=None, is_admin=False):
    """Create a user. Raises BadRequest when the username or email is taken."""
    duplicate = User.query.filter(
        or_(User.username == username, User.email == email)
    ).first()
    if duplicate:
        raise bad_request('Username or email already exists.')

    user = User(
        username=username,
        password=password,
        first_name=first_name,
        last_name=last_name,
        email=email,
        bio=bio,
        picture=picture,
        is_admin=is_admin,
    )
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise bad_request('Username or email already exists.')

    current_app.logger.info('Registered user %s', username)
    return user


def authenticate(username, password):
    """Return the user for valid credentials, raise Unauthorized otherwise."""
    user = User.query.filter_by(username=username).first()
    if user and user.check_password(password):
        return user
    raise unauthorized('Invalid username/password')
