from flask import current_app
from sqlalchemy.exc import IntegrityError

from app.errors import bad_request, not_found
from app.extensions import db
from auth.models import User
from friends.service import relationships_for_user
from trips.models import Trip, TripMember


def get_user_row(username):
    """Return the User or raise NotFound."""
    user = User.query.filter_by(username=username).first()
    if not user:
        raise not_found(f'No user: {username}')
    return user


def _trips_for_user(user_id):
    rows = (
        db.session.query(Trip, TripMember.role)
        .join(TripMember, TripMember.trip_id == Trip.id)
        .filter(TripMember.user_id == user_id)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )
    trips = []
    for trip, role in rows:
        data = trip.to_dict()
        data['role'] = role
        trips.append(data)
    return trips


def get_user(username):
    """Profile of ``username`` with their trips and friend relationships.

    ``trips`` lists every trip the user belongs to, newest first, each with
    the user's ``role``. ``friend_requests`` are the pending requests sent to
    the user and ``sent_requests`` those sent by them.
    """
    user = get_user_row(username)
    relationships = relationships_for_user(user.id)

    data = user.to_dict()
    data['trips'] = _trips_for_user(user.id)
    data['friends'] = relationships['friends']
    data['friend_requests'] = relationships['incoming']
    data['sent_requests'] = relationships['outgoing']
    return data


def search_users(query):
    """Users whose username contains ``query``, case-insensitively. ``%`` and ``_`` match literally."""
    return (
        User.query
        .filter(User.username.icontains(query, autoescape=True))
        .order_by(User.username)
        .all()
    )


def update_user(username, changes):
    """Apply a validated patch to a user. A ``password`` change is re-hashed."""
    user = get_user_row(username)
    changes = dict(changes)

    email = changes.get('email')
    if email and email != user.email:
        if User.query.filter(User.email == email, User.id != user.id).first():
            raise bad_request('Email already in use.')

    password = changes.pop('password', None)
    if password is not None:
        user.set_password(password)

    for field, value in changes.items():
        setattr(user, field, value)

    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise bad_request('Email already in use.')

    current_app.logger.info('Updated user %s', username)
    return user


def remove_user(username):
    """Delete a user together with everything they own."""
    user = get_user_row(username)
    db.session.delete(user)
    db.session.flush()

    current_app.logger.info('Deleted user %s', username)
    return {'deleted': username}
