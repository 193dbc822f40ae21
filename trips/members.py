"""Trip membership and ownership queries.

Memberships are addressed by the (user_id, trip_id) pair everywhere; the
surrogate ``id`` column is never exposed as a key.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError

from app.errors import bad_request, not_found
from app.extensions import db
from auth.models import User
from .models import Trip, TripMember, TRIP_ROLES


def add_member(user_id, trip_id, role='member'):
    """Add ``user_id`` to ``trip_id`` with ``role``."""
    if role not in TRIP_ROLES:
        raise bad_request("Invalid role. Must be 'owner' or 'member'.")

    if is_member(user_id, trip_id):
        raise bad_request('User is already a member of this trip.')

    member = TripMember(user_id=user_id, trip_id=trip_id, role=role)
    db.session.add(member)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise bad_request('User is already a member of this trip.')

    current_app.logger.info('User %s joined trip %s as %s', user_id, trip_id, role)
    return member


def remove_member(user_id, trip_id):
    """Delete the membership of ``user_id`` in ``trip_id``."""
    member = TripMember.query.filter_by(user_id=user_id, trip_id=trip_id).first()
    if not member:
        raise not_found(f'User {user_id} is not a member of trip {trip_id}')

    db.session.delete(member)
    db.session.flush()

    current_app.logger.info('User %s removed from trip %s', user_id, trip_id)
    return {'removed': user_id}


def is_member(user_id, trip_id, check_exists=False):
    """Return the TripMember row, or None when the user is not a member.

    With ``check_exists`` a missing user or trip raises NotFound instead of
    reading as "not a member".
    """
    if check_exists:
        if not db.session.get(User, user_id):
            raise not_found(f'User with ID {user_id} not found.')
        if not db.session.get(Trip, trip_id):
            raise not_found(f'Trip with ID {trip_id} not found.')

    return TripMember.query.filter_by(user_id=user_id, trip_id=trip_id).first()


def is_owner(user_id, trip_id):
    """True if ``user_id`` created ``trip_id``. Unknown ids simply give False."""
    return db.session.query(
        Trip.query.filter_by(id=trip_id, creator_id=user_id).exists()
    ).scalar()


def get_trip_members(trip_id):
    """Members of a trip with their profile and role, oldest first."""
    rows = (
        db.session.query(TripMember, User)
        .join(User, TripMember.user_id == User.id)
        .filter(TripMember.trip_id == trip_id)
        .order_by(TripMember.joined_at, TripMember.id)
        .all()
    )
    members = []
    for member, user in rows:
        data = user.to_public_dict()
        data.update({'user_id': user.id, 'role': member.role, 'joined_at': member.to_dict()['joined_at']})
        members.append(data)
    return members
