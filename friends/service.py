"""Friend request lifecycle.

Per unordered pair of users the relationship is absent, pending (with a
fixed sender and recipient) or accepted. Only the recipient may accept;
either side may delete the row, which covers both declining and unfriending.
"""

from flask import current_app
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from app.errors import bad_request, not_found
from app.extensions import db
from auth.models import User
from .models import Friend


def _pair_filter(user_a, user_b):
    return or_(
        and_(Friend.sender_id == user_a, Friend.recipient_id == user_b),
        and_(Friend.sender_id == user_b, Friend.recipient_id == user_a),
    )


def get_relationship(friendship_id):
    """Return the Friend row or raise NotFound."""
    friendship = db.session.get(Friend, friendship_id)
    if not friendship:
        raise not_found(f'No friend request found with id: {friendship_id}')
    return friendship


def send_request(sender_id, recipient_id):
    """Create a pending request from ``sender_id`` to ``recipient_id``."""
    if sender_id == recipient_id:
        raise bad_request('Friend request cannot be sent to yourself.')

    if not db.session.get(User, recipient_id):
        raise not_found(f'No user found with id: {recipient_id}')

    if Friend.query.filter(_pair_filter(sender_id, recipient_id)).first():
        raise bad_request('Friend request already sent or you are already friends.')

    friendship = Friend(sender_id=sender_id, recipient_id=recipient_id, status='pending')
    db.session.add(friendship)
    try:
        db.session.flush()
    except IntegrityError:
        # a concurrent request for the same pair won the race
        db.session.rollback()
        raise bad_request('Friend request already sent or you are already friends.')

    current_app.logger.info('Friend request %s sent: %s -> %s', friendship.id, sender_id, recipient_id)
    return friendship


def accept_request(friendship_id, acting_user_id):
    """Accept a pending request. Only its recipient may do so."""
    friendship = get_relationship(friendship_id)

    if friendship.status != 'pending':
        raise bad_request('Friend request is not pending.')

    if friendship.recipient_id != acting_user_id:
        raise bad_request('Only the recipient can accept the friend request.')

    friendship.status = 'accepted'
    db.session.flush()

    current_app.logger.info('Friend request %s accepted by %s', friendship.id, acting_user_id)
    return friendship


def remove(friendship_id):
    """Delete a relationship in any state (decline or unfriend)."""
    friendship = get_relationship(friendship_id)
    db.session.delete(friendship)
    db.session.flush()

    current_app.logger.info('Friend relationship %s removed', friendship_id)
    return {'removed': friendship_id}


def are_friends(user_a, user_b):
    """True if an accepted relationship exists between the two users, in either direction."""
    return db.session.query(
        Friend.query.filter(_pair_filter(user_a, user_b), Friend.status == 'accepted').exists()
    ).scalar()


def relationships_for_user(user_id):
    """Split a user's relationships into friends, incoming and outgoing requests.

    Returns ``{'friends': [...], 'incoming': [...], 'outgoing': [...]}``. A
    relationship lands in exactly one list, decided by its status and by
    which side of it ``user_id`` is on.
    """
    rows = (
        Friend.query
        .filter(or_(Friend.sender_id == user_id, Friend.recipient_id == user_id))
        .order_by(Friend.created_at, Friend.id)
        .all()
    )

    result = {'friends': [], 'incoming': [], 'outgoing': []}
    for row in rows:
        if row.status == 'accepted':
            key = 'friends'
        elif row.recipient_id == user_id:
            key = 'incoming'
        else:
            key = 'outgoing'
        result[key].append(row.to_dict_for(user_id))
    return result
