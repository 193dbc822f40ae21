"""Voting ledger: at most one vote per (user, activity).

A vote value of 0 is an instruction to remove the caller's vote; it is never
stored.
"""

from datetime import datetime

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError

from app.errors import bad_request, not_found
from app.extensions import db
from .models import Vote


def cast_vote(user_id, activity_id, vote_value):
    """Insert, change or (with 0) remove the user's vote on an activity."""
    if vote_value not in (1, 0, -1):
        raise bad_request(
            'Invalid vote value. Must be either 1 (upvote), -1 (downvote), or 0 (vote removal).'
        )

    vote = db.session.get(Vote, (user_id, activity_id))

    if vote:
        if vote_value == 0:
            db.session.delete(vote)
            db.session.flush()
            current_app.logger.info('User %s removed vote on activity %s', user_id, activity_id)
            return {'user_id': user_id, 'activity_id': activity_id, 'vote_value': 0, 'removed': True}

        vote.vote_value = vote_value
        vote.created_at = datetime.utcnow()
        db.session.flush()
    else:
        if vote_value == 0:
            raise bad_request('No existing vote to remove.')

        vote = Vote(user_id=user_id, activity_id=activity_id, vote_value=vote_value)
        db.session.add(vote)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            raise bad_request('Vote already recorded for this activity.')

    current_app.logger.info('User %s voted %+d on activity %s', user_id, vote_value, activity_id)
    return vote.to_dict()


def remove_vote(user_id, activity_id):
    vote = db.session.get(Vote, (user_id, activity_id))
    if not vote:
        raise not_found(f'No vote found for user {user_id} on activity {activity_id}')
    db.session.delete(vote)
    db.session.flush()


def votes_for_activity(activity_id):
    return [
        {'user_id': v.user_id, 'vote_value': v.vote_value}
        for v in Vote.query.filter_by(activity_id=activity_id).order_by(Vote.created_at).all()
    ]


def votes_by_activity(activity_ids):
    """Group votes of several activities: ``{activity_id: [{user_id, vote_value}, ...]}``.

    Every requested id is present; activities without votes map to ``[]``.
    """
    grouped = {activity_id: [] for activity_id in activity_ids}
    if not grouped:
        return grouped

    rows = (
        Vote.query
        .filter(Vote.activity_id.in_(list(grouped)))
        .order_by(Vote.created_at)
        .all()
    )
    for vote in rows:
        grouped[vote.activity_id].append({'user_id': vote.user_id, 'vote_value': vote.vote_value})
    return grouped


def tally(activity_id):
    """Count up and down votes; an activity without votes gives zeros."""
    upvotes, downvotes = db.session.query(
        func.coalesce(func.sum(case((Vote.vote_value == 1, 1), else_=0)), 0),
        func.coalesce(func.sum(case((Vote.vote_value == -1, 1), else_=0)), 0),
    ).filter(Vote.activity_id == activity_id).one()
    return {'upvotes': int(upvotes), 'downvotes': int(downvotes)}
