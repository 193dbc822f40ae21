from datetime import timezone

from flask import current_app

from app.errors import not_found
from app.extensions import db
from .models import Activity
from . import votes


def to_utc(value):
    """Store scheduled times as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def create_activity(trip_id, created_by, name, category='other', description=None,
                    location=None, scheduled_time=None):
    activity = Activity(
        trip_id=trip_id,
        created_by=created_by,
        name=name,
        category=category or 'other',
        description=description,
        location=location,
        scheduled_time=to_utc(scheduled_time),
    )
    db.session.add(activity)
    db.session.flush()

    current_app.logger.info('Activity %s created in trip %s by %s', activity.id, trip_id, created_by)
    return activity


def get_activity(activity_id):
    """Return the Activity or raise NotFound."""
    activity = db.session.get(Activity, activity_id)
    if not activity:
        raise not_found(f'No activity found with id: {activity_id}')
    return activity


def activity_detail(activity):
    """Activity fields plus its votes and their tally."""
    data = activity.to_dict()
    data['votes'] = votes.votes_for_activity(activity.id)
    data.update(votes.tally(activity.id))
    return data


def list_activities(trip_id):
    """Activities of a trip in schedule order, each with its votes.

    ``votes`` is always a list, empty for an activity nobody voted on.
    """
    activities = (
        Activity.query
        .filter_by(trip_id=trip_id)
        .order_by(Activity.scheduled_time, Activity.id)
        .all()
    )
    grouped = votes.votes_by_activity([a.id for a in activities])

    result = []
    for activity in activities:
        data = activity.to_dict()
        activity_votes = grouped[activity.id]
        data['votes'] = activity_votes
        data['upvotes'] = sum(1 for v in activity_votes if v['vote_value'] == 1)
        data['downvotes'] = sum(1 for v in activity_votes if v['vote_value'] == -1)
        result.append(data)
    return result


def update_activity(activity_id, changes):
    """Apply a validated patch to an activity."""
    activity = get_activity(activity_id)
    if 'scheduled_time' in changes:
        changes = dict(changes, scheduled_time=to_utc(changes['scheduled_time']))
    for field, value in changes.items():
        setattr(activity, field, value)
    db.session.flush()
    return activity


def remove_activity(activity_id):
    activity = get_activity(activity_id)
    db.session.delete(activity)
    db.session.flush()

    current_app.logger.info('Activity %s deleted', activity_id)
    return {'deleted': activity_id}
