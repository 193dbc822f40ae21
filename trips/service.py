from flask import current_app

from app.errors import bad_request, not_found
from app.extensions import db
from .models import Trip
from . import activities, comments, members


def create_trip(creator_id, title, destination, radius=None, start_date=None,
                end_date=None, is_private=True):
    """Create a trip and its creator's ``owner`` membership.

    Both rows are flushed in the caller's transaction, so they are committed
    or rolled back together.
    """
    trip = Trip(
        title=title,
        destination=destination,
        radius=radius,
        start_date=start_date,
        end_date=end_date,
        is_private=is_private,
        creator_id=creator_id,
    )
    db.session.add(trip)
    db.session.flush()

    members.add_member(creator_id, trip.id, role='owner')

    current_app.logger.info('Trip %s created by %s', trip.id, creator_id)
    return trip


def find_all(title=None, destination=None):
    """Public trips, newest first, optionally filtered by title/destination substrings."""
    query = Trip.query.filter(Trip.is_private.is_(False))
    if title:
        query = query.filter(Trip.title.icontains(title, autoescape=True))
    if destination:
        query = query.filter(Trip.destination.icontains(destination, autoescape=True))
    return query.order_by(Trip.created_at.desc(), Trip.id.desc()).all()


def get_trip_row(trip_id):
    """Return the Trip or raise NotFound."""
    trip = db.session.get(Trip, trip_id)
    if not trip:
        raise not_found(f'No trip found with ID: {trip_id}')
    return trip


def get_trip(trip_id):
    """Trip with its members, activities (with votes) and comments."""
    trip = get_trip_row(trip_id)
    data = trip.to_dict()
    data['members'] = members.get_trip_members(trip.id)
    data['activities'] = activities.list_activities(trip.id)
    data['comments'] = comments.list_comments(trip.id)
    return data


def update_trip(trip_id, changes):
    """Apply a validated patch.

    The resulting dates follow the creation rules: a start date needs an end
    date, and the end date must come after it.
    """
    trip = get_trip_row(trip_id)

    start_date = changes.get('start_date', trip.start_date)
    end_date = changes.get('end_date', trip.end_date)
    if start_date and not end_date:
        raise bad_request('end_date is required when start_date is given')
    if start_date and end_date and end_date <= start_date:
        raise bad_request('end_date must be after start_date')

    for field, value in changes.items():
        setattr(trip, field, value)
    db.session.flush()
    return trip


def remove_trip(trip_id):
    trip = get_trip_row(trip_id)
    db.session.delete(trip)
    db.session.flush()

    current_app.logger.info('Trip %s deleted', trip_id)
    return {'deleted': trip_id}
