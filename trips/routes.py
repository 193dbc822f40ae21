from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import bad_request, forbidden
from app.extensions import db
from app.schemas import validate_body
from auth.decorators import current_identity
from friends.service import are_friends
from .access import trip_member_required, trip_owner_required, trip_required, trip_viewer_required
from .schemas import ActivityCreate, ActivityPatch, CommentCreate, MemberAdd, TripCreate, TripPatch, VoteIn
from . import activities, comments, members, service, votes
from . import trips_bp

TRIP_ID_PARAM = {'name': 'trip_id', 'in': 'path', 'type': 'integer', 'required': True}
ACTIVITY_ID_PARAM = {'name': 'activity_id', 'in': 'path', 'type': 'integer', 'required': True}


def _activity_in_trip(activity_id):
    """Load an activity and make sure it belongs to the trip in ``g.trip``."""
    activity = activities.get_activity(activity_id)
    if activity.trip_id != g.trip.id:
        raise forbidden('Activity does not belong to this trip.')
    return activity


# ---------------------------------------------------------------------------
# Trips
# ---------------------------------------------------------------------------

@trips_bp.route('', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Trips'],
    'description': 'Create a trip; the creator becomes its owner',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'title': {'type': 'string', 'example': 'Summer in Kyoto'},
                'destination': {'type': 'string', 'example': 'Kyoto'},
                'radius': {'type': 'integer', 'example': 10},
                'start_date': {'type': 'string', 'format': 'date'},
                'end_date': {'type': 'string', 'format': 'date'},
                'is_private': {'type': 'boolean', 'default': True}
            },
            'required': ['title', 'destination', 'radius']
        }
    }],
    'responses': {
        '201': {'description': 'Trip created'},
        '400': {'description': 'Invalid input'},
        '401': {'description': 'Unauthorized'}
    }
})
def create_trip():
    """Create a new trip."""
    data = validate_body(TripCreate)
    trip = service.create_trip(creator_id=current_identity().id, **data.model_dump())
    db.session.commit()
    return jsonify({'trip': trip.to_dict()}), 201


@trips_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Trips'],
    'description': 'Search public trips',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'title', 'in': 'query', 'type': 'string', 'required': False},
        {'name': 'destination', 'in': 'query', 'type': 'string', 'required': False}
    ],
    'responses': {
        '200': {'description': 'List of public trips'},
        '401': {'description': 'Unauthorized'}
    }
})
def list_trips():
    """List public trips, filtered by title and destination."""
    trips = service.find_all(
        title=request.args.get('title'),
        destination=request.args.get('destination'),
    )
    return jsonify({'trips': [trip.to_dict() for trip in trips]})


@trips_bp.route('/<int:trip_id>', methods=['GET'])
@jwt_required()
@trip_viewer_required
@swag_from({
    'tags': ['Trips'],
    'description': 'Get a trip with its members, activities and comments',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM],
    'responses': {
        '200': {'description': 'Trip details'},
        '403': {'description': 'Private trip and caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def get_trip(trip_id):
    """Get a specific trip."""
    return jsonify({'trip': service.get_trip(trip_id)})


@trips_bp.route('/<int:trip_id>', methods=['PATCH'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Trips'],
    'description': 'Partially update a trip (members only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM],
    'responses': {
        '200': {'description': 'Trip updated'},
        '400': {'description': 'Invalid input or empty update'},
        '403': {'description': 'Caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def update_trip(trip_id):
    """Update a trip."""
    patch = validate_body(TripPatch)
    trip = service.update_trip(trip_id, patch.changes())
    db.session.commit()
    return jsonify({'trip': trip.to_dict()})


@trips_bp.route('/<int:trip_id>', methods=['DELETE'])
@jwt_required()
@trip_owner_required
@swag_from({
    'tags': ['Trips'],
    'description': 'Delete a trip (owner only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM],
    'responses': {
        '200': {'description': 'Trip deleted'},
        '403': {'description': 'Caller is not the owner'},
        '404': {'description': 'Trip not found'}
    }
})
def delete_trip(trip_id):
    """Delete a trip and everything in it."""
    result = service.remove_trip(trip_id)
    db.session.commit()
    return jsonify(result)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@trips_bp.route('/<int:trip_id>/members', methods=['GET'])
@jwt_required()
@trip_viewer_required
@swag_from({
    'tags': ['Trip Members'],
    'description': 'List members of a trip',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM],
    'responses': {
        '200': {'description': 'Trip members'},
        '403': {'description': 'Private trip and caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def list_members(trip_id):
    return jsonify({'members': members.get_trip_members(trip_id)})


@trips_bp.route('/<int:trip_id>/members', methods=['POST'])
@jwt_required()
@trip_owner_required
@swag_from({
    'tags': ['Trip Members'],
    'description': "Add one of the owner's friends to the trip (owner only)",
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, {
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {'friend_id': {'type': 'integer', 'example': 2}},
            'required': ['friend_id']
        }
    }],
    'responses': {
        '201': {'description': 'Member added'},
        '400': {'description': 'Invalid friend_id or already a member'},
        '403': {'description': 'Caller is not the owner, or not friends with friend_id'},
        '404': {'description': 'Trip not found'}
    }
})
def add_member(trip_id):
    """Add a friend of the owner to the trip."""
    data = validate_body(MemberAdd)
    owner_id = current_identity().id

    if not are_friends(owner_id, data.friend_id):
        raise forbidden(f'You are not friends with user {data.friend_id}.')

    member = members.add_member(data.friend_id, trip_id)
    db.session.commit()
    return jsonify({'member': member.to_dict()}), 201


@trips_bp.route('/<int:trip_id>/members/<int:user_id>', methods=['DELETE'])
@jwt_required()
@trip_owner_required
@swag_from({
    'tags': ['Trip Members'],
    'description': 'Remove a member from the trip (owner only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, {'name': 'user_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Member removed'},
        '400': {'description': 'The owner cannot be removed'},
        '403': {'description': 'Caller is not the owner'},
        '404': {'description': 'Trip not found or user is not a member'}
    }
})
def remove_member(trip_id, user_id):
    """Remove a member; the owner's own membership stays."""
    if user_id == g.trip.creator_id:
        raise bad_request('The trip owner cannot be removed from the trip.')

    result = members.remove_member(user_id, trip_id)
    db.session.commit()
    return jsonify(result)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@trips_bp.route('/<int:trip_id>/comments', methods=['POST'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Comments'],
    'description': 'Post a comment on a trip (members only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, {
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {'text': {'type': 'string', 'example': 'Can we leave earlier?'}},
            'required': ['text']
        }
    }],
    'responses': {
        '201': {'description': 'Comment created'},
        '400': {'description': 'Empty text'},
        '403': {'description': 'Caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def create_comment(trip_id):
    data = validate_body(CommentCreate)
    comment = comments.create_comment(current_identity().id, trip_id, data.text)
    db.session.commit()
    return jsonify({'comment': comment.to_dict()}), 201


@trips_bp.route('/<int:trip_id>/comments/<int:comment_id>', methods=['DELETE'])
@jwt_required()
@trip_required
@swag_from({
    'tags': ['Comments'],
    'description': "Delete a comment (its author only)",
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, {'name': 'comment_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Comment deleted'},
        '403': {'description': 'Not the author, or comment belongs to another trip'},
        '404': {'description': 'Trip or comment not found'}
    }
})
def delete_comment(trip_id, comment_id):
    comment = comments.get_comment(comment_id)

    if comment.trip_id != trip_id:
        raise forbidden('Comment does not belong to this trip.')

    if comment.user_id != current_identity().id:
        raise forbidden('You are not authorized to delete this comment.')

    result = comments.remove_comment(comment_id)
    db.session.commit()
    return jsonify(result)


# ---------------------------------------------------------------------------
# Activities and votes
# ---------------------------------------------------------------------------

@trips_bp.route('/<int:trip_id>/activities', methods=['GET'])
@jwt_required()
@trip_viewer_required
@swag_from({
    'tags': ['Activities'],
    'description': 'List activities of a trip with their votes',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM],
    'responses': {
        '200': {'description': 'Activities'},
        '403': {'description': 'Private trip and caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def list_activities(trip_id):
    return jsonify({'activities': activities.list_activities(trip_id)})


@trips_bp.route('/<int:trip_id>/activities', methods=['POST'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Create an activity (members only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, {
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'name': {'type': 'string', 'example': 'Fushimi Inari hike'},
                'category': {
                    'type': 'string',
                    'enum': ['food', 'hiking', 'tours', 'shopping', 'adventure', 'outdoors', 'other']
                },
                'description': {'type': 'string'},
                'location': {'type': 'string'},
                'scheduled_time': {'type': 'string', 'format': 'date-time'}
            },
            'required': ['name']
        }
    }],
    'responses': {
        '201': {'description': 'Activity created'},
        '400': {'description': 'Invalid input'},
        '403': {'description': 'Caller is not a member'},
        '404': {'description': 'Trip not found'}
    }
})
def create_activity(trip_id):
    data = validate_body(ActivityCreate)
    activity = activities.create_activity(trip_id, current_identity().id, **data.model_dump())
    db.session.commit()
    return jsonify({'activity': activity.to_dict()}), 201


@trips_bp.route('/<int:trip_id>/activities/<int:activity_id>', methods=['PATCH'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Partially update an activity (members only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, ACTIVITY_ID_PARAM],
    'responses': {
        '200': {'description': 'Activity updated'},
        '400': {'description': 'Invalid input or empty update'},
        '403': {'description': 'Caller is not a member, or activity belongs to another trip'},
        '404': {'description': 'Trip or activity not found'}
    }
})
def update_activity(trip_id, activity_id):
    _activity_in_trip(activity_id)
    patch = validate_body(ActivityPatch)
    activity = activities.update_activity(activity_id, patch.changes())
    db.session.commit()
    return jsonify({'activity': activity.to_dict()})


@trips_bp.route('/<int:trip_id>/activities/<int:activity_id>', methods=['DELETE'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Delete an activity (members only)',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, ACTIVITY_ID_PARAM],
    'responses': {
        '200': {'description': 'Activity deleted'},
        '403': {'description': 'Caller is not a member, or activity belongs to another trip'},
        '404': {'description': 'Trip or activity not found'}
    }
})
def delete_activity(trip_id, activity_id):
    _activity_in_trip(activity_id)
    result = activities.remove_activity(activity_id)
    db.session.commit()
    return jsonify(result)


@trips_bp.route('/<int:trip_id>/activities/<int:activity_id>/vote', methods=['POST'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Cast, change or (with 0) remove your vote on an activity',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, ACTIVITY_ID_PARAM, {
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {'vote_value': {'type': 'integer', 'enum': [-1, 0, 1]}},
            'required': ['vote_value']
        }
    }],
    'responses': {
        '200': {'description': 'Vote recorded or removed'},
        '400': {'description': 'Invalid vote value, or nothing to remove'},
        '403': {'description': 'Caller is not a member, or activity belongs to another trip'},
        '404': {'description': 'Trip or activity not found'}
    }
})
def cast_vote(trip_id, activity_id):
    _activity_in_trip(activity_id)
    data = validate_body(VoteIn)
    vote = votes.cast_vote(current_identity().id, activity_id, data.vote_value)
    db.session.commit()
    return jsonify({'vote': vote})


@trips_bp.route('/<int:trip_id>/activities/<int:activity_id>/vote', methods=['DELETE'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Remove your vote on an activity',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, ACTIVITY_ID_PARAM],
    'responses': {
        '200': {'description': 'Vote removed'},
        '403': {'description': 'Caller is not a member, or activity belongs to another trip'},
        '404': {'description': 'Trip, activity or vote not found'}
    }
})
def remove_vote(trip_id, activity_id):
    _activity_in_trip(activity_id)
    votes.remove_vote(current_identity().id, activity_id)
    db.session.commit()
    return jsonify({'removed': activity_id})


@trips_bp.route('/<int:trip_id>/activities/<int:activity_id>/votes', methods=['GET'])
@jwt_required()
@trip_member_required
@swag_from({
    'tags': ['Activities'],
    'description': 'Votes on an activity and their tally',
    'security': [{'Bearer': []}],
    'parameters': [TRIP_ID_PARAM, ACTIVITY_ID_PARAM],
    'responses': {
        '200': {'description': 'Activity with votes, upvotes and downvotes'},
        '403': {'description': 'Caller is not a member, or activity belongs to another trip'},
        '404': {'description': 'Trip or activity not found'}
    }
})
def get_activity_votes(trip_id, activity_id):
    activity = _activity_in_trip(activity_id)
    return jsonify({'activity': activities.activity_detail(activity)})
