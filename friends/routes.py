from flask import jsonify
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import forbidden
from app.extensions import db
from auth.decorators import current_identity
from . import service
from . import friends_bp


def _participant_relationship(friendship_id):
    """Load a relationship the caller is part of, as sender or recipient."""
    friendship = service.get_relationship(friendship_id)
    user_id = current_identity().id
    if user_id not in (friendship.sender_id, friendship.recipient_id):
        raise forbidden('You do not have permission to modify this friend request.')
    return friendship


@friends_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Friends'],
    'description': "List the current user's friends, incoming and outgoing requests",
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Relationships split into friends, incoming and outgoing'},
        '401': {'description': 'Unauthorized'}
    }
})
def list_relationships():
    """List the caller's relationships."""
    return jsonify(service.relationships_for_user(current_identity().id))


@friends_bp.route('/<int:recipient_id>', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Friends'],
    'description': 'Send a friend request',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'recipient_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '201': {'description': 'Friend request sent'},
        '400': {'description': 'Request to self, or a relationship already exists'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Recipient not found'}
    }
})
def send_friend_request(recipient_id):
    """Send a friend request from the caller to ``recipient_id``."""
    friendship = service.send_request(current_identity().id, recipient_id)
    db.session.commit()
    return jsonify({'friend_request': friendship.to_dict()}), 201


@friends_bp.route('/<int:friendship_id>', methods=['PATCH'])
@jwt_required()
@swag_from({
    'tags': ['Friends'],
    'description': 'Accept a pending friend request (recipient only)',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'friendship_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '200': {'description': 'Friend request accepted'},
        '400': {'description': 'Not pending, or caller is not the recipient'},
        '403': {'description': 'Caller is not part of this relationship'},
        '404': {'description': 'Friend request not found'}
    }
})
def accept_friend_request(friendship_id):
    """Accept a friend request."""
    _participant_relationship(friendship_id)
    friendship = service.accept_request(friendship_id, current_identity().id)
    db.session.commit()
    return jsonify({'accepted_friend': friendship.to_dict()})


@friends_bp.route('/<int:friendship_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Friends'],
    'description': 'Decline a friend request or unfriend',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'friendship_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '200': {'description': 'Relationship removed'},
        '403': {'description': 'Caller is not part of this relationship'},
        '404': {'description': 'Friend request not found'}
    }
})
def remove_friendship(friendship_id):
    """Decline or unfriend."""
    _participant_relationship(friendship_id)
    result = service.remove(friendship_id)
    db.session.commit()
    return jsonify(result)
