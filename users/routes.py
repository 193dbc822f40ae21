from flask import request, jsonify
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import bad_request
from app.extensions import db
from app.schemas import validate_body
from auth import service as auth_service
from auth.decorators import admin_required, correct_user_or_admin_required
from .schemas import UserCreate, UserPatch
from . import service
from . import users_bp

USERNAME_PARAM = {'name': 'username', 'in': 'path', 'type': 'string', 'required': True}


@users_bp.route('', methods=['POST'])
@admin_required
@swag_from({
    'tags': ['Users'],
    'description': 'Create a user (admins only); the new user may be an admin',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'janedoe'},
                'password': {'type': 'string', 'example': 'secret123'},
                'first_name': {'type': 'string', 'example': 'Jane'},
                'last_name': {'type': 'string', 'example': 'Doe'},
                'email': {'type': 'string', 'example': 'jane@example.com'},
                'bio': {'type': 'string'},
                'picture': {'type': 'string'},
                'is_admin': {'type': 'boolean', 'default': False}
            },
            'required': ['username', 'password', 'first_name', 'last_name', 'email']
        }
    }],
    'responses': {
        '201': {
            'description': 'User created',
            'schema': {
                'type': 'object',
                'properties': {
                    'user': {'$ref': '#/definitions/User'},
                    'token': {'type': 'string'}
                }
            }
        },
        '400': {'description': 'Invalid input or username/email already taken'},
        '401': {'description': 'Caller is not an admin'}
    }
})
def create_user():
    """Create a user and return it with a token for it."""
    data = validate_body(UserCreate)
    user = auth_service.register(**data.model_dump())
    db.session.commit()

    return jsonify({'user': user.to_dict(), 'token': user.generate_auth_token()}), 201


@users_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Users'],
    'description': 'Search users by username',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'query', 'in': 'query', 'type': 'string', 'required': True}],
    'responses': {
        '200': {'description': 'Matching users'},
        '400': {'description': 'Missing search query'},
        '401': {'description': 'Unauthorized'}
    }
})
def search_users():
    query = request.args.get('query', '').strip()
    if not query:
        raise bad_request('Search query is required.')

    users = service.search_users(query)
    return jsonify({'users': [user.to_public_dict() for user in users]})


@users_bp.route('/<username>', methods=['GET'])
@correct_user_or_admin_required
@swag_from({
    'tags': ['Users'],
    'description': 'Get a user with their trips and friend relationships',
    'security': [{'Bearer': []}],
    'parameters': [USERNAME_PARAM],
    'responses': {
        '200': {'description': 'User profile'},
        '401': {'description': 'Not this user and not an admin'},
        '404': {'description': 'User not found'}
    }
})
def get_user(username):
    return jsonify({'user': service.get_user(username)})


@users_bp.route('/<username>', methods=['PATCH'])
@correct_user_or_admin_required
@swag_from({
    'tags': ['Users'],
    'description': 'Partially update a user profile',
    'security': [{'Bearer': []}],
    'parameters': [USERNAME_PARAM, {
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'password': {'type': 'string'},
                'first_name': {'type': 'string'},
                'last_name': {'type': 'string'},
                'email': {'type': 'string'},
                'bio': {'type': 'string'},
                'picture': {'type': 'string'}
            }
        }
    }],
    'responses': {
        '200': {'description': 'Profile updated'},
        '400': {'description': 'Invalid input, empty update or email taken'},
        '401': {'description': 'Not this user and not an admin'},
        '404': {'description': 'User not found'}
    }
})
def update_user(username):
    patch = validate_body(UserPatch)
    user = service.update_user(username, patch.changes())
    db.session.commit()

    return jsonify({'user': user.to_dict()})


@users_bp.route('/<username>', methods=['DELETE'])
@correct_user_or_admin_required
@swag_from({
    'tags': ['Users'],
    'description': 'Delete a user and everything they own',
    'security': [{'Bearer': []}],
    'parameters': [USERNAME_PARAM],
    'responses': {
        '200': {'description': 'User deleted'},
        '401': {'description': 'Not this user and not an admin'},
        '404': {'description': 'User not found'}
    }
})
def delete_user(username):
    result = service.remove_user(username)
    db.session.commit()

    return jsonify(result)
