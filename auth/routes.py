from flask import jsonify
from flask_jwt_extended import current_user, jwt_required
from flasgger import swag_from
from app.extensions import db
from app.schemas import validate_body
from .schemas import UserAuth, UserRegister
from . import service
from . import auth_bp

@auth_bp.route('/register', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Register a new user',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'johndoe'},
                'password': {'type': 'string', 'example': 'secret123'},
                'first_name': {'type': 'string', 'example': 'John'},
                'last_name': {'type': 'string', 'example': 'Doe'},
                'email': {'type': 'string', 'example': 'john@example.com'},
                'bio': {'type': 'string'},
                'picture': {'type': 'string'}
            },
            'required': ['username', 'password', 'first_name', 'last_name', 'email']
        }
    }],
    'responses': {
        '201': {
            'description': 'User registered successfully',
            'schema': {'type': 'object', 'properties': {'token': {'type': 'string'}}}
        },
        '400': {'description': 'Invalid input data or username/email already taken'}
    }
})
def register():
    """Register a new user and return a token. Self-registered users are never admins."""
    data = validate_body(UserRegister)
    user = service.register(**data.model_dump(), is_admin=False)
    db.session.commit()

    return jsonify({'token': user.generate_auth_token()}), 201

@auth_bp.route('/token', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Login with username and password',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'johndoe'},
                'password': {'type': 'string', 'example': 'secret123'}
            },
            'required': ['username', 'password']
        }
    }],
    'responses': {
        '200': {
            'description': 'Login successful',
            'schema': {'type': 'object', 'properties': {'token': {'type': 'string'}}}
        },
        '400': {'description': 'Invalid input data'},
        '401': {'description': 'Invalid credentials'}
    }
})
def login():
    """Login user and return JWT token."""
    data = validate_body(UserAuth)
    user = service.authenticate(data.username, data.password)
    return jsonify({'token': user.generate_auth_token()})

@auth_bp.route('/me')
@jwt_required()
@swag_from({
    'security': [{'Bearer': []}],
    'tags': ['Authentication'],
    'description': 'Get current user profile',
    'responses': {
        '200': {'description': 'User profile'},
        '401': {'description': 'Invalid or missing token, or its user no longer exists'}
    }
})
def get_current_user():
    """Get current user's profile."""
    return jsonify(current_user.to_dict())
