from datetime import datetime, timedelta
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from app.extensions import db

class User(db.Model):
    """User model for authentication and profile management.

    Owns every row that references it: friend relationships in both
    directions, trip memberships, trips it created, activities it created,
    votes and comments are removed along with the user.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(25), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    bio = db.Column(db.Text, nullable=True)
    picture = db.Column(db.String(255), nullable=True)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    sent_requests = db.relationship('Friend', foreign_keys='Friend.sender_id', backref='sender',
                                    lazy=True, cascade='all, delete')
    received_requests = db.relationship('Friend', foreign_keys='Friend.recipient_id', backref='recipient',
                                        lazy=True, cascade='all, delete')
    memberships = db.relationship('TripMember', backref='user', lazy=True, cascade='all, delete')
    created_trips = db.relationship('Trip', backref='creator', lazy=True, cascade='all, delete')
    created_activities = db.relationship('Activity', backref='creator', lazy=True, cascade='all, delete')
    votes = db.relationship('Vote', backref='user', lazy=True, cascade='all, delete')
    comments = db.relationship('Comment', backref='author', lazy=True, cascade='all, delete')

    def __init__(self, **kwargs):
        password = kwargs.pop('password', None)
        super(User, self).__init__(**kwargs)
        if password is not None:
            self.set_password(password)

    def set_password(self, password):
        """Create hashed password."""
        method = current_app.config.get('PASSWORD_HASH_METHOD', 'scrypt')
        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password):
        """Check hashed password."""
        return check_password_hash(self.password_hash, password)

    def generate_auth_token(self, expires_in=None):
        """Generate a JWT carrying the user's id, username and admin flag."""
        if expires_in is None:
            expires = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
        else:
            expires = timedelta(seconds=expires_in)
        return create_access_token(
            identity=str(self.id),
            additional_claims={'username': self.username, 'is_admin': self.is_admin},
            expires_delta=expires,
        )

    def to_public_dict(self):
        """Profile fields safe to show to other users."""
        return {
            'id': self.id,
            'username': self.username,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'picture': self.picture,
        }

    def to_dict(self):
        """Return user data as dictionary."""
        data = self.to_public_dict()
        data.update({
            'bio': self.bio,
            'is_admin': self.is_admin,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        })
        return data

    def __repr__(self):
        return f'<User {self.username}>'
