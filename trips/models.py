from datetime import datetime
from app.extensions import db

TRIP_ROLES = ('owner', 'member')
ACTIVITY_CATEGORIES = ('food', 'hiking', 'tours', 'shopping', 'adventure', 'outdoors', 'other')
VOTE_VALUES = (-1, 1)


def _isoformat(value):
    return value.isoformat() if value else None


class Trip(db.Model):
    """Trip model. Its creator always holds the ``owner`` membership."""
    __tablename__ = 'trip'
    __table_args__ = (
        db.CheckConstraint('radius >= 0', name='ck_trip_radius'),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    destination = db.Column(db.String(255), nullable=False)
    radius = db.Column(db.Integer, nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    is_private = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    creator_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    members = db.relationship('TripMember', backref='trip', lazy=True, cascade='all, delete')
    activities = db.relationship('Activity', backref='trip', lazy=True, cascade='all, delete')
    comments = db.relationship('Comment', backref='trip', lazy=True, cascade='all, delete')

    def to_dict(self):
        """Return trip data as dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'destination': self.destination,
            'radius': self.radius,
            'start_date': _isoformat(self.start_date),
            'end_date': _isoformat(self.end_date),
            'is_private': self.is_private,
            'created_at': _isoformat(self.created_at),
            'creator_id': self.creator_id
        }

    def __repr__(self):
        return f'<Trip {self.title}>'


class TripMember(db.Model):
    """Membership of a user in a trip."""
    __tablename__ = 'trip_member'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'trip_id', name='uq_trip_member'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    trip_id = db.Column(db.Integer, db.ForeignKey('trip.id', ondelete='CASCADE'), nullable=False, index=True)
    role = db.Column(db.Enum(*TRIP_ROLES, name='trip_role'), nullable=False, default='member')
    joined_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'trip_id': self.trip_id,
            'role': self.role,
            'joined_at': _isoformat(self.joined_at)
        }

    def __repr__(self):
        return f'<TripMember user={self.user_id} trip={self.trip_id} {self.role}>'


class Activity(db.Model):
    """A schedulable item inside a trip that members vote on."""
    __tablename__ = 'activity'

    id = db.Column(db.Integer, primary_key=True)
    trip_id = db.Column(db.Integer, db.ForeignKey('trip.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.Enum(*ACTIVITY_CATEGORIES, name='activity_category'), nullable=False, default='other')
    description = db.Column(db.Text, nullable=True)
    location = db.Column(db.String(255), nullable=True)
    scheduled_time = db.Column(db.DateTime, nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    votes = db.relationship('Vote', backref='activity', lazy=True, cascade='all, delete')

    def to_dict(self):
        """Return activity data as dictionary."""
        return {
            'id': self.id,
            'trip_id': self.trip_id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
            'location': self.location,
            'scheduled_time': _isoformat(self.scheduled_time),
            'created_by': self.created_by,
            'created_at': _isoformat(self.created_at)
        }

    def __repr__(self):
        return f'<Activity {self.name}>'


class Vote(db.Model):
    """One user's up (+1) or down (-1) vote on an activity."""
    __tablename__ = 'vote'
    __table_args__ = (
        db.CheckConstraint('vote_value IN (-1, 1)', name='ck_vote_value'),
    )

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    activity_id = db.Column(db.Integer, db.ForeignKey('activity.id', ondelete='CASCADE'), primary_key=True)
    vote_value = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'activity_id': self.activity_id,
            'vote_value': self.vote_value
        }

    def __repr__(self):
        return f'<Vote user={self.user_id} activity={self.activity_id} {self.vote_value:+d}>'


class Comment(db.Model):
    """Comment posted on a trip."""
    __tablename__ = 'comment'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    trip_id = db.Column(db.Integer, db.ForeignKey('trip.id', ondelete='CASCADE'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        """Return comment data as dictionary."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'username': self.author.username if self.author else None,
            'trip_id': self.trip_id,
            'text': self.text,
            'created_at': _isoformat(self.created_at)
        }

    def __repr__(self):
        return f'<Comment {self.id} on trip {self.trip_id}>'
