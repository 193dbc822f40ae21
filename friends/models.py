from datetime import datetime
from app.extensions import db

FRIEND_STATUSES = ('pending', 'accepted')

class Friend(db.Model):
    """A friend request from ``sender`` to ``recipient``.

    The row is created ``pending`` and flips to ``accepted`` when the
    recipient accepts it. Declining or unfriending deletes the row. Only one
    row may exist per pair of users, whichever direction it was sent in; the
    unique constraint covers the stored order and the service rejects the
    reverse one.
    """
    __tablename__ = 'friend'
    __table_args__ = (
        db.UniqueConstraint('sender_id', 'recipient_id', name='uq_friend_pair'),
        db.CheckConstraint('sender_id != recipient_id', name='ck_friend_not_self'),
    )

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    recipient_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    status = db.Column(db.Enum(*FRIEND_STATUSES, name='friend_status'), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def other_user(self, user_id):
        """The side of the relationship that is not ``user_id``."""
        return self.recipient if self.sender_id == user_id else self.sender

    def to_dict(self):
        """Return relationship data as dictionary."""
        return {
            'id': self.id,
            'sender_id': self.sender_id,
            'recipient_id': self.recipient_id,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def to_dict_for(self, user_id):
        """Relationship as seen by ``user_id``, embedding the other user's profile."""
        return {
            'id': self.id,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'user': self.other_user(user_id).to_public_dict()
        }

    def __repr__(self):
        return f'<Friend {self.sender_id}->{self.recipient_id} {self.status}>'
