from app.errors import bad_request, not_found
from app.extensions import db
from .models import Comment


def create_comment(user_id, trip_id, text):
    if not text or not text.strip():
        raise bad_request('Comment text cannot be empty.')

    comment = Comment(user_id=user_id, trip_id=trip_id, text=text)
    db.session.add(comment)
    db.session.flush()
    return comment


def get_comment(comment_id):
    comment = db.session.get(Comment, comment_id)
    if not comment:
        raise not_found(f'No comment found with ID: {comment_id}')
    return comment


def list_comments(trip_id):
    """Comments of a trip, oldest first, with the author's username."""
    comments = (
        Comment.query
        .filter_by(trip_id=trip_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )
    return [comment.to_dict() for comment in comments]


def remove_comment(comment_id):
    comment = get_comment(comment_id)
    db.session.delete(comment)
    db.session.flush()
    return {'deleted': comment_id}
