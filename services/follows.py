"""
Follow Service

Queries over the follow graph: counts, mutual follows ("tastebuddies")
and follow/unfollow mutations.
"""

from sqlalchemy.orm import aliased

from models import db, Follow, User


def is_following(follower_id, following_id):
    """True if follower_id follows following_id."""
    if not follower_id or not following_id:
        return False
    return db.session.query(
        Follow.query.filter_by(follower_id=follower_id, following_id=following_id).exists()
    ).scalar()


def follow_counts(user_id):
    """Return (following_count, followers_count) for a user."""
    following = Follow.query.filter_by(follower_id=user_id).count()
    followers = Follow.query.filter_by(following_id=user_id).count()
    return following, followers


def tastebuddy_ids_query(user_id):
    """Select ids of users that follow user_id and are followed back."""
    reverse = aliased(Follow)
    return (
        db.session.query(Follow.following_id)
        .join(reverse, db.and_(reverse.follower_id == Follow.following_id,
                               reverse.following_id == Follow.follower_id))
        .filter(Follow.follower_id == user_id)
    )


def get_tastebuddy_ids(user_id):
    return [row[0] for row in tastebuddy_ids_query(user_id).all()]


def has_mutual_follow(user_id):
    return db.session.query(tastebuddy_ids_query(user_id).exists()).scalar()


def get_tastebuddies(user_id):
    """Users with a mutual follow, ordered by name."""
    ids = get_tastebuddy_ids(user_id)
    if not ids:
        return []
    return User.query.filter(User.id.in_(ids)).order_by(User.name).all()


def follow_user(follower_id, following_id):
    """
    Create a follow edge if it does not exist.

    Returns:
        True if a new follow was created, False if it already existed
    """
    existing = Follow.query.filter_by(follower_id=follower_id, following_id=following_id).first()
    if existing:
        return False
    db.session.add(Follow(follower_id=follower_id, following_id=following_id))
    db.session.commit()
    return True


def unfollow_user(follower_id, following_id):
    """Remove a follow edge. Returns True if one was removed."""
    deleted = Follow.query.filter_by(follower_id=follower_id, following_id=following_id).delete()
    db.session.commit()
    return deleted > 0


def follower_ids(user_id):
    """Ids of everyone following user_id."""
    return [row[0] for row in db.session.query(Follow.follower_id).filter_by(following_id=user_id).all()]
