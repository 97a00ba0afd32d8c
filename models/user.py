"""
User Models

Contains the User account model and the Follow relationship between users.
"""

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .base import db, utcnow, isoformat


class User(UserMixin, db.Model):
    """Registered member with profile, privacy and notification preferences."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    bio = db.Column(db.String(500), nullable=True)
    instagram_url = db.Column(db.String(500), nullable=True)
    website_url = db.Column(db.String(500), nullable=True)

    # Privacy: HIDDEN, FOLLOWING_ONLY or PUBLIC
    email_visibility = db.Column(db.String(20), default='HIDDEN', nullable=False)

    # Notification preferences, one flag per notification type
    notify_on_new_follower = db.Column(db.Boolean, default=True, nullable=False)
    notify_on_recipe_comment = db.Column(db.Boolean, default=True, nullable=False)
    notify_on_compliment = db.Column(db.Boolean, default=True, nullable=False)
    notify_on_new_recipe_from_following = db.Column(db.Boolean, default=True, nullable=False)
    notify_on_meal_tag = db.Column(db.Boolean, default=True, nullable=False)
    email_notifications = db.Column(db.Boolean, default=False, nullable=False)
    email_digest = db.Column(db.String(20), default='weekly', nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    recipes = db.relationship('Recipe', backref='author', lazy='dynamic', cascade='all, delete-orphan')
    meals = db.relationship('Meal', backref='author', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_summary(self):
        """Minimal public representation used when embedding a user."""
        return {'id': self.id, 'name': self.name, 'image': self.image}

    def to_dict(self):
        """Full representation. Callers apply privacy rules before returning it."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'image': self.image,
            'bio': self.bio,
            'instagramUrl': self.instagram_url,
            'websiteUrl': self.website_url,
            'emailVisibility': self.email_visibility,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.id} {self.email}>'


class Follow(db.Model):
    """Directed follow edge: follower_id follows following_id."""
    __table_args__ = (
        db.UniqueConstraint('follower_id', 'following_id', name='uq_follow_pair'),
    )

    id = db.Column(db.Integer, primary_key=True)
    follower_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    following_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    follower = db.relationship('User', foreign_keys=[follower_id])
    following = db.relationship('User', foreign_keys=[following_id])
