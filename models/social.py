"""
Social Models

Contains in-app notifications and compliments (messages and tips
sent from one user to another).
"""

from .base import db, utcnow, isoformat


class Notification(db.Model):
    """In-app notification delivered to a single user."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    from_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    type = db.Column(db.String(40), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    # Id of the recipe, meal or compliment the notification points at
    related_id = db.Column(db.Integer, nullable=True)
    related_type = db.Column(db.String(20), nullable=True)
    read = db.Column(db.Boolean, default=False, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    from_user = db.relationship('User', foreign_keys=[from_user_id])

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'read': self.read,
            'relatedId': self.related_id,
            'relatedType': self.related_type,
            'fromUser': self.from_user.to_summary() if self.from_user else None,
            'createdAt': isoformat(self.created_at),
        }


class Compliment(db.Model):
    """
    Message or tip from one user to another, optionally about a recipe.

    payment_status for tips moves pending -> succeeded | failed as Stripe
    webhooks arrive. Plain messages are created as completed.
    """
    id = db.Column(db.Integer, primary_key=True)
    from_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    to_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True, index=True)
    type = db.Column(db.String(20), default='message', nullable=False)
    message = db.Column(db.String(500), nullable=False)
    tip_amount = db.Column(db.Float, nullable=True)  # Dollars
    is_anonymous = db.Column(db.Boolean, default=False, nullable=False)
    payment_intent_id = db.Column(db.String(255), nullable=True, unique=True)
    payment_status = db.Column(db.String(20), default='completed', nullable=False)
    paid_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    from_user = db.relationship('User', foreign_keys=[from_user_id])
    to_user = db.relationship('User', foreign_keys=[to_user_id])
    recipe = db.relationship('Recipe', backref=db.backref('compliments', lazy='dynamic'))

    def to_dict(self, mask_anonymous=False):
        """
        Serialize the compliment.

        Args:
            mask_anonymous: Replace the sender with a placeholder when the
                            compliment was sent anonymously

        Returns:
            dict
        """
        if mask_anonymous and self.is_anonymous:
            sender = {'id': 'anonymous', 'name': 'Anonymous', 'image': None}
        else:
            sender = self.from_user.to_summary() if self.from_user else None
        return {
            'id': self.id,
            'type': self.type,
            'message': self.message,
            'tipAmount': self.tip_amount,
            'isAnonymous': self.is_anonymous,
            'paymentStatus': self.payment_status,
            'paidAt': isoformat(self.paid_at),
            'fromUser': sender,
            'toUser': self.to_user.to_summary() if self.to_user else None,
            'recipe': {'id': self.recipe.id, 'title': self.recipe.title, 'image': self.recipe.image}
                      if self.recipe else None,
            'createdAt': isoformat(self.created_at),
        }
