"""
Meal Models

Meals are dated food memories with a small photo gallery and
optionally tagged companions.
"""

from .base import db, utcnow, isoformat


class Meal(db.Model):
    """A dated meal memory with up to five photos."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    date = db.Column(db.DateTime, nullable=True)
    is_public = db.Column(db.Boolean, default=True, nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    images = db.relationship('MealImage', backref='meal', lazy=True,
                             cascade='all, delete-orphan', order_by='MealImage.display_order')
    tagged_users = db.relationship('MealTag', backref='meal', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'date': isoformat(self.date),
            'isPublic': self.is_public,
            'authorId': self.author_id,
            'author': self.author.to_summary() if self.author else None,
            'images': [img.to_dict() for img in self.images],
            'taggedUsers': [tag.user.to_summary() for tag in self.tagged_users if tag.user],
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class MealImage(db.Model):
    """Photo belonging to a meal. Exactly one image per meal is primary."""
    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey('meal.id', ondelete='CASCADE'), nullable=False, index=True)
    url = db.Column(db.String(500), nullable=False)
    filename = db.Column(db.String(255), nullable=True)
    caption = db.Column(db.String(255), nullable=True)
    alt = db.Column(db.String(255), nullable=True)
    width = db.Column(db.Integer, nullable=True)
    height = db.Column(db.Integer, nullable=True)
    file_size = db.Column(db.Integer, nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_primary = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'url': self.url,
            'filename': self.filename,
            'caption': self.caption,
            'alt': self.alt,
            'width': self.width,
            'height': self.height,
            'fileSize': self.file_size,
            'displayOrder': self.display_order,
            'isPrimary': self.is_primary,
        }


class MealTag(db.Model):
    """A user tagged on someone else's meal."""
    __table_args__ = (
        db.UniqueConstraint('meal_id', 'user_id', name='uq_meal_tag'),
    )

    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey('meal.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship('User')
