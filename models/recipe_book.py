"""
Recipe Book Models

A user's personal recipe book: named categories plus entries that
file a recipe into a category (or leave it uncategorized).
"""

from .base import db, utcnow, isoformat


class RecipeBookCategory(db.Model):
    """User-defined category; names are unique per user."""
    __table_args__ = (
        db.UniqueConstraint('user_id', 'name', name='uq_book_category_user_name'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False)
    description = db.Column(db.String(200), nullable=True)
    color = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    entries = db.relationship('RecipeBookEntry', backref='category', lazy='dynamic', passive_deletes=True)

    def to_dict(self, recipe_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'color': self.color,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if recipe_count is not None:
            data['recipeCount'] = recipe_count
        return data


class RecipeBookEntry(db.Model):
    """
    A recipe filed in a user's book.

    Unique per (user, recipe, category). category_id is NULL for
    uncategorized entries and is nulled when its category is deleted.
    """
    __table_args__ = (
        db.UniqueConstraint('user_id', 'recipe_id', 'category_id', name='uq_book_entry'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('recipe_book_category.id', ondelete='SET NULL'),
                            nullable=True, index=True)
    notes = db.Column(db.Text, nullable=True)
    added_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    recipe = db.relationship('Recipe', backref=db.backref('book_entries', lazy='dynamic',
                                                          cascade='all, delete-orphan'))

    def to_dict(self, include_recipe=True):
        data = {
            'id': self.id,
            'recipeId': self.recipe_id,
            'categoryId': self.category_id,
            'category': self.category.to_dict() if self.category else None,
            'notes': self.notes,
            'addedAt': isoformat(self.added_at),
        }
        if include_recipe and self.recipe:
            data['recipe'] = self.recipe.to_dict()
        return data
