"""
Recipe Models

Contains the Recipe model and everything hanging off a recipe:
ordered ingredient entries, tags, gallery images, ratings,
comments and favorites.
"""

from .base import db, utcnow, isoformat


class Recipe(db.Model):
    """Recipe authored by a user, with ordered ingredients and tags."""
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, default='')
    instructions = db.Column(db.Text, nullable=False, default='')
    cook_time = db.Column(db.String(50), default='')
    servings = db.Column(db.Integer, default=1, nullable=False)
    difficulty = db.Column(db.String(20), default='easy', nullable=False, index=True)
    image = db.Column(db.String(500), nullable=True)  # Primary image URL
    is_public = db.Column(db.Boolean, default=True, nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    ingredients = db.relationship('IngredientEntry', backref='recipe', lazy=True,
                                  cascade='all, delete-orphan', order_by='IngredientEntry.position')
    tags = db.relationship('RecipeTag', backref='recipe', lazy=True, cascade='all, delete-orphan')
    images = db.relationship('RecipeImage', backref='recipe', lazy=True,
                             cascade='all, delete-orphan', order_by='RecipeImage.display_order')
    ratings = db.relationship('Rating', backref='recipe', lazy='dynamic', cascade='all, delete-orphan')
    comments = db.relationship('Comment', backref='recipe', lazy='dynamic', cascade='all, delete-orphan')
    favorites = db.relationship('Favorite', backref='recipe', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags]

    def to_dict(self, stats=None):
        """
        Serialize the recipe for API responses.

        Args:
            stats: Optional dict with avgRating, ratingCount, favoriteCount
                   and commentCount, computed in bulk by the caller

        Returns:
            dict
        """
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'ingredients': [entry.to_dict() for entry in self.ingredients],
            'instructions': self.instructions,
            'cookTime': self.cook_time or '',
            'servings': self.servings,
            'difficulty': self.difficulty,
            'tags': self.tag_names,
            'image': self.image,
            'images': [img.to_dict() for img in self.images],
            'isPublic': self.is_public,
            'authorId': self.author_id,
            'author': self.author.to_summary() if self.author else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if stats is not None:
            data.update(stats)
        return data


class IngredientEntry(db.Model):
    """One ingredient line of a recipe: optional amount and unit plus a name."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, default=0, nullable=False)
    amount = db.Column(db.Float, nullable=True)
    unit = db.Column(db.String(50), nullable=True)
    name = db.Column(db.String(200), nullable=False, index=True)

    def to_dict(self):
        return {'amount': self.amount, 'unit': self.unit, 'name': self.name}


class RecipeTag(db.Model):
    """Free-form tag attached to a recipe (stored lowercased)."""
    __table_args__ = (
        db.UniqueConstraint('recipe_id', 'name', name='uq_recipe_tag'),
    )

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False, index=True)


class RecipeImage(db.Model):
    """Gallery image for a recipe, stored in object storage."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
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


class Rating(db.Model):
    """A user's 1-5 star rating of a recipe. One per user per recipe."""
    __table_args__ = (
        db.UniqueConstraint('user_id', 'recipe_id', name='uq_rating_user_recipe'),
    )

    id = db.Column(db.Integer, primary_key=True)
    rating = db.Column(db.Integer, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Comment(db.Model):
    """
    Comment on a recipe.

    Visibility:
    - public: everyone
    - author_only: the commenter and the recipe author
    - private: the commenter only
    """
    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    visibility = db.Column(db.String(20), default='public', nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'content': self.content,
            'visibility': self.visibility,
            'recipeId': self.recipe_id,
            'userId': self.user_id,
            'user': self.user.to_summary() if self.user else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class Favorite(db.Model):
    """Quick-favorite marker, independent of the recipe book."""
    __table_args__ = (
        db.UniqueConstraint('user_id', 'recipe_id', name='uq_favorite_user_recipe'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
