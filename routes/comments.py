"""
Comment Routes

Comments on recipes, filtered by visibility for the viewer.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user

from constants import MAX_LENGTHS, VALID_COMMENT_VISIBILITIES
from models import db, Recipe, Comment
from services.achievements import evaluate_comment_achievements
from services.notifications import notify_recipe_comment
from utils.errors import ValidationError, NotFoundError, PermissionDeniedError
from utils.request_helpers import get_json_body, require_text, get_or_404, safe_int, success, viewer_id
from utils.sanitizer import sanitize_multiline

logger = logging.getLogger(__name__)

comments_bp = Blueprint('comments', __name__, url_prefix='/api/comments')


def visible_comments_query(recipe, viewer):
    """
    Comments on a recipe that viewer may read.

    public is shown to everyone, private only to its writer and
    author_only to its writer and the recipe author.
    """
    query = Comment.query.filter_by(recipe_id=recipe.id)
    if viewer is None:
        return query.filter(Comment.visibility == 'public')
    if viewer == recipe.author_id:
        return query.filter(db.or_(
            Comment.visibility.in_(['public', 'author_only']),
            Comment.user_id == viewer,
        ))
    return query.filter(db.or_(Comment.visibility == 'public', Comment.user_id == viewer))


def _clean_content(data):
    content = sanitize_multiline(require_text(data, 'content', 'Comment', MAX_LENGTHS['comment']))
    if not content:
        raise ValidationError('Comment is required')
    return content


def _get_own_comment(comment_id):
    comment = get_or_404(Comment, comment_id, 'Comment not found')
    if comment.user_id != current_user.id:
        raise PermissionDeniedError('You can only modify your own comments')
    return comment


@comments_bp.route('', methods=['GET'])
def list_comments():
    recipe_id = safe_int(request.args.get('recipeId'), default=None)
    if recipe_id is None:
        raise ValidationError('recipeId is required')

    viewer = viewer_id()
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None or (not recipe.is_public and recipe.author_id != viewer):
        raise NotFoundError('Recipe not found')

    comments = (
        visible_comments_query(recipe, viewer)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    return success([comment.to_dict() for comment in comments])


@comments_bp.route('', methods=['POST'])
@login_required
def create_comment():
    data = get_json_body()
    recipe_id = safe_int(data.get('recipeId'), default=None)
    if recipe_id is None:
        raise ValidationError('recipeId is required')
    content = _clean_content(data)
    visibility = data.get('visibility') or 'public'
    if visibility not in VALID_COMMENT_VISIBILITIES:
        raise ValidationError(f"Visibility must be one of: {', '.join(sorted(VALID_COMMENT_VISIBILITIES))}")

    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None or (not recipe.is_public and recipe.author_id != current_user.id):
        raise NotFoundError('Recipe not found')

    comment = Comment(content=content, visibility=visibility, user_id=current_user.id, recipe_id=recipe.id)
    db.session.add(comment)
    db.session.commit()
    logger.info('User %s commented on recipe %s', current_user.id, recipe.id)

    if recipe.author_id != current_user.id:
        notify_recipe_comment(current_user, recipe)
    evaluate_comment_achievements(recipe.author_id)

    return success(comment.to_dict(), status=201, message='Comment added')


@comments_bp.route('/<int:comment_id>', methods=['PUT'])
@login_required
def update_comment(comment_id):
    comment = _get_own_comment(comment_id)
    data = get_json_body()

    if 'content' in data:
        comment.content = _clean_content(data)
    if 'visibility' in data:
        if data['visibility'] not in VALID_COMMENT_VISIBILITIES:
            raise ValidationError(
                f"Visibility must be one of: {', '.join(sorted(VALID_COMMENT_VISIBILITIES))}"
            )
        comment.visibility = data['visibility']

    db.session.commit()
    return success(comment.to_dict(), message='Comment updated')


@comments_bp.route('/<int:comment_id>', methods=['DELETE'])
@login_required
def delete_comment(comment_id):
    comment = _get_own_comment(comment_id)
    db.session.delete(comment)
    db.session.commit()
    return success(message='Comment deleted')
