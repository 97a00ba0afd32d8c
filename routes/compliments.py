"""
Compliment Routes

Messages and tips sent between users. The recipient lists them; the
sender may edit or withdraw one until a tip payment has gone through.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user

from constants import MAX_LENGTHS, VALID_COMPLIMENT_TYPES, MIN_COMPLIMENT_TIP, MAX_COMPLIMENT_TIP
from models import db, User, Recipe, Compliment
from services.feature_flags import payments_enabled
from services.notifications import notify_compliment
from utils.errors import ValidationError, NotFoundError, PermissionDeniedError
from utils.request_helpers import get_json_body, require_text, get_or_404, safe_int, success
from utils.sanitizer import sanitize_multiline

logger = logging.getLogger(__name__)

compliments_bp = Blueprint('compliments', __name__, url_prefix='/api/compliments')

PROCESSED_STATUSES = ('succeeded', 'completed')


def _clean_message(data):
    message = sanitize_multiline(require_text(data, 'message', 'Message', MAX_LENGTHS['compliment']))
    if not message:
        raise ValidationError('Message is required')
    return message


def _parse_tip_amount(value):
    if isinstance(value, bool) or value is None:
        raise ValidationError('Tip amount is required for tips')
    try:
        amount = round(float(value), 2)
    except (TypeError, ValueError):
        raise ValidationError('Tip amount must be a number')
    if not MIN_COMPLIMENT_TIP <= amount <= MAX_COMPLIMENT_TIP:
        raise ValidationError(f'Tip amount must be between ${MIN_COMPLIMENT_TIP:.2f} and ${MAX_COMPLIMENT_TIP:.2f}')
    return amount


def _get_editable_compliment(compliment_id):
    compliment = get_or_404(Compliment, compliment_id, 'Compliment not found')
    if compliment.from_user_id != current_user.id:
        raise PermissionDeniedError('You can only modify compliments you sent')
    if compliment.type == 'tip' and compliment.payment_status in PROCESSED_STATUSES:
        raise ValidationError('Tips that have been processed cannot be changed')
    return compliment


@compliments_bp.route('', methods=['POST'])
@login_required
def send_compliment():
    data = get_json_body()
    to_user_id = safe_int(data.get('toUserId'), default=None)
    if to_user_id is None:
        raise ValidationError('toUserId is required')

    compliment_type = data.get('type') or 'message'
    if compliment_type not in VALID_COMPLIMENT_TYPES:
        raise ValidationError(f"Type must be one of: {', '.join(sorted(VALID_COMPLIMENT_TYPES))}")
    message = _clean_message(data)

    tip_amount = None
    if compliment_type == 'tip':
        tip_amount = _parse_tip_amount(data.get('tipAmount'))

    if to_user_id == current_user.id:
        raise ValidationError('You cannot send a compliment to yourself')
    recipient = get_or_404(User, to_user_id, 'User not found')

    recipe = None
    recipe_id = safe_int(data.get('recipeId'), default=None)
    if recipe_id is not None:
        recipe = db.session.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError('Recipe not found')
        if recipe.author_id != recipient.id:
            raise ValidationError('Recipe does not belong to this user')

    if compliment_type == 'tip' and not payments_enabled():
        raise PermissionDeniedError('Tipping is not available yet')

    compliment = Compliment(
        from_user_id=current_user.id,
        to_user_id=recipient.id,
        recipe_id=recipe.id if recipe else None,
        type=compliment_type,
        message=message,
        tip_amount=tip_amount,
        is_anonymous=data.get('isAnonymous') is True,
        payment_status='pending' if compliment_type == 'tip' else 'completed',
    )
    db.session.add(compliment)
    db.session.commit()
    logger.info('User %s sent a %s to user %s', current_user.id, compliment_type, recipient.id)

    notify_compliment(compliment, current_user, recipe)
    return success(compliment.to_dict(), status=201, message='Compliment sent')


@compliments_bp.route('', methods=['GET'])
@login_required
def list_compliments():
    user_id = safe_int(request.args.get('userId'), default=current_user.id)
    if user_id != current_user.id:
        raise PermissionDeniedError('You can only view compliments sent to you')

    compliments = (
        Compliment.query.filter_by(to_user_id=user_id)
        .order_by(Compliment.created_at.desc(), Compliment.id.desc())
        .all()
    )
    return success([compliment.to_dict(mask_anonymous=True) for compliment in compliments])


@compliments_bp.route('/<int:compliment_id>', methods=['PUT'])
@login_required
def update_compliment(compliment_id):
    compliment = _get_editable_compliment(compliment_id)
    compliment.message = _clean_message(get_json_body())
    db.session.commit()
    return success(compliment.to_dict(), message='Compliment updated')


@compliments_bp.route('/<int:compliment_id>', methods=['DELETE'])
@login_required
def delete_compliment(compliment_id):
    compliment = _get_editable_compliment(compliment_id)
    db.session.delete(compliment)
    db.session.commit()
    return success(message='Compliment deleted')
