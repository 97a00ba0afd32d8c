"""
Payment Routes

Stripe Connect onboarding, payment status, tips and the Stripe webhook.
"""

import logging

import stripe
from flask import Blueprint, request
from flask_login import login_required, current_user

from constants import MIN_TIP_DOLLARS, MAX_TIP_DOLLARS
from models import db, User, Recipe, PaymentAccount
from services.feature_flags import payments_enabled
from services.notifications import notify_compliment
from services.payments import (
    create_connect_account, create_account_link, is_mock_account, sync_account,
    get_payment_status, process_tip, construct_webhook_event, handle_webhook_event,
)
from utils.errors import ValidationError, NotFoundError, PermissionDeniedError, PaymentError
from utils.request_helpers import get_json_body, get_or_404, safe_int, success
from utils.sanitizer import sanitize_multiline

logger = logging.getLogger(__name__)

payments_bp = Blueprint('payments', __name__)


def _require_payments():
    if not payments_enabled():
        raise PermissionDeniedError('Payments are not enabled')


# ============================================
# ROUTES - ACCOUNT SETUP
# ============================================

@payments_bp.route('/api/payment/setup', methods=['POST'])
@login_required
def setup_account():
    _require_payments()
    existing = PaymentAccount.query.filter_by(user_id=current_user.id).first()
    if existing is not None and existing.stripe_account_id:
        raise ValidationError('Payment account already exists')

    data = request.get_json(silent=True) or {}
    country = str(data.get('country') or 'US').upper()
    payment_account, onboarding_url = create_connect_account(current_user, country)
    return success({
        'accountId': payment_account.stripe_account_id,
        'onboardingUrl': onboarding_url,
    }, status=201, message='Payment account created')


@payments_bp.route('/api/payment/setup', methods=['GET'])
@login_required
def onboarding_link():
    _require_payments()
    payment_account = PaymentAccount.query.filter_by(user_id=current_user.id).first()
    if payment_account is None or not payment_account.stripe_account_id:
        raise NotFoundError('No payment account found')
    if is_mock_account(payment_account.stripe_account_id):
        return success({'accountId': payment_account.stripe_account_id, 'onboardingUrl': None})

    try:
        onboarding_url = create_account_link(payment_account.stripe_account_id)
    except stripe.StripeError as e:
        logger.error('Failed to create onboarding link for user %s: %s', current_user.id, e)
        raise PaymentError('Failed to create onboarding link')
    return success({'accountId': payment_account.stripe_account_id, 'onboardingUrl': onboarding_url})


@payments_bp.route('/api/payment/status', methods=['GET'])
@login_required
def payment_status():
    if not payments_enabled():
        return success({
            'enabled': False,
            'canReceiveTips': False,
            'canSendTips': False,
            'account': None,
            'onboardingUrl': None,
        })

    sync_account(current_user.id)
    status = get_payment_status(current_user)
    status['enabled'] = True
    return success(status)


# ============================================
# ROUTES - TIPS
# ============================================

@payments_bp.route('/api/payment/tip', methods=['POST'])
@login_required
def send_tip():
    _require_payments()
    data = get_json_body()

    recipient_id = safe_int(data.get('toUserId', data.get('recipientId')), default=None)
    if recipient_id is None:
        raise ValidationError('toUserId is required')

    try:
        amount = round(float(data.get('amount')), 2)
    except (TypeError, ValueError):
        raise ValidationError('Tip amount must be a number')
    if not MIN_TIP_DOLLARS <= amount <= MAX_TIP_DOLLARS:
        raise ValidationError(f'Tip amount must be between ${MIN_TIP_DOLLARS} and ${MAX_TIP_DOLLARS}')

    if recipient_id == current_user.id:
        raise ValidationError('You cannot tip yourself')
    recipient = get_or_404(User, recipient_id, 'Recipient not found')

    payment_account = recipient.payment_account
    if payment_account is None or not payment_account.stripe_account_id:
        raise PaymentError('This chef has not set up payments yet')
    if not payment_account.accepts_tips:
        raise PaymentError('This chef is not accepting tips')

    recipe = None
    recipe_id = safe_int(data.get('recipeId'), default=None)
    if recipe_id is not None:
        recipe = db.session.get(Recipe, recipe_id)
        if recipe is None or recipe.author_id != recipient.id:
            raise NotFoundError('Recipe not found')

    result = process_tip(
        current_user, recipient, amount,
        message=sanitize_multiline(data.get('message'), max_length=500),
        recipe_id=recipe.id if recipe else None,
        is_anonymous=data.get('isAnonymous') is True,
    )
    compliment = result['compliment']
    notify_compliment(compliment, current_user, recipe)

    return success({
        'complimentId': compliment.id,
        'compliment': compliment.to_dict(),
        'clientSecret': result['clientSecret'],
        'paymentIntentId': result['paymentIntentId'],
        'amount': result['amount'],
        'platformFee': result['platformFee'],
    }, status=201, message='Tip created')


# ============================================
# ROUTES - WEBHOOKS
# ============================================

@payments_bp.route('/api/webhooks/stripe', methods=['POST'])
def stripe_webhook():
    event = construct_webhook_event(request.get_data(), request.headers.get('Stripe-Signature', ''))
    handled = handle_webhook_event(event)
    logger.info('Stripe event %s (%s) handled=%s', event['id'], event['type'], handled)
    return success({'received': True, 'handled': handled})
