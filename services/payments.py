"""
Payment Service

Stripe Connect integration for tipping recipe authors.

Authors onboard an Express account; tips are PaymentIntents charged on the
platform with a transfer to the author's account minus the platform fee.
Webhooks keep the local PaymentAccount and Compliment rows in sync.

Accounts whose id starts with MOCK_ACCOUNT_PREFIX never call Stripe, which
lets development environments exercise the flow end to end.
"""

import logging
import uuid

import stripe
from flask import current_app

from models import db, User, Compliment, PaymentAccount, utcnow
from constants import (
    STRIPE_CONNECT_CONFIG, PLATFORM_FEE_CONFIG, TIP_CONFIG, MOCK_ACCOUNT_PREFIX,
    STRIPE_ERROR_MESSAGES,
)
from utils.errors import PaymentError, ValidationError

logger = logging.getLogger(__name__)


def configure_stripe():
    """Point the stripe module at the configured secret key."""
    secret_key = current_app.config.get('STRIPE_SECRET_KEY')
    if not secret_key:
        raise PaymentError('Payment processing is not configured', status_code=500)
    stripe.api_key = secret_key


def is_mock_account(stripe_account_id):
    return bool(stripe_account_id) and stripe_account_id.startswith(MOCK_ACCOUNT_PREFIX)


# ============================================
# FEES AND FORMATTING
# ============================================

def calculate_platform_fee(amount_cents, fee_percent=None):
    """
    Platform fee in cents for a tip, clamped to the configured floor and cap.

    Args:
        amount_cents: Tip amount in cents
        fee_percent: Percentage to charge (defaults to the platform default)

    Returns:
        int fee in cents
    """
    if fee_percent is None:
        fee_percent = PLATFORM_FEE_CONFIG['default_percent']
    fee = int(round(amount_cents * fee_percent / 100))
    fee = max(PLATFORM_FEE_CONFIG['minimum_fee'], fee)
    return min(PLATFORM_FEE_CONFIG['maximum_fee'], fee)


def format_currency(amount_cents, currency='usd'):
    """Format cents for display: 1234 -> '$12.34'."""
    amount = amount_cents / 100
    if currency.lower() == 'usd':
        return f'${amount:,.2f}'
    return f'{amount:,.2f} {currency.upper()}'


def dollars_to_cents(amount):
    return int(round(float(amount) * 100))


# ============================================
# ACCOUNTS
# ============================================

def create_account_link(stripe_account_id):
    """Create a Stripe onboarding link for an account. Returns the URL."""
    configure_stripe()
    base_url = current_app.config['BASE_URL'].rstrip('/')
    link = stripe.AccountLink.create(
        account=stripe_account_id,
        refresh_url=f'{base_url}/profile/payment-setup?refresh=true',
        return_url=f'{base_url}/profile/payment-setup?success=true',
        type='account_onboarding',
    )
    return link['url']


def create_connect_account(user, country='US'):
    """
    Create an Express account for a user and start onboarding.

    Returns:
        Tuple of (PaymentAccount, onboarding_url)

    Raises:
        ValidationError: If the country is not supported
        PaymentError: If Stripe rejects the request
    """
    if country not in STRIPE_CONNECT_CONFIG['supported_countries']:
        raise ValidationError(f'Payments are not available in {country}')

    configure_stripe()
    try:
        account = stripe.Account.create(
            type=STRIPE_CONNECT_CONFIG['account_type'],
            country=country,
            email=user.email,
            capabilities=STRIPE_CONNECT_CONFIG['capabilities'],
            business_type=STRIPE_CONNECT_CONFIG['business_type'],
            settings={'payouts': {'schedule': STRIPE_CONNECT_CONFIG['payout_schedule']}},
            metadata={'user_id': str(user.id)},
        )
    except stripe.StripeError as e:
        logger.error('Stripe account creation failed for user %s: %s', user.id, e)
        raise PaymentError('Failed to create payment account')

    payment_account = PaymentAccount.query.filter_by(user_id=user.id).first()
    if payment_account is None:
        payment_account = PaymentAccount(user_id=user.id)
        db.session.add(payment_account)
    payment_account.stripe_account_id = account['id']
    payment_account.account_status = 'pending'
    payment_account.onboarding_complete = False
    payment_account.details_submitted = False
    payment_account.payouts_enabled = False
    db.session.commit()
    logger.info('Created Stripe account %s for user %s', account['id'], user.id)

    try:
        onboarding_url = create_account_link(account['id'])
    except stripe.StripeError as e:
        logger.error('Stripe account link failed for %s: %s', account['id'], e)
        raise PaymentError('Payment account created but onboarding link failed')

    return payment_account, onboarding_url


def _account_flag(account, name):
    # StripeObject is not a dict; item access works for both it and plain payloads
    try:
        return bool(account[name])
    except KeyError:
        return False


def apply_account_update(payment_account, account):
    """Mirror Stripe account flags onto the local row (caller commits)."""
    charges_enabled = _account_flag(account, 'charges_enabled')
    payment_account.details_submitted = _account_flag(account, 'details_submitted')
    payment_account.payouts_enabled = _account_flag(account, 'payouts_enabled')
    payment_account.onboarding_complete = payment_account.details_submitted and charges_enabled
    payment_account.account_status = 'active' if charges_enabled else 'pending'
    return payment_account


def sync_account(user_id):
    """
    Refresh a user's PaymentAccount from Stripe.

    Mock accounts and accounts without a Stripe id are returned untouched.
    """
    payment_account = PaymentAccount.query.filter_by(user_id=user_id).first()
    if payment_account is None or not payment_account.stripe_account_id:
        return payment_account
    if is_mock_account(payment_account.stripe_account_id):
        return payment_account

    configure_stripe()
    try:
        account = stripe.Account.retrieve(payment_account.stripe_account_id)
    except stripe.StripeError as e:
        logger.warning('Could not sync Stripe account %s: %s', payment_account.stripe_account_id, e)
        return payment_account

    apply_account_update(payment_account, account)
    db.session.commit()
    return payment_account


def can_receive_tips(user_id):
    """True if the user's account is active, onboarded, paid out and accepting tips."""
    payment_account = PaymentAccount.query.filter_by(user_id=user_id).first()
    return bool(
        payment_account
        and payment_account.account_status == 'active'
        and payment_account.onboarding_complete
        and payment_account.payouts_enabled
        and payment_account.accepts_tips
    )


def can_send_tips(user_id):
    return db.session.get(User, user_id) is not None


def get_payment_status(user):
    """Payment summary for the signed-in user, including an onboarding link when unfinished."""
    payment_account = PaymentAccount.query.filter_by(user_id=user.id).first()
    onboarding_url = None
    if (payment_account and payment_account.stripe_account_id
            and not payment_account.onboarding_complete
            and not is_mock_account(payment_account.stripe_account_id)):
        try:
            onboarding_url = create_account_link(payment_account.stripe_account_id)
        except (stripe.StripeError, PaymentError) as e:
            logger.warning('Could not create onboarding link for user %s: %s', user.id, e)

    return {
        'canReceiveTips': can_receive_tips(user.id),
        'canSendTips': can_send_tips(user.id),
        'account': payment_account.to_dict() if payment_account else None,
        'onboardingUrl': onboarding_url,
    }


# ============================================
# TIPS
# ============================================

def process_tip(sender, recipient, amount, message='', recipe_id=None, is_anonymous=False):
    """
    Charge a tip and record it as a tip compliment.

    Args:
        sender: User sending the tip
        recipient: User receiving it (must have a PaymentAccount)
        amount: Tip in dollars
        message: Optional note from the sender
        recipe_id: Recipe the tip is for, if any
        is_anonymous: Hide the sender from the recipient

    Returns:
        dict with compliment, clientSecret, paymentIntentId, platformFee
        and amount (cents)

    Raises:
        PaymentError: If the amount is out of range or Stripe fails
    """
    payment_account = recipient.payment_account
    if payment_account is None or not payment_account.stripe_account_id:
        raise PaymentError('Recipient has not set up payments')

    amount_cents = dollars_to_cents(amount)
    if not TIP_CONFIG['minimum_amount'] <= amount_cents <= TIP_CONFIG['maximum_amount']:
        raise PaymentError(
            f"Tip must be between {format_currency(TIP_CONFIG['minimum_amount'])} "
            f"and {format_currency(TIP_CONFIG['maximum_amount'])}"
        )

    fee = calculate_platform_fee(amount_cents, payment_account.platform_fee_percent)
    note = (message or '').strip() or f'Sent you a {format_currency(amount_cents)} tip!'

    if is_mock_account(payment_account.stripe_account_id):
        compliment = Compliment(
            from_user_id=sender.id,
            to_user_id=recipient.id,
            recipe_id=recipe_id,
            type='tip',
            message=note[:500],
            tip_amount=amount_cents / 100,
            is_anonymous=is_anonymous,
            payment_intent_id=f'pi_mock_{uuid.uuid4().hex[:16]}',
            payment_status='succeeded',
            paid_at=utcnow(),
        )
        db.session.add(compliment)
        db.session.commit()
        logger.info('Recorded mock tip %s from user %s to user %s', compliment.id, sender.id, recipient.id)
        return {
            'compliment': compliment,
            'clientSecret': None,
            'paymentIntentId': compliment.payment_intent_id,
            'platformFee': fee,
            'amount': amount_cents,
        }

    configure_stripe()
    try:
        intent = stripe.PaymentIntent.create(
            amount=amount_cents,
            currency=TIP_CONFIG['currency'],
            application_fee_amount=fee,
            transfer_data={'destination': payment_account.stripe_account_id},
            automatic_payment_methods={'enabled': True},
            description=f'Tip for {recipient.name} on TasteBuddy',
            metadata={
                'type': 'tip',
                'from_user_id': str(sender.id),
                'to_user_id': str(recipient.id),
                'recipe_id': str(recipe_id) if recipe_id else '',
                'is_anonymous': 'true' if is_anonymous else 'false',
            },
        )
    except stripe.StripeError as e:
        code = getattr(e, 'code', None)
        logger.error('Stripe PaymentIntent failed (%s) for tip to user %s: %s', code, recipient.id, e)
        raise PaymentError(STRIPE_ERROR_MESSAGES.get(code, 'Payment processing failed'))

    compliment = Compliment(
        from_user_id=sender.id,
        to_user_id=recipient.id,
        recipe_id=recipe_id,
        type='tip',
        message=note[:500],
        tip_amount=amount_cents / 100,
        is_anonymous=is_anonymous,
        payment_intent_id=intent['id'],
        payment_status='pending',
    )
    db.session.add(compliment)
    db.session.commit()
    logger.info('Created PaymentIntent %s for tip %s', intent['id'], compliment.id)

    return {
        'compliment': compliment,
        'clientSecret': intent['client_secret'],
        'paymentIntentId': intent['id'],
        'platformFee': fee,
        'amount': amount_cents,
    }


# ============================================
# WEBHOOKS
# ============================================

def construct_webhook_event(payload, signature):
    """
    Verify a webhook payload against the endpoint secret.

    Raises:
        ValidationError: On a malformed payload or bad signature
    """
    secret = current_app.config.get('STRIPE_WEBHOOK_SECRET')
    if not secret:
        raise PaymentError('Webhook secret is not configured', status_code=500)
    try:
        return stripe.Webhook.construct_event(payload, signature, secret)
    except ValueError:
        raise ValidationError('Invalid webhook payload')
    except stripe.SignatureVerificationError:
        raise ValidationError('Invalid webhook signature')


def _update_compliment_status(intent, status):
    compliment = Compliment.query.filter_by(payment_intent_id=intent['id']).first()
    if compliment is None:
        logger.warning('No compliment for PaymentIntent %s', intent['id'])
        return False
    compliment.payment_status = status
    if status == 'succeeded':
        compliment.paid_at = utcnow()
    db.session.commit()
    logger.info('Tip %s marked %s', compliment.id, status)
    return True


def _update_account(account):
    payment_account = PaymentAccount.query.filter_by(stripe_account_id=account['id']).first()
    if payment_account is None:
        logger.warning('No payment account for Stripe account %s', account['id'])
        return False
    apply_account_update(payment_account, account)
    db.session.commit()
    return True


def handle_webhook_event(event):
    """
    Apply a verified Stripe event.

    Returns:
        True if the event type is handled and matched a local row
    """
    event_type = event['type']
    obj = event['data']['object']

    if event_type == 'payment_intent.succeeded':
        return _update_compliment_status(obj, 'succeeded')
    if event_type == 'payment_intent.payment_failed':
        return _update_compliment_status(obj, 'failed')
    if event_type == 'account.updated':
        return _update_account(obj)
    if event_type == 'capability.updated':
        configure_stripe()
        try:
            account = stripe.Account.retrieve(obj['account'])
        except stripe.StripeError as e:
            logger.warning('Could not retrieve Stripe account %s for capability update: %s', obj['account'], e)
            return False
        return _update_account(account)

    logger.debug('Ignoring Stripe event %s', event_type)
    return False
