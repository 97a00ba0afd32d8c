"""
Payment Constants

Stripe Connect onboarding settings, platform fee rules and tip limits.
All money amounts here are in cents.
"""

STRIPE_CONNECT_CONFIG = {
    'account_type': 'express',
    'supported_countries': ['US', 'CA', 'GB', 'AU'],
    'capabilities': {
        'card_payments': {'requested': True},
        'transfers': {'requested': True},
    },
    'business_type': 'individual',
    'payout_schedule': {
        'interval': 'weekly',
        'weekly_anchor': 'friday',
    },
}

PLATFORM_FEE_CONFIG = {
    'default_percent': 5.0,
    'minimum_fee': 50,     # $0.50
    'maximum_fee': 500,    # $5.00
}

TIP_CONFIG = {
    'minimum_amount': 100,     # $1.00
    'maximum_amount': 10000,   # $100.00
    'currency': 'usd',
}

# Prefix for locally created accounts that never touch the Stripe API
MOCK_ACCOUNT_PREFIX = 'acct_mock_'

# Friendly messages for Stripe error codes surfaced to tip senders
STRIPE_ERROR_MESSAGES = {
    'account_invalid': 'The recipient payment account is invalid or has been closed',
    'transfer_group_invalid': 'Payment routing failed for this recipient',
}
