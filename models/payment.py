"""
Payment Models

Local mirror of a user's Stripe Connect account.
"""

from .base import db, utcnow, isoformat


class PaymentAccount(db.Model):
    """
    Stripe Connect account linked to a user.

    account_status mirrors Stripe:
    - pending: created, onboarding not finished or charges disabled
    - active: charges enabled
    - restricted / inactive: set manually or by future webhook handling
    """
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'),
                        unique=True, nullable=False, index=True)
    stripe_account_id = db.Column(db.String(255), unique=True, nullable=True)
    account_status = db.Column(db.String(20), default='pending', nullable=False)
    onboarding_complete = db.Column(db.Boolean, default=False, nullable=False)
    details_submitted = db.Column(db.Boolean, default=False, nullable=False)
    payouts_enabled = db.Column(db.Boolean, default=False, nullable=False)
    accepts_tips = db.Column(db.Boolean, default=True, nullable=False)
    minimum_tip_amount = db.Column(db.Float, default=1.0, nullable=False)  # Dollars
    platform_fee_percent = db.Column(db.Float, default=5.0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = db.relationship('User', backref=db.backref('payment_account', uselist=False,
                                                      cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'stripeAccountId': self.stripe_account_id,
            'accountStatus': self.account_status,
            'onboardingComplete': self.onboarding_complete,
            'detailsSubmitted': self.details_submitted,
            'payoutsEnabled': self.payouts_enabled,
            'acceptsTips': self.accepts_tips,
            'minimumTipAmount': self.minimum_tip_amount,
            'platformFeePercent': self.platform_fee_percent,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def to_summary(self):
        """Public view shown on profiles."""
        return {
            'acceptsTips': self.accepts_tips,
            'isActive': self.account_status == 'active',
            'minimumTipAmount': self.minimum_tip_amount,
        }
