"""
Achievement Models

Achievement definitions and the awards users have earned.
"""

from .base import db, utcnow, isoformat


class Achievement(db.Model):
    """Achievement definition: a type, a threshold and display metadata."""
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(30), nullable=False, index=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(255), nullable=False, default='')
    icon = db.Column(db.String(20), nullable=True)
    color = db.Column(db.String(20), nullable=True)
    threshold = db.Column(db.Integer, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'color': self.color,
            'threshold': self.threshold,
        }


class UserAchievement(db.Model):
    """An achievement earned by a user, with the progress value at award time."""
    __table_args__ = (
        db.UniqueConstraint('user_id', 'achievement_id', name='uq_user_achievement'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    achievement_id = db.Column(db.Integer, db.ForeignKey('achievement.id', ondelete='CASCADE'),
                               nullable=False, index=True)
    progress = db.Column(db.Integer, nullable=True)
    earned_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    achievement = db.relationship('Achievement')

    def to_dict(self):
        return {
            'id': self.id,
            'achievement': self.achievement.to_dict() if self.achievement else None,
            'progress': self.progress,
            'earnedAt': isoformat(self.earned_at),
        }
