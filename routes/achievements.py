"""
Achievement Routes

Lists the achievement catalogue. Per-user awards live under /api/users.
"""

from flask import Blueprint

from models import Achievement
from utils.request_helpers import success

achievements_bp = Blueprint('achievements', __name__, url_prefix='/api/achievements')


@achievements_bp.route('', methods=['GET'])
def list_achievements():
    achievements = (
        Achievement.query.filter_by(is_active=True)
        .order_by(Achievement.type, Achievement.threshold, Achievement.id)
        .all()
    )
    return success([achievement.to_dict() for achievement in achievements])
