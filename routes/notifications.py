"""
Notification Routes

The signed-in user's notification inbox.
"""

from flask import Blueprint, request
from flask_login import login_required, current_user

from constants import DEFAULT_NOTIFICATION_PAGE_SIZE, MAX_PAGE_SIZE
from models import db, Notification
from utils.errors import NotFoundError
from utils.request_helpers import build_pagination, get_pagination, parse_bool, success

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


def _get_own_notification(notification_id):
    notification = db.session.get(Notification, notification_id)
    # Other users' notifications are reported as missing
    if notification is None or notification.user_id != current_user.id:
        raise NotFoundError('Notification not found')
    return notification


def _unread_count():
    return Notification.query.filter_by(user_id=current_user.id, read=False).count()


@notifications_bp.route('', methods=['GET'])
@login_required
def list_notifications():
    page, limit = get_pagination(default_limit=DEFAULT_NOTIFICATION_PAGE_SIZE, max_limit=MAX_PAGE_SIZE)
    query = Notification.query.filter_by(user_id=current_user.id)
    if parse_bool(request.args.get('unreadOnly')):
        query = query.filter_by(read=False)

    total = query.count()
    notifications = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pagination = build_pagination(page, limit, total)
    pagination['hasMore'] = pagination['hasNextPage']
    return success({
        'notifications': [notification.to_dict() for notification in notifications],
        'pagination': pagination,
        'unreadCount': _unread_count(),
    })


@notifications_bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_read():
    updated = (
        Notification.query.filter_by(user_id=current_user.id, read=False)
        .update({'read': True}, synchronize_session=False)
    )
    db.session.commit()
    return success({'updatedCount': updated}, message='All notifications marked as read')


@notifications_bp.route('/<int:notification_id>', methods=['PUT'])
@login_required
def mark_read(notification_id):
    notification = _get_own_notification(notification_id)
    notification.read = True
    db.session.commit()
    return success(notification.to_dict())


@notifications_bp.route('/<int:notification_id>', methods=['DELETE'])
@login_required
def delete_notification(notification_id):
    notification = _get_own_notification(notification_id)
    db.session.delete(notification)
    db.session.commit()
    return success(message='Notification deleted')
