"""
Privacy Service

Decides which profile fields a viewer may see.
"""

from services.follows import is_following


def can_view_email(profile_user, viewer_id=None):
    """
    Check whether viewer_id may see profile_user's email.

    Rules:
    - The owner always sees their own email
    - PUBLIC: everyone
    - FOLLOWING_ONLY: only people the profile owner follows
    - HIDDEN: nobody else

    Args:
        profile_user: User whose profile is being viewed
        viewer_id: Id of the signed-in viewer, or None when anonymous

    Returns:
        bool
    """
    if viewer_id is not None and viewer_id == profile_user.id:
        return True

    visibility = profile_user.email_visibility or 'HIDDEN'
    if visibility == 'PUBLIC':
        return True
    if viewer_id is None:
        return False
    if visibility == 'FOLLOWING_ONLY':
        return is_following(profile_user.id, viewer_id)
    return False


def get_user_with_privacy(profile_user, viewer_id=None):
    """
    Serialize a user with privacy rules applied.

    The email is removed unless can_view_email allows it, and the
    emailVisibility setting itself is only shown to the owner.
    """
    data = profile_user.to_dict()
    is_owner = viewer_id is not None and viewer_id == profile_user.id
    if not can_view_email(profile_user, viewer_id):
        data['email'] = None
    if not is_owner:
        data.pop('emailVisibility', None)
    return data
