"""
Upload Routes

Image uploads to object storage. Files are validated and re-encoded
with Pillow before they leave the server.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user

from models import db
from services.storage import upload_image, delete_image
from utils.errors import ValidationError
from utils.image_handler import validate_uploaded_file, ImageValidationError
from utils.request_helpers import success

logger = logging.getLogger(__name__)

uploads_bp = Blueprint('uploads', __name__, url_prefix='/api/upload')


def _process_upload(prefix, max_size):
    """Validate the multipart 'image' field and upload it under prefix."""
    file = request.files.get('image')
    if file is None or not file.filename:
        raise ValidationError('No image provided')

    try:
        image = validate_uploaded_file(file, max_width=max_size, max_height=max_size)
    except ImageValidationError as e:
        raise ValidationError(str(e))

    stored = upload_image(
        image['data'], image['content_type'], image['extension'], prefix=prefix,
        metadata={'user-id': current_user.id, 'original-name': image['original_name']},
    )
    return {
        'url': stored['url'],
        'filename': stored['key'].rsplit('/', 1)[-1],
        'size': image['size'],
        'type': image['content_type'],
        'width': image['width'],
        'height': image['height'],
    }


@uploads_bp.route('/recipe-image', methods=['POST'])
@login_required
def upload_recipe_image():
    data = _process_upload('recipes', 2048)
    logger.info('User %s uploaded recipe image %s', current_user.id, data['filename'])
    return success(data, message='Image uploaded')


@uploads_bp.route('/profile-photo', methods=['POST'])
@login_required
def upload_profile_photo():
    data = _process_upload('profiles', 1024)

    previous = current_user.image
    current_user.image = data['url']
    db.session.commit()
    if previous and previous != data['url']:
        delete_image(previous)

    logger.info('User %s updated their profile photo', current_user.id)
    return success(data, message='Profile photo updated')
