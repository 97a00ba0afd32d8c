"""
Storage Service

Uploads and deletes images in Backblaze B2 through its S3-compatible API.
"""

import logging
import time
import uuid
from io import BytesIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

from utils.errors import StorageError

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ('B2_ENDPOINT', 'B2_ACCESS_KEY_ID', 'B2_SECRET_ACCESS_KEY', 'B2_BUCKET_NAME', 'B2_PUBLIC_URL')


def is_configured():
    return all(current_app.config.get(name) for name in REQUIRED_SETTINGS)


def build_s3_client():
    """Create an S3 client pointed at the B2 endpoint."""
    if not is_configured():
        missing = [name for name in REQUIRED_SETTINGS if not current_app.config.get(name)]
        raise StorageError(f"Image storage is not configured (missing {', '.join(missing)})")
    return boto3.client(
        service_name='s3',
        endpoint_url=current_app.config['B2_ENDPOINT'],
        region_name=current_app.config['B2_REGION'],
        aws_access_key_id=current_app.config['B2_ACCESS_KEY_ID'],
        aws_secret_access_key=current_app.config['B2_SECRET_ACCESS_KEY'],
    )


def generate_key(prefix, extension):
    """Object key like 'recipes/1718000000000-1a2b3c4d.jpg'."""
    timestamp = int(time.time() * 1000)
    return f'{prefix}/{timestamp}-{uuid.uuid4().hex[:8]}{extension}'


def public_url(key):
    return f"{current_app.config['B2_PUBLIC_URL'].rstrip('/')}/{key}"


def key_from_url(url):
    """
    Extract the object key from one of our public URLs.

    Returns:
        The key, or None if the URL does not point at our bucket
    """
    base = current_app.config.get('B2_PUBLIC_URL', '').rstrip('/')
    if not url or not base or not url.startswith(base + '/'):
        return None
    return url[len(base) + 1:].split('?', 1)[0] or None


def upload_image(data, content_type, extension, prefix='recipes', metadata=None):
    """
    Upload image bytes as a public object.

    Args:
        data: Image bytes
        content_type: MIME type to store with the object
        extension: File extension including the dot
        prefix: Key prefix ('recipes', 'profiles', 'meals')
        metadata: Optional string metadata stored on the object

    Returns:
        dict with key and url

    Raises:
        StorageError: If storage is misconfigured or the upload fails
    """
    client = build_s3_client()
    key = generate_key(prefix, extension)
    extra_args = {
        'ContentType': content_type,
        'ACL': 'public-read',
        'Metadata': {name: str(value) for name, value in (metadata or {}).items()},
    }
    try:
        client.upload_fileobj(BytesIO(data), current_app.config['B2_BUCKET_NAME'], key, ExtraArgs=extra_args)
    except (BotoCoreError, ClientError) as e:
        logger.error('B2 upload failed for %s: %s', key, e)
        raise StorageError('Failed to upload image')

    logger.info('Uploaded %s (%d bytes)', key, len(data))
    return {'key': key, 'url': public_url(key)}


def delete_image(url):
    """
    Delete an object by its public URL.

    Returns:
        True if a delete was issued, False if the URL is not ours or it failed
    """
    key = key_from_url(url)
    if key is None:
        return False
    try:
        client = build_s3_client()
        client.delete_object(Bucket=current_app.config['B2_BUCKET_NAME'], Key=key)
    except (BotoCoreError, ClientError, StorageError) as e:
        logger.warning('Failed to delete %s from B2: %s', key, e)
        return False
    logger.info('Deleted %s', key)
    return True



def image_exists(url):
    """True if the object behind one of our public URLs exists (HEAD request)."""
    key = key_from_url(url)
    if key is None:
        return False
    try:
        client = build_s3_client()
        client.head_object(Bucket=current_app.config['B2_BUCKET_NAME'], Key=key)
    except (BotoCoreError, ClientError, StorageError) as e:
        logger.info('B2 object %s not available: %s', key, e)
        return False
    return True


def check_connection():
    """True if the configured bucket is reachable with the configured credentials."""
    try:
        client = build_s3_client()
        client.head_bucket(Bucket=current_app.config['B2_BUCKET_NAME'])
    except (BotoCoreError, ClientError, StorageError) as e:
        logger.warning('B2 connection check failed: %s', e)
        return False
    return True
