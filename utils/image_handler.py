"""
Image Validation and Processing Module

Validates uploaded images before they are sent to object storage.
Checks declared type, size and magic bytes, then decodes and re-encodes
the image through Pillow to strip metadata and potential exploits.
"""

import os
from io import BytesIO

from PIL import Image


class ImageValidationError(Exception):
    """Raised when an image fails validation."""
    pass


# Declared MIME types accepted from clients
ALLOWED_CONTENT_TYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/webp'}

# Pillow format name -> (content type, extension)
FORMAT_OUTPUT = {
    'JPEG': ('image/jpeg', '.jpg'),
    'PNG': ('image/png', '.png'),
    'WEBP': ('image/webp', '.webp'),
}

# Maximum upload size (5MB)
MAX_FILE_SIZE = 5 * 1024 * 1024

# Maximum image dimensions (prevent decompression bombs)
MAX_WIDTH = 8192
MAX_HEIGHT = 8192


def detect_image_type(data):
    """
    Identify an image from its leading bytes.

    Returns:
        'image/jpeg', 'image/png', 'image/webp' or None
    """
    if data[:2] == b'\xff\xd8':
        return 'image/jpeg'
    if data[:2] == b'\x89\x50':
        return 'image/png'
    if data[:2] == b'\x52\x49' and data[8:12] == b'WEBP':
        return 'image/webp'
    return None


def validate_and_process_image(image_data, content_type=None, max_width=2048, max_height=2048):
    """
    Validate and re-encode an image.

    Args:
        image_data: Raw image bytes or file-like object
        content_type: MIME type declared by the client, if any
        max_width: Maximum width to resize to (default 2048)
        max_height: Maximum height to resize to (default 2048)

    Returns:
        dict with data (bytes), content_type, extension, width, height, size

    Raises:
        ImageValidationError: If the image is invalid or potentially malicious
    """
    if content_type and content_type.lower() not in ALLOWED_CONTENT_TYPES:
        raise ImageValidationError(
            f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )

    if isinstance(image_data, bytes):
        content = image_data
    else:
        image_data.seek(0)
        content = image_data.read()

    if not content:
        raise ImageValidationError('Image file is empty')
    if len(content) > MAX_FILE_SIZE:
        raise ImageValidationError(
            f'File size too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB'
        )
    if detect_image_type(content) is None:
        raise ImageValidationError('File content does not look like a JPEG, PNG or WebP image')

    image_buffer = BytesIO(content)

    try:
        img = Image.open(image_buffer)

        # Verify it's actually an image (detects corrupted/fake files)
        img.verify()

        # Re-open after verify (verify() leaves file in uncertain state)
        image_buffer.seek(0)
        img = Image.open(image_buffer)

        if img.format not in FORMAT_OUTPUT:
            raise ImageValidationError(
                f"Invalid image format: {img.format}. "
                f"Allowed formats: {', '.join(FORMAT_OUTPUT)}"
            )
        output_format = img.format

        width, height = img.size
        if width > MAX_WIDTH or height > MAX_HEIGHT:
            raise ImageValidationError(
                f"Image dimensions too large: {width}x{height}. "
                f"Maximum: {MAX_WIDTH}x{MAX_HEIGHT}"
            )

        if width > max_width or height > max_height:
            img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

        # JPEG has no alpha channel
        if output_format == 'JPEG' and img.mode not in ('RGB', 'L'):
            img = img.convert('RGB')

        output = BytesIO()
        save_kwargs = {'quality': 85}
        if output_format == 'JPEG':
            save_kwargs['optimize'] = True
        img.save(output, output_format, **save_kwargs)
        data = output.getvalue()

        out_type, extension = FORMAT_OUTPUT[output_format]
        return {
            'data': data,
            'content_type': out_type,
            'extension': extension,
            'width': img.size[0],
            'height': img.size[1],
            'size': len(data),
        }

    except ImageValidationError:
        raise
    except Image.DecompressionBombError:
        raise ImageValidationError("Image appears to be a decompression bomb (too large when decoded)")
    except Exception as e:
        raise ImageValidationError(f"Invalid or corrupted image: {str(e)}")


def validate_uploaded_file(file_storage, max_width=2048, max_height=2048):
    """
    Validate and process an uploaded file from Flask's request.files.

    Args:
        file_storage: werkzeug.datastructures.FileStorage object
        max_width: Maximum width to resize to
        max_height: Maximum height to resize to

    Returns:
        dict as returned by validate_and_process_image, plus original_name

    Raises:
        ImageValidationError: If the image is invalid
    """
    if not file_storage or not file_storage.filename or not file_storage.filename.strip():
        raise ImageValidationError('File name is required')

    result = validate_and_process_image(file_storage.stream, file_storage.mimetype,
                                        max_width, max_height)
    result['original_name'] = os.path.basename(file_storage.filename)
    return result
