# Utility modules for TasteBuddy
from .errors import (
    APIError, ValidationError, AuthenticationError, PermissionDeniedError,
    NotFoundError, ConflictError, PaymentError, StorageError
)
from .image_handler import validate_and_process_image, validate_uploaded_file, ImageValidationError
from .sanitizer import sanitize_text, sanitize_multiline, sanitize_url, normalize_tag
