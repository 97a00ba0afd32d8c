"""
Input Sanitization Module

Cleans user supplied text and URLs before they are stored.
Output is JSON rendered by the client, so text is normalized
rather than HTML-escaped.
"""

import re
from urllib.parse import urlparse

# Control characters except tab and newline
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b-\x1f\x7f-\x9f]')


def sanitize_text(text, max_length=10000):
    """
    Sanitize a single-line text value.

    Removes control characters, collapses runs of whitespace and trims.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = _CONTROL_CHARS.sub('', text)
    text = re.sub(r'\s+', ' ', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_multiline(text, max_length=50000):
    """
    Sanitize free text such as instructions or descriptions.

    Preserves newlines for formatting. Normalizes Windows line endings.

    Args:
        text: The text to sanitize
        max_length: Maximum allowed length (default 50000)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = _CONTROL_CHARS.sub('', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_url(url):
    """
    Sanitize a URL by rejecting dangerous schemes.

    Prevents javascript:, data:, vbscript:, and other dangerous URL schemes
    that could execute code when used in href or src attributes.

    Args:
        url: The URL to validate (can be None)

    Returns:
        The URL if safe, empty string if unsafe or invalid
    """
    if not url or not isinstance(url, str):
        return ''

    url = url.strip()

    dangerous_schemes = {
        'javascript', 'data', 'vbscript', 'file',
        'blob', 'about', 'chrome', 'moz-extension'
    }

    try:
        parsed = urlparse(url)
    except ValueError:
        return ''

    scheme = parsed.scheme.lower()

    # Only allow http and https (relative URLs have no scheme)
    if scheme not in ('http', 'https', ''):
        return ''

    url_lower = url.lower()
    for dangerous in dangerous_schemes:
        if dangerous + ':' in url_lower:
            return ''
        # URL-encoded variants such as j%61v%61script
        if dangerous.replace('a', '%61') in url_lower:
            return ''

    return url


def normalize_tag(tag, max_length=50):
    """Lowercase, trim and length-limit a recipe tag. Returns '' for junk."""
    if not isinstance(tag, str):
        return ''
    tag = sanitize_text(tag, max_length=max_length).lower()
    return tag
