"""Validation rules for target URLs and codes."""

import re
from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048
CODE_MIN_LENGTH = 6
CODE_MAX_LENGTH = 8
CODE_PATTERN = re.compile(r"[A-Za-z0-9]{%d,%d}" % (CODE_MIN_LENGTH, CODE_MAX_LENGTH))


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.
    
    Args:
        url: The URL to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"
    
    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"
    
    try:
        result = urlparse(url)
        # Accessing port validates it
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"
    
    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"
    
    if not result.hostname:
        return False, "URL must have a valid host"
    
    return True, ""


def is_valid_code(code: str) -> Tuple[bool, str]:
    """Validate a caller-supplied code.
    
    Args:
        code: The code to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(code, str) or not CODE_PATTERN.fullmatch(code):
        return False, (
            f"Code must be {CODE_MIN_LENGTH}-{CODE_MAX_LENGTH} "
            "alphanumeric characters"
        )
    
    return True, ""
