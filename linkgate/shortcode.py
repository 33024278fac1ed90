"""Short code generation."""

import random
import string
from typing import Optional

from .common.validators import CODE_MIN_LENGTH, CODE_MAX_LENGTH


class ShortCodeGenerator:
    """Generate random codes for links."""
    
    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9
    
    def __init__(self, default_length: int = 6, rng: Optional[random.Random] = None):
        """Initialize short code generator.
        
        Args:
            default_length: Length of generated codes (6-8)
            rng: Optional random source; seed one to make generation reproducible
        """
        if not CODE_MIN_LENGTH <= default_length <= CODE_MAX_LENGTH:
            raise ValueError(
                f"default_length must be between {CODE_MIN_LENGTH} and {CODE_MAX_LENGTH}"
            )
        self.default_length = default_length
        self.rng = rng or random.Random()
    
    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a code drawn uniformly from the base62 alphabet.
        
        Args:
            length: Length of the code (uses default if not specified)
            
        Returns:
            Random code
        """
        length = length or self.default_length
        return ''.join(self.rng.choices(self.BASE62_CHARS, k=length))
