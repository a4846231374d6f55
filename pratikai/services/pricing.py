"""Credit pricing for assistant replies."""

import math

MINIMUM_CHARGE = 3
CHARS_PER_CREDIT = 50


def price_for(response_text: str) -> int:
    """Credits charged for a reply: one per 50 characters, never less than 3."""
    return max(MINIMUM_CHARGE, math.ceil(len(response_text) / CHARS_PER_CREDIT))
