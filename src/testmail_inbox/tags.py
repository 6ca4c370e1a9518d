"""Random tag generation for inbox namespacing."""

import random
import string

TAG_ALPHABET = string.digits + string.ascii_lowercase


def generate_tag(length: int) -> str:
    """
    Generate a random inbox tag.

    The tag only has to be unique enough to keep test inboxes apart, so the
    process-wide ``random`` source is used rather than ``secrets``.

    Args:
        length: Number of characters, at least 1.

    Returns:
        A string of ``length`` characters drawn from ``0-9a-z``.

    Raises:
        ValueError: If length is smaller than 1.
    """
    if length < 1:
        raise ValueError(f"Tag length must be at least 1, got {length}")
    return "".join(random.choice(TAG_ALPHABET) for _ in range(length))
