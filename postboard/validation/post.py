from typing import Dict, Tuple

from ..config import POST_TEXT_MIN_LENGTH, POST_TEXT_MAX_LENGTH, NAME_MAX_LENGTH
from ..models.post import PostInput


def validate_post_input(body: PostInput) -> Tuple[Dict[str, str], bool]:
    """Check a post or comment body.

    Returns the field-error mapping and whether it is empty.
    """
    errors: Dict[str, str] = {}

    text = body.text or ""
    if not text.strip():
        errors["text"] = "Text field is required"
    elif not POST_TEXT_MIN_LENGTH <= len(text) <= POST_TEXT_MAX_LENGTH:
        errors["text"] = (
            f"Post must be between {POST_TEXT_MIN_LENGTH} and {POST_TEXT_MAX_LENGTH} characters"
        )

    if body.name is not None and len(body.name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name must not exceed {NAME_MAX_LENGTH} characters"

    return errors, not errors
