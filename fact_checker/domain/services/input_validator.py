"""Structural checks on raw input text."""

from typing import Any, Optional

from pydantic import BaseModel

DEFAULT_MAX_LENGTH = 100_000


class ValidationResult(BaseModel):
    """Outcome of validating input text."""

    is_valid: bool
    error: Optional[str] = None


def validate_text(text: Any, max_length: int = DEFAULT_MAX_LENGTH) -> ValidationResult:
    """Validate raw input text before it is sent anywhere.

    Args:
        text: Candidate input (any JSON value the caller sent)
        max_length: Inclusive ceiling on the number of characters

    Returns:
        Validation result with a caller-facing error message when invalid
    """
    if text is None:
        return ValidationResult(is_valid=False, error="Input text is required")
    if not isinstance(text, str):
        return ValidationResult(is_valid=False, error="Input must be text")
    if not text.strip():
        return ValidationResult(is_valid=False, error="Input text cannot be empty")
    if len(text) > max_length:
        return ValidationResult(
            is_valid=False,
            error=f"Input text is too long (maximum {max_length} characters)",
        )
    return ValidationResult(is_valid=True)
