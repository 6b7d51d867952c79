"""
Input validation and sanitization utilities.
"""

import re
import html
from typing import List, Optional


class StringSanitizer:
    """
    String sanitization for user-supplied text.
    """

    # Control characters to strip (except newlines, tabs, carriage returns)
    CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    @classmethod
    def _base_sanitize(cls, value: str, escape_html: bool = True) -> str:
        """
        Strip control characters and surrounding whitespace, optionally
        escaping HTML.
        """
        value = cls.CONTROL_CHARS_PATTERN.sub("", value)
        value = value.strip()
        if escape_html:
            value = html.escape(value)
        return value

    @classmethod
    def sanitize_string(cls, value: str, allow_html: bool = False) -> str:
        """
        Sanitize free text shown back to other users (display names).

        Args:
            value: String to sanitize
            allow_html: Whether to keep HTML unescaped (default: False)

        Returns:
            Sanitized string
        """
        return cls._base_sanitize(value, escape_html=not allow_html)

    @classmethod
    def sanitize_question_content(cls, value: str) -> str:
        """
        Sanitize question text and options.

        Comparison operators are common in question content ("3 < 5"), so
        HTML is not escaped here; clients render it as text.
        """
        return cls._base_sanitize(value, escape_html=False)


class TextValidator:
    """
    Text validation utilities for schema field validation.
    """

    # Opaque ids from the identity provider: letters, digits and _ - . : @
    USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-.:@]{1,128}$")

    @staticmethod
    def validate_non_empty_text(value: str, field_name: str = "Text") -> str:
        """
        Validate that text is not empty or whitespace-only.

        Returns:
            The stripped value if valid

        Raises:
            ValueError: If the text is empty or whitespace-only
        """
        stripped = value.strip()
        if not stripped:
            raise ValueError(f"{field_name} cannot be empty or whitespace-only")
        return stripped

    @staticmethod
    def validate_non_negative_number(
        value: Optional[float], field_name: str = "Value"
    ) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError(f"{field_name} cannot be negative")
        return value

    @classmethod
    def validate_user_id(cls, value: str) -> str:
        """
        Validate an opaque user id.

        Raises:
            ValueError: If the id is empty, too long, or has other characters
        """
        value = value.strip()
        if not cls.USER_ID_PATTERN.match(value):
            raise ValueError(
                "User ID must be 1-128 characters of letters, digits, or _ - . : @"
            )
        return value

    @staticmethod
    def validate_answer_options(
        options: List[str], expected_count: int = 4
    ) -> List[str]:
        """
        Validate multiple choice options: exact count, non-empty, distinct.

        Returns:
            Sanitized options in their original order
        """
        if len(options) != expected_count:
            raise ValueError(f"Exactly {expected_count} answer options are required")

        cleaned = []
        for index, option in enumerate(options):
            option = StringSanitizer.sanitize_question_content(option)
            if not option:
                raise ValueError(f"Answer option {index} cannot be empty")
            cleaned.append(option)

        if len({o.casefold() for o in cleaned}) != len(cleaned):
            raise ValueError("Answer options must be distinct")
        return cleaned
