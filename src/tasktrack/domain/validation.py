"""Validation rules for category names and task titles.

Both validators are pure: they trim their input, check it, and always return
a :class:`ValidationOutcome`, success or failure, never ``None``.
"""

from __future__ import annotations

from collections.abc import Container
from dataclasses import dataclass
from enum import StrEnum

CATEGORY_NAME_MIN = 2
CATEGORY_NAME_MAX = 40
TASK_TITLE_MIN = 2
TASK_TITLE_MAX = 140


class Reason(StrEnum):
    """Failure reason codes surfaced to callers as ``ServiceError.code``."""

    INVALID_LENGTH = "INVALID_LENGTH"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of a validation check.

    ``value`` carries the trimmed input on success so callers store exactly
    what was validated.
    """

    ok: bool
    value: str = ""
    reason: Reason | None = None
    message: str = ""

    @classmethod
    def success(cls, value: str) -> ValidationOutcome:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: Reason, message: str) -> ValidationOutcome:
        return cls(ok=False, reason=reason, message=message)


def _trimmed(raw: object) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def validate_category_name(
    name: object,
    existing_lowercase_names: Container[str] | None = None,
) -> ValidationOutcome:
    """Check a category name for length and case-insensitive uniqueness.

    The caller excludes the category being renamed from
    *existing_lowercase_names*.
    """
    trimmed = _trimmed(name)
    if not CATEGORY_NAME_MIN <= len(trimmed) <= CATEGORY_NAME_MAX:
        return ValidationOutcome.failure(
            Reason.INVALID_LENGTH,
            f"{CATEGORY_NAME_MIN} to {CATEGORY_NAME_MAX} symbols",
        )
    if existing_lowercase_names and trimmed.lower() in existing_lowercase_names:
        return ValidationOutcome.failure(Reason.DUPLICATE_NAME, "Category already exists")
    return ValidationOutcome.success(trimmed)


def validate_task_title(title: object) -> ValidationOutcome:
    """Check a task title for length."""
    trimmed = _trimmed(title)
    if not TASK_TITLE_MIN <= len(trimmed) <= TASK_TITLE_MAX:
        return ValidationOutcome.failure(
            Reason.INVALID_LENGTH,
            f"{TASK_TITLE_MIN} to {TASK_TITLE_MAX} symbols",
        )
    return ValidationOutcome.success(trimmed)
