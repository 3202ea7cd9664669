"""Identifier generation and pattern checks.

IDs have the shape ``{prefix}_{base36 ms timestamp}_{6 base36 random chars}``,
e.g. ``cat_lx2k9q0a_4f8z1c``. The timestamp keeps ids roughly sortable and
traceable in logs; the random tail keeps ids created within the same
millisecond distinct.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import random
import re
import string
import time

CATEGORY_PREFIX = "cat"
TASK_PREFIX = "task"

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 6

ID_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<prefix>.+)_(?P<stamp>[0-9a-z]+)_(?P<rand>[0-9a-z]{6})$"
)

_rng = random.SystemRandom()


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base36."""
    if value <= 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def uid(prefix: object) -> str:
    """Generate a unique id for a category or task.

    Never raises: *prefix* is coerced with ``str()``.
    """
    stamp = to_base36(time.time_ns() // 1_000_000)
    rand = "".join(_rng.choice(_BASE36_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{prefix}_{stamp}_{rand}"


def is_valid_uid(value: str, prefix: str | None = None) -> bool:
    """Check whether *value* looks like an id produced by :func:`uid`."""
    match = ID_PATTERN.match(value)
    if match is None:
        return False
    return prefix is None or match.group("prefix") == prefix
