import re
from typing import Any

from app.core.exceptions import ValidationError
from app.schemas.leaderboard import ScoreSubmission

DEVICE_ID_MIN_LENGTH = 6
DEVICE_ID_MAX_LENGTH = 128
NICKNAME_MIN_LENGTH = 2
NICKNAME_MAX_LENGTH = 18
SCORE_MIN = 1
SCORE_MAX = 1_000_000

TAG_PATTERN = re.compile(r"<[^>]*>")
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f]")

# Ampersand has to go first, otherwise the entities produced below get escaped again.
HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def utf16_length(text: str) -> int:
    """Length as browsers count it, where characters outside the BMP take two units."""
    return len(text.encode("utf-16-le")) // 2


def is_valid_device_id(value: Any) -> bool:
    return isinstance(value, str) and DEVICE_ID_MIN_LENGTH <= len(value) <= DEVICE_ID_MAX_LENGTH


def is_valid_score(value: Any) -> bool:
    """Check that value is a whole number within the accepted score range.

    JSON does not distinguish 100 from 100.0, so integral floats count as integers.
    Booleans never do.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        if not value.is_integer():
            return False
    elif not isinstance(value, int):
        return False
    return SCORE_MIN <= value <= SCORE_MAX


def sanitize_nickname(raw: Any) -> str:
    """Turn a raw nickname into its stored form.

    Strips tag-like markup and control characters, trims whitespace, then escapes the
    HTML-special characters so the value can be rendered verbatim by clients.
    """
    text = "" if raw is None else str(raw)
    text = TAG_PATTERN.sub("", text)
    text = CONTROL_CHARS_PATTERN.sub("", text)
    text = text.strip()

    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def validate_submission(device_id: Any, nickname: Any, score: Any) -> ScoreSubmission:
    """Validate a score submission field by field, stopping at the first bad one.

    Raises:
        ValidationError: naming the field that failed.
    """
    if not is_valid_device_id(device_id):
        raise ValidationError("deviceId", "Invalid deviceId")

    clean_nickname = sanitize_nickname(nickname)
    if not NICKNAME_MIN_LENGTH <= utf16_length(clean_nickname) <= NICKNAME_MAX_LENGTH:
        raise ValidationError(
            "nickname", f"Nickname must be {NICKNAME_MIN_LENGTH}-{NICKNAME_MAX_LENGTH} characters"
        )

    if not is_valid_score(score):
        raise ValidationError("score", f"Score must be a positive integer <= {SCORE_MAX}")

    return ScoreSubmission(device_id=device_id, nickname=clean_nickname, score=int(score))
