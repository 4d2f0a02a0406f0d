import math
from datetime import datetime, timezone
from bson import ObjectId


def utcnow() -> datetime:
    # Mongo keeps millisecond precision, so drop the rest up front
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_object_id(value: str) -> ObjectId | None:
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def coerce_score(value) -> float:
    """Turn a client-supplied score into a number, falling back to 0."""
    if isinstance(value, (dict, list)):
        return 0
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(score):
        return 0
    return score
