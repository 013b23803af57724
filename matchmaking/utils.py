import hashlib
import json
import logging
from datetime import date, datetime
from typing import Any, Iterable, FrozenSet

logger = logging.getLogger(__name__)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp_score(score: float) -> float:
    """Clamp a score to [0, 100], mapping NaN to 0."""
    if score != score:
        logger.error("Score is NaN, clamping to 0")
        return 0.0
    return clamp(float(score), 0.0, 100.0)


def normalize_labels(values: Iterable[Any]) -> FrozenSet[str]:
    """Normalize a loose list of tags into a set of stripped lowercase strings."""
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = values.split(",")
    return frozenset(
        str(v).strip().lower() for v in values
        if v is not None and str(v).strip()
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class FingerprintGenerator:
    """Utility class for generating fingerprints from data using SHA-256."""

    @staticmethod
    def generate(data: Any) -> str:
        """
        Generate a fingerprint from data using SHA-256 hash of normalized JSON.

        Sets are sorted and dates are ISO-formatted before hashing so equal
        content always yields the same fingerprint.

        Args:
            data: JSON-like value to fingerprint

        Returns:
            First 32 characters of SHA-256 hash
        """
        normalized = json.dumps(data, sort_keys=True, ensure_ascii=False, default=_json_default)
        return hashlib.sha256(normalized.encode('utf-8')).hexdigest()[:32]


def to_native_types(obj):
    """Recursively convert numpy types to native Python types for JSON serialization."""
    if obj is None:
        return None
    if hasattr(obj, 'tolist'):  # numpy array or matrix (check before scalars)
        return obj.tolist()
    if hasattr(obj, 'item'):  # numpy scalar (float32, int64, etc.)
        return obj.item()
    if isinstance(obj, dict):
        return {k: to_native_types(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_native_types(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(to_native_types(item) for item in obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj
