"""
Input validation and sanitization utilities.
"""

from typing import Any, Iterable, List, Mapping, Sequence


# Wire names of the fields every adoption request must carry
REQUIRED_FIELDS: Sequence[str] = (
    "fullname",
    "age",
    "email",
    "phoneNumber",
    "address",
    "zipCode",
    "hasPet",
    "livingPlace",
    "interestedIn",
)


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input to prevent injection attacks.

    Args:
        value: Input string
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    # Remove null bytes
    value = value.replace("\x00", "")

    # Truncate to max length
    value = value[:max_length]

    return value.strip()


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return sanitize_string(email, 320).lower()


def normalize_zip_code(value: Any) -> int:
    """
    Normalize a postal code to its numeric value.

    "07000", " 7000" and 7000 all compare equal.

    Args:
        value: Postal code as int or numeric string

    Returns:
        Integer postal code

    Raises:
        ValueError: If the value is not a non-negative number
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid zip code: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid zip code: {value}")
        return value

    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isdigit():
            return int(cleaned)

    raise ValueError(f"Invalid zip code: {value!r}")


def is_blank(value: Any) -> bool:
    """
    Check whether a field value counts as empty.

    Only missing values and whitespace-only strings are blank; False, 0 and
    empty lists are legitimate values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def find_missing_fields(
    data: Mapping[str, Any],
    required: Iterable[str] = REQUIRED_FIELDS
) -> List[str]:
    """Return the required field names absent from ``data``."""
    return [field for field in required if field not in data]


def find_empty_fields(
    data: Mapping[str, Any],
    required: Iterable[str] = REQUIRED_FIELDS
) -> List[str]:
    """Return the required field names present in ``data`` with a blank value."""
    return [field for field in required if field in data and is_blank(data[field])]


def dedupe_ids(ids: Iterable[int]) -> List[int]:
    """Remove duplicate ids, keeping first occurrences in order."""
    seen = set()
    unique = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> List[str]:
    """
    Flatten pydantic/FastAPI validation errors into ``"location: message"`` lines.

    Args:
        errors: Items of ``ValidationError.errors()`` or ``RequestValidationError.errors()``

    Returns:
        One readable line per error
    """
    return [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid value')}"
        for err in errors
    ]
