"""Field rules for incoming requests.

Each ``*_violations`` function returns every rule the payload breaks, in
field order, so that a client sees all problems at once. ``ensure_valid``
turns a non-empty list into a :class:`~contactbook.errors.ValidationError`.
Use-cases call these before touching storage.

Maximum lengths match the column sizes in :mod:`contactbook.models`.
"""

from email_validator import EmailNotValidError, validate_email

from .errors import ValidationError

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6
PHONE_MIN_LENGTH = 3

MAX_LENGTHS = {
    "username": 100,
    "email": 255,
    "first_name": 100,
    "last_name": 100,
    "phone": 50,
    "street": 255,
    "city": 100,
    "province": 100,
    "postal_code": 20,
    "country": 100,
}


def is_valid_email(value: str) -> bool:
    """Return ``True`` if ``value`` is a syntactically valid email address."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _too_long(field: str, value: str | None) -> list[str]:
    limit = MAX_LENGTHS[field]
    if value is not None and len(value) > limit:
        return [f"{field}: must be at most {limit} characters"]
    return []


def registration_violations(username: str, email: str, password: str) -> list[str]:
    """Check a registration payload.

    Args:
        username (str): At least ``USERNAME_MIN_LENGTH`` characters.
        email (str): A syntactically valid address.
        password (str): At least ``PASSWORD_MIN_LENGTH`` characters, no NUL.

    Returns:
        list[str]: Violations, empty when the payload is acceptable.
    """
    violations = []
    if len(username or "") < USERNAME_MIN_LENGTH:
        violations.append(
            f"username: must be at least {USERNAME_MIN_LENGTH} characters"
        )
    violations += _too_long("username", username)
    if not is_valid_email(email or ""):
        violations.append("email: invalid email format")
    violations += _too_long("email", email)
    if len(password or "") < PASSWORD_MIN_LENGTH:
        violations.append(
            f"password: must be at least {PASSWORD_MIN_LENGTH} characters"
        )
    if "\x00" in (password or ""):
        violations.append("password: must not contain NUL characters")
    return violations


def contact_violations(fields: dict, partial: bool = False) -> list[str]:
    """Check contact fields.

    Args:
        fields (dict): Field values; ``None`` means not supplied.
        partial (bool): When ``True`` a missing first name is allowed, but a
            supplied one must still be non-empty.
    """
    violations = []
    first_name = fields.get("first_name")
    if first_name is None:
        if not partial:
            violations.append("first_name: first name is required")
    elif not first_name.strip():
        violations.append("first_name: first name is required")
    violations += _too_long("first_name", first_name)
    violations += _too_long("last_name", fields.get("last_name"))
    email = fields.get("email")
    if email is not None and not is_valid_email(email):
        violations.append("email: invalid email format")
    violations += _too_long("email", email)
    phone = fields.get("phone")
    if phone is not None and len(phone) < PHONE_MIN_LENGTH:
        violations.append(
            f"phone: must be at least {PHONE_MIN_LENGTH} characters"
        )
    violations += _too_long("phone", phone)
    return violations


def address_violations(fields: dict, partial: bool = False) -> list[str]:
    """Check address fields.

    Args:
        fields (dict): Field values; ``None`` means not supplied.
        partial (bool): When ``True`` a missing country is allowed, but a
            supplied one must still be non-empty.
    """
    violations = []
    for field in ("street", "city", "province", "postal_code"):
        violations += _too_long(field, fields.get(field))
    country = fields.get("country")
    if country is None:
        if not partial:
            violations.append("country: country is required")
    elif not country.strip():
        violations.append("country: country is required")
    violations += _too_long("country", country)
    return violations


def ensure_valid(violations: list[str]) -> None:
    """Raise :class:`ValidationError` if ``violations`` is not empty."""
    if violations:
        raise ValidationError(violations)
