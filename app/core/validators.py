"""Input validation helpers shared by onboarding and settings."""

import re

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.config import settings
from app.core.exceptions import ValidationException

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9-]+$")
DOMAIN_PATTERN = re.compile(r"^(?=.{4,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")

_email_adapter = TypeAdapter(EmailStr)

SUBDOMAIN_MIN_LENGTH = 3
SUBDOMAIN_MAX_LENGTH = 63

# System labels that can never be claimed by a restaurant
RESERVED_SUBDOMAINS = frozenset(
    {
        "www", "admin", "api", "app", "dashboard", "mail", "smtp", "ftp",
        "webmail", "support", "help", "blog", "forum", "shop", "store", "cdn",
        "static", "assets", "media", "files", "download", "upload", "test",
        "staging", "dev", "demo", "beta", "alpha", "prod", "production",
        "localhost", "nowaiter", "menu", "order", "checkout", "payment",
        "billing", "account", "settings", "profile", "login", "signup",
        "register", "auth", "oauth", "sso",
    }
)


def normalize_subdomain(subdomain: str | None) -> str:
    """
    Lowercase and validate a subdomain label.

    Raises:
        ValidationException: If missing, badly formed, or of invalid length
    """
    if not subdomain or not subdomain.strip():
        raise ValidationException("Subdomain is required")

    value = subdomain.strip().lower()
    if not SUBDOMAIN_PATTERN.match(value):
        raise ValidationException(
            "Subdomain can only contain lowercase letters, numbers, and hyphens"
        )
    if not SUBDOMAIN_MIN_LENGTH <= len(value) <= SUBDOMAIN_MAX_LENGTH:
        raise ValidationException(
            f"Subdomain must be between {SUBDOMAIN_MIN_LENGTH} and {SUBDOMAIN_MAX_LENGTH} characters"
        )
    return value


def is_reserved_subdomain(subdomain: str) -> bool:
    return subdomain.lower() in RESERVED_SUBDOMAINS


def normalize_email(email: str | None) -> str:
    """
    Lowercase and validate an email address.

    Raises:
        ValidationException: If missing or malformed
    """
    if not email or not email.strip():
        raise ValidationException("Email is required")

    try:
        value = _email_adapter.validate_python(email.strip())
    except ValidationError:
        raise ValidationException("Invalid email format")
    return value.lower()


def normalize_custom_domain(domain: str) -> str:
    """
    Lowercase and validate a custom domain (no scheme, no port).

    Names on the platform domain belong to the subdomain resolver and
    cannot be claimed as custom domains.
    """
    value = domain.strip().lower().rstrip(".")
    if not DOMAIN_PATTERN.match(value):
        raise ValidationException("Invalid custom domain")

    platform_domain = settings.PLATFORM_DOMAIN.lower().rstrip(".")
    if value == platform_domain or value.endswith(f".{platform_domain}"):
        raise ValidationException("Custom domain cannot be on the platform domain")
    return value
