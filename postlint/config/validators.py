"""
Configuration Validation for postlint

This module contains configuration validation logic.
Kept apart from settings.py for better separation of concerns.
"""

import re

from postlint.utils.exceptions import ConfigurationError
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

SEVERITY_LEVELS = ("info", "warning", "error")


def validate_settings():
    """
    Validate that all settings are properly configured.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from postlint.config import settings
    from postlint.services.lint_service import RULES

    errors = []

    if not settings.REQUIRED_FRONT_MATTER_KEYS:
        errors.append("REQUIRED_FRONT_MATTER_KEYS must not be empty")

    overlap = set(settings.REQUIRED_FRONT_MATTER_KEYS) & set(settings.OPTIONAL_FRONT_MATTER_KEYS)
    if overlap:
        errors.append(f"Keys cannot be both required and optional: {', '.join(sorted(overlap))}")

    unknown_rules = [rule for rule in settings.DISABLED_RULES if rule not in RULES]
    if unknown_rules:
        logger.warning(f"Ignoring unknown rule codes in POSTLINT_DISABLED_RULES: {', '.join(unknown_rules)}")

    if settings.DEFAULT_MIN_SEVERITY not in SEVERITY_LEVELS:
        errors.append(f"POSTLINT_MIN_SEVERITY must be one of {', '.join(SEVERITY_LEVELS)}, "
                      f"got {settings.DEFAULT_MIN_SEVERITY}")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("MIN_BODY_WORD_COUNT", settings.MIN_BODY_WORD_COUNT, 0, 100000),
        ("MIN_KEYWORD_LENGTH", settings.MIN_KEYWORD_LENGTH, 1, 20),
        ("TITLE_SIMILARITY_THRESHOLD", settings.TITLE_SIMILARITY_THRESHOLD, 0.0, 1.0),
        ("BODY_SIMILARITY_THRESHOLD", settings.BODY_SIMILARITY_THRESHOLD, 0.0, 1.0),
        ("SHINGLE_SIZE", settings.SHINGLE_SIZE, 1, 50),
        ("LINK_CHECK_WORKERS", settings.LINK_CHECK_WORKERS, 1, 100),
        ("LINK_CHECK_RETRIES", settings.LINK_CHECK_RETRIES, 1, 10),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    # Validate timeout values are positive
    timeout_settings = [
        ("LINK_CHECK_TIMEOUT", settings.LINK_CHECK_TIMEOUT),
    ]

    for name, value in timeout_settings:
        if value <= 0:
            errors.append(f"{name} must be positive, got {value}")

    for section, pattern in settings.TEMPLATE_SECTION_PATTERNS.items():
        try:
            re.compile(pattern)
        except re.error as e:
            errors.append(f"Template section pattern for '{section}' is invalid: {e}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration.
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from postlint.config import settings

    return {
        "corpus": {
            "posts_dir": settings.POSTS_DIR,
            "extensions": list(settings.POST_EXTENSIONS),
        },
        "front_matter": {
            "required": list(settings.REQUIRED_FRONT_MATTER_KEYS),
            "optional": list(settings.OPTIONAL_FRONT_MATTER_KEYS),
        },
        "lint_settings": {
            "disabled_rules": list(settings.DISABLED_RULES),
            "min_body_words": settings.MIN_BODY_WORD_COUNT,
            "min_severity": settings.DEFAULT_MIN_SEVERITY,
        },
        "duplicate_settings": {
            "title_threshold": settings.TITLE_SIMILARITY_THRESHOLD,
            "body_threshold": settings.BODY_SIMILARITY_THRESHOLD,
            "shingle_size": settings.SHINGLE_SIZE,
        },
        "link_settings": {
            "workers": settings.LINK_CHECK_WORKERS,
            "timeout": settings.LINK_CHECK_TIMEOUT,
        },
    }
