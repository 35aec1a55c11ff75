"""
Helper Utility Module

This module provides various helper functions used throughout postlint.
"""

import os
import re
import time
from typing import Optional, Tuple
from urllib.parse import urlparse

# Jekyll post file names look like 2023-08-14-some-title.md
POST_FILENAME_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


def retry(func, max_attempts: int = 3, delay: float = 2,
          exceptions: Tuple = (Exception,), backoff: int = 2):
    """
    Retry a function multiple times if it fails.

    Args:
        func: The function to retry
        max_attempts: Maximum number of attempts
        delay: Initial delay between attempts in seconds
        exceptions: Tuple of exceptions to catch
        backoff: Multiplier for the delay between attempts

    Returns:
        The result of the function call

    Raises:
        The last exception raised by the function
    """
    attempt = 0
    while attempt < max_attempts:
        try:
            return func()
        except exceptions as e:
            attempt += 1
            if attempt == max_attempts:
                raise e

            wait_time = delay * (backoff ** (attempt - 1))
            time.sleep(wait_time)


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated


def split_post_filename(path: str) -> Tuple[Optional[str], str]:
    """
    Split a Jekyll post file name into its date prefix and slug.

    Args:
        path: File path such as _posts/2023-08-14-conflict-exception.md

    Returns:
        Tuple: ("2023-08-14", "conflict-exception"), or (None, stem) when
        the name has no date prefix
    """
    stem = os.path.splitext(os.path.basename(path))[0]
    match = POST_FILENAME_PATTERN.match(stem)
    if not match:
        return None, stem
    year, month, day, slug = match.groups()
    return f"{year}-{month}-{day}", slug


def ensure_dir_exists(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: The directory path to check/create
    """
    if not os.path.exists(directory):
        os.makedirs(directory)
