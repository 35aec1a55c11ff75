"""
Shared Test Fixtures for postlint

This module provides common fixtures used across all test modules.
Fixtures include mocks for settings, log capture, HTTP responses,
and factories for post files and Post objects.
"""

import pytest
from unittest.mock import MagicMock, patch
from datetime import datetime
from typing import Optional, Dict, List
import logging
import textwrap

from postlint.data.models import Post


# =============================================================================
# Sample Content
# =============================================================================

FULL_BODY = textwrap.dedent("""\
    ## Introduction

    Amazon Textract raises ConflictException when two requests try to change the
    same resource at the same time. This post walks through what the exception
    means, why it happens, and how to deal with it in application code.

    ## What is ConflictException?

    ConflictException is returned by the service when the requested operation
    conflicts with the current state of the target resource.

    ## Common Causes

    - Concurrent updates to the same adapter
    - Creating a resource whose name is already taken

    ## Handling the Exception

    Catch the exception, inspect the current state, and retry with backoff.

    ## Code Examples

    ```python
    import boto3

    client = boto3.client("textract")
    ```

    ## Conclusion

    Conflicts are usually transient and safe to retry.

    ## References

    - [Textract API Reference](https://docs.aws.amazon.com/textract/latest/dg/API_Reference.html)
    """)

FULL_FRONT_MATTER = textwrap.dedent("""\
    ---
    title: "Understanding ConflictException in Amazon Textract"
    date: 2023-08-14 10:00:00 +0800
    categories: [AWS, Textract]
    tags: [textract, exceptions, aws-sdk]
    mermaid: true
    toc: true
    ---
    """)


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """
    Mock the settings module with test configuration values.

    Usage:
        def test_something(mock_settings):
            mock_settings.MIN_BODY_WORD_COUNT = 10
            # ... test code

    Returns:
        MagicMock: A mock settings object with default test values.
    """
    with patch('postlint.config.settings') as mock_settings_module:
        mock_settings_module.POSTS_DIR = "_posts"
        mock_settings_module.POST_EXTENSIONS = (".md", ".markdown")
        mock_settings_module.FILE_ENCODING = "utf-8"

        mock_settings_module.REQUIRED_FRONT_MATTER_KEYS = ["title", "date", "categories", "tags"]
        mock_settings_module.OPTIONAL_FRONT_MATTER_KEYS = ["mermaid", "toc"]
        mock_settings_module.BOOLEAN_FRONT_MATTER_KEYS = ["mermaid", "toc"]
        mock_settings_module.KNOWN_EXTRA_FRONT_MATTER_KEYS = ["layout"]
        mock_settings_module.TEMPLATE_SECTION_PATTERNS = {"Introduction": r"\bintroduction\b"}

        mock_settings_module.DISABLED_RULES = []
        mock_settings_module.MIN_BODY_WORD_COUNT = 150
        mock_settings_module.DEFAULT_MIN_SEVERITY = "info"

        mock_settings_module.MIN_KEYWORD_LENGTH = 3
        mock_settings_module.TITLE_SIMILARITY_THRESHOLD = 0.8
        mock_settings_module.BODY_SIMILARITY_THRESHOLD = 0.6
        mock_settings_module.SHINGLE_SIZE = 5

        mock_settings_module.LINK_CHECK_WORKERS = 4
        mock_settings_module.LINK_CHECK_TIMEOUT = 5
        mock_settings_module.LINK_CHECK_RETRIES = 2
        mock_settings_module.LINK_CHECK_RETRY_DELAY = 0

        yield mock_settings_module


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture postlint log records for assertion in tests.

    The postlint logger does not propagate to the root logger, so the
    capturing handler is attached to it directly.

    Returns:
        list: A list that will contain captured log records.
    """
    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    package_logger = logging.getLogger("postlint")
    original_level = package_logger.level
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)

    yield handler.records

    package_logger.removeHandler(handler)
    package_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=404)

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(status_code: int = 200, url: str = 'https://example.com') -> MagicMock:
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.url = url
        mock_response.ok = 200 <= status_code < 300
        return mock_response

    return _create_response


# =============================================================================
# Post Factories
# =============================================================================

@pytest.fixture
def post_text():
    """
    Factory for full post file contents.

    Usage:
        text = post_text(front_matter="title: x\\n", body="Hello")

    Returns:
        callable: Builds '---' delimited front matter followed by a body.
    """
    def _create(front_matter: Optional[str] = None, body: Optional[str] = None) -> str:
        if front_matter is None:
            return FULL_FRONT_MATTER + (FULL_BODY if body is None else body)
        return "---\n" + front_matter + "---\n" + (FULL_BODY if body is None else body)

    return _create


@pytest.fixture
def write_post(tmp_path):
    """
    Factory writing post files into a temporary corpus directory.

    Usage:
        path = write_post("2023-08-14-conflict.md", text)

    Returns:
        callable: Writes a file under tmp_path/_posts and returns its path.
    """
    posts_dir = tmp_path / "_posts"
    posts_dir.mkdir()

    def _write(name: str, text: str) -> str:
        path = posts_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    _write.directory = str(posts_dir)
    return _write


@pytest.fixture
def sample_corpus(write_post, post_text):
    """
    A small corpus: one complete post, one near-duplicate, one unrelated
    post, and one file without front matter.

    Returns:
        str: The corpus directory.
    """
    write_post("2023-08-14-textract-conflict-exception.md", post_text())
    write_post(
        "2023-08-15-textract-conflict-exception-again.md",
        post_text(
            front_matter=(
                'title: "Understanding ConflictException in Amazon Textract"\n'
                "date: 2023-08-15\n"
                "categories: [AWS, Textract]\n"
                "tags: [textract]\n"
            )
        ),
    )
    write_post(
        "2023-09-01-rds-throttling.md",
        post_text(
            front_matter=(
                "title: ThrottlingException in Amazon RDS\n"
                "date: 2023-09-01\n"
                "categories: [AWS, RDS]\n"
                "tags: [rds]\n"
            ),
            body="## Introduction\n\nRDS throttles callers that exceed their request rate.\n",
        ),
    )
    write_post("notes.md", "Just some notes without front matter.\n")
    return write_post.directory


@pytest.fixture
def make_post():
    """
    Factory for in-memory Post objects.

    Returns:
        callable: Builds a Post with sensible defaults.
    """
    def _create(
        path: str = "_posts/2023-08-14-sample.md",
        title: Optional[str] = "Understanding ConflictException in Amazon Textract",
        body: str = FULL_BODY,
        categories: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        date: Optional[datetime] = datetime(2023, 8, 14, 10, 0),
        front_matter: Optional[Dict] = None,
        mermaid: Optional[bool] = None,
    ) -> Post:
        categories = ["AWS", "Textract"] if categories is None else categories
        tags = ["textract"] if tags is None else tags
        if front_matter is None:
            front_matter = {
                "title": title,
                "date": date,
                "categories": categories,
                "tags": tags,
            }
        return Post(
            path=path,
            title=title,
            raw_title=title,
            date=date,
            categories=categories,
            tags=tags,
            body=body,
            front_matter=front_matter,
            mermaid=mermaid,
        )

    return _create
