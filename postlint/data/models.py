"""
Data Models for postlint

This module contains data classes and models used throughout the application.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from postlint.utils.helpers import split_post_filename


@dataclass
class CodeBlock:
    """A fenced code block found in a post body."""
    language: Optional[str]            # First word of the info string, None when absent
    content: str
    start_line: int                    # 1-based line of the opening fence in the file
    fence: str = "```"
    closed: bool = True


@dataclass
class Heading:
    """An ATX heading found in a post body."""
    level: int
    text: str
    line: int


@dataclass
class Post:
    """A blog post parsed from one Markdown file.

    Attributes:
        path (str): File path the post was read from.
        title (str, optional): Normalised title.
        raw_title (Any): Title exactly as found in the front matter.
        date (datetime, optional): Publication timestamp.
        categories (List[str]): Ordered (cloud vendor, service name) pair.
        tags (List[str]): De-duplicated tags in order of first appearance.
        mermaid (bool, optional): Diagram rendering toggle.
        toc (bool, optional): Table-of-contents toggle.
        body (str): Markdown after the front-matter block.
        front_matter (dict): The raw parsed YAML mapping.
        body_line_offset (int): File line number where the body starts.
        key_lines (dict): File line of each top-level front-matter key.
    """
    path: str
    title: Optional[str]
    date: Optional[datetime]
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    body: str = ""
    raw_title: Any = None
    mermaid: Optional[bool] = None
    toc: Optional[bool] = None
    front_matter: Dict[str, Any] = field(default_factory=dict)
    body_line_offset: int = 1
    key_lines: Dict[str, int] = field(default_factory=dict)   # Top-level key -> file line

    @property
    def slug(self) -> str:
        """File stem without the Jekyll date prefix."""
        return split_post_filename(self.path)[1]

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    @property
    def vendor(self) -> Optional[str]:
        return self.categories[0] if self.categories else None

    @property
    def service(self) -> Optional[str]:
        return self.categories[1] if len(self.categories) > 1 else None


@dataclass
class LintIssue:
    """A single problem reported by a lint rule."""
    path: str
    rule: str                          # Rule code, e.g. 'FM003'
    severity: str                      # 'error', 'warning' or 'info'
    message: str
    line: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "rule": self.rule,
            "severity": self.severity,
            "message": self.message,
            "line": self.line,
        }

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}" if self.line else self.path
        return f"{location}: {self.severity} {self.rule} {self.message}"


@dataclass
class DuplicatePair:
    """Two posts judged to be near-duplicates."""
    first: str
    second: str
    title_similarity: float
    body_similarity: float
    reason: str                        # 'title', 'body' or 'title+body'


@dataclass
class LinkCheckResult:
    """Outcome of checking one referenced URL."""
    url: str
    status: Any                        # HTTP status code, or error text when the request failed
    ok: bool
    posts: List[str] = field(default_factory=list)
