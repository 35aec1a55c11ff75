"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for services used by postlint.
These protocols enable loose coupling, dependency injection, and easier testing.

Protocols defined:
- LintServiceProtocol: Interface for running lint rules
- DuplicateServiceProtocol: Interface for near-duplicate detection
- LinkServiceProtocol: Interface for reference-link checking
- RenderServiceProtocol: Interface for HTML rendering
"""

from typing import List, Optional, Protocol, Tuple

import pandas as pd

from postlint.data.models import DuplicatePair, LinkCheckResult, LintIssue, Post
from postlint.utils.exceptions import PostLintError


class LintServiceProtocol(Protocol):
    """Protocol defining the interface for lint services.

    Implementations should provide methods for:
    - Checking a single parsed post
    - Checking a whole corpus, including files that failed to load
    """

    def lint_post(self, post: Post) -> List[LintIssue]:
        """Run every enabled rule over a post.

        Args:
            post: The post to check.

        Returns:
            Issues found in the post.
        """
        ...

    def lint_corpus(
        self,
        posts: List[Post],
        failures: Optional[List[Tuple[str, PostLintError]]] = None
    ) -> List[LintIssue]:
        """Lint a corpus.

        Args:
            posts: Successfully loaded posts.
            failures: (path, error) pairs for files that failed to load.

        Returns:
            Issues sorted by path, then line.
        """
        ...


class DuplicateServiceProtocol(Protocol):
    """Protocol defining the interface for near-duplicate detection."""

    def find_duplicates(self, posts: List[Post]) -> List[DuplicatePair]:
        """Find near-duplicate pairs.

        Args:
            posts: Posts to compare.

        Returns:
            Near-duplicate pairs, most similar first.
        """
        ...


class LinkServiceProtocol(Protocol):
    """Protocol defining the interface for reference-link checking."""

    def check_links(self, posts: List[Post]) -> List[LinkCheckResult]:
        """Check every URL cited by the posts.

        Args:
            posts: Posts to scan.

        Returns:
            One result per unique URL.
        """
        ...


class RenderServiceProtocol(Protocol):
    """Protocol defining the interface for HTML rendering."""

    def render_corpus(self, posts: List[Post], out_dir: str) -> List[str]:
        """Render posts into a directory.

        Args:
            posts: Posts to render.
            out_dir: Destination directory.

        Returns:
            Paths written.
        """
        ...


class IndexServiceProtocol(Protocol):
    """Protocol defining the interface for index export."""

    def export(self, df: pd.DataFrame, output_path: str) -> str:
        """Write the corpus index.

        Args:
            df: One row per post.
            output_path: Destination file.

        Returns:
            The path written.
        """
        ...
