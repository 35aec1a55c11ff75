"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for data layer operations.
These protocols enable dependency injection for corpus access,
making services testable without real files on disk.

Protocols defined:
- PostSource: Interface for discovering and loading posts
"""

from typing import List, Protocol, Tuple

from postlint.data.models import Post
from postlint.utils.exceptions import PostLintError


class PostSource(Protocol):
    """Protocol defining the interface for post loading operations.

    Implementations should provide methods for:
    - Listing the post files of a corpus
    - Loading every post, collecting per-file failures instead of aborting

    This protocol abstracts file access, allowing services to work
    with any compatible backend (a directory on disk, an in-memory list, etc.).
    """

    def discover(self) -> List[str]:
        """List post file paths in a stable order.

        Returns:
            Sorted list of file paths.
        """
        ...

    def load(self) -> Tuple[List[Post], List[Tuple[str, PostLintError]]]:
        """Load all posts.

        Returns:
            Tuple of (posts, failures) where failures pairs a path with the
            error that prevented it from loading.
        """
        ...
