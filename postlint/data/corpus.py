"""
Corpus Module for postlint

This module handles access to the post corpus on disk. It discovers post
files, loads them into Post objects, and tabulates post metadata with pandas.
"""

import os
from typing import List, Optional, Tuple

import pandas as pd

from postlint.config import settings
from postlint.data.models import Post
from postlint.services import front_matter_service as fm
from postlint.services import markdown_service as md
from postlint.utils.exceptions import CorpusError, PostLintError
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

INDEX_COLUMNS = [
    "path", "slug", "title", "date", "vendor", "service", "tags",
    "word_count", "code_blocks", "languages", "mermaid", "toc",
]


class Corpus:
    """A directory of Markdown posts."""

    def __init__(self, root: str, extensions: Optional[Tuple[str, ...]] = None):
        """
        Initialize the corpus.

        Args:
            root: Directory holding the posts, or a single post file
            extensions: File extensions treated as posts
        """
        self.root = root
        self.extensions = tuple(extensions or settings.POST_EXTENSIONS)

    def discover(self) -> List[str]:
        """
        List post files under the root.

        Returns:
            List[str]: Sorted file paths

        Raises:
            CorpusError: If the root does not exist
        """
        if os.path.isfile(self.root):
            return [self.root]
        if not os.path.isdir(self.root):
            raise CorpusError(f"Corpus path does not exist: {self.root}")

        paths = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            # Skip hidden directories such as .git
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in filenames:
                if filename.lower().endswith(self.extensions):
                    paths.append(os.path.join(dirpath, filename))

        logger.info(f"Discovered {len(paths)} post files under {self.root}")
        return sorted(paths)

    def load(self) -> Tuple[List[Post], List[Tuple[str, PostLintError]]]:
        """
        Load all posts, collecting failures instead of aborting.

        Returns:
            Tuple: (posts, failures) where failures pairs a path with the
            error that stopped it from loading
        """
        posts = []
        failures = []
        for path in self.discover():
            try:
                posts.append(fm.load_post(path))
            except CorpusError as e:
                logger.warning(f"Skipping {path}: {e}")
                failures.append((path, e))

        logger.info(f"Loaded {len(posts)} posts ({len(failures)} failed)")
        return posts, failures


def post_record(post: Post) -> dict:
    """Flatten a post into one index row."""
    blocks = md.extract_code_blocks(post.body, post.body_line_offset)
    languages = sorted({block.language.lower() for block in blocks if block.language})
    return {
        "path": post.path,
        "slug": post.slug,
        "title": post.title,
        "date": post.date,
        "vendor": post.vendor,
        "service": post.service,
        "tags": list(post.tags),
        "word_count": md.word_count(post.body),
        "code_blocks": len(blocks),
        "languages": languages,
        "mermaid": bool(post.mermaid),
        "toc": bool(post.toc),
    }


def to_dataframe(posts: List[Post]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per post.

    Args:
        posts: Loaded posts

    Returns:
        pd.DataFrame: Index rows in INDEX_COLUMNS order
    """
    records = [post_record(post) for post in posts]
    return pd.DataFrame(records, columns=INDEX_COLUMNS)


def category_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Count posts per (vendor, service) category.

    Args:
        df: Frame built by to_dataframe

    Returns:
        pd.DataFrame: Columns vendor, service, posts; most posts first
    """
    if df.empty:
        return pd.DataFrame(columns=["vendor", "service", "posts"])

    summary = (
        df.fillna({"vendor": "(none)", "service": "(none)"})
        .groupby(["vendor", "service"])
        .size()
        .reset_index(name="posts")
        .sort_values(["posts", "vendor", "service"], ascending=[False, True, True])
        .reset_index(drop=True)
    )
    return summary
