"""
Duplicate Service Module

This module finds near-duplicate posts. Many posts in the corpus cover
the same exception with slightly different wording, so posts are compared
both by title keywords and by overlapping word shingles of their prose.
"""

import re
from collections import defaultdict
from itertools import combinations
from typing import Dict, FrozenSet, List, Optional, Set

from postlint.config import settings
from postlint.data.models import DuplicatePair, Post
from postlint.services import markdown_service as md
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

EXCEPTION_NAME_REGEX = re.compile(settings.EXCEPTION_NAME_PATTERN)


def title_keywords(title: Optional[str], min_length: Optional[int] = None) -> Set[str]:
    """
    Extract meaningful lowercase keywords from a title.

    Args:
        title: Post title
        min_length: Words must be longer than this to count

    Returns:
        Set[str]: Keywords without punctuation or stop words
    """
    if not title:
        return set()
    min_length = settings.MIN_KEYWORD_LENGTH if min_length is None else min_length
    words = set(re.sub(r'[^\w\s]', ' ', title.lower()).split())
    return {w for w in words if len(w) > min_length and w not in settings.TITLE_STOP_WORDS}


def title_similarity(first: Optional[str], second: Optional[str]) -> float:
    """
    Keyword overlap between two titles, relative to the larger keyword set.

    Returns:
        float: 0.0 when either title has no keywords, up to 1.0
    """
    first_words = title_keywords(first)
    second_words = title_keywords(second)
    if not first_words or not second_words:
        return 0.0
    overlap = len(first_words & second_words)
    return overlap / max(len(first_words), len(second_words))


def shingles(text: str, size: Optional[int] = None) -> FrozenSet[str]:
    """
    Build the set of word k-shingles of a text.

    Args:
        text: Prose text
        size: Words per shingle

    Returns:
        FrozenSet[str]: Shingles; a text shorter than `size` words yields a
        single shingle of all its words
    """
    size = settings.SHINGLE_SIZE if size is None else size
    words = md.WORD_PATTERN.findall(text.lower())
    if not words:
        return frozenset()
    if len(words) < size:
        return frozenset([" ".join(words)])
    return frozenset(" ".join(words[i:i + size]) for i in range(len(words) - size + 1))


def jaccard(first: FrozenSet[str], second: FrozenSet[str]) -> float:
    """Jaccard index of two sets, 0.0 when both are empty."""
    if not first and not second:
        return 0.0
    return len(first & second) / len(first | second)


class DuplicateService:
    """Service for detecting near-duplicate posts."""

    def __init__(
        self,
        title_threshold: Optional[float] = None,
        body_threshold: Optional[float] = None,
        shingle_size: Optional[int] = None,
    ):
        """
        Initialize the duplicate service.

        Args:
            title_threshold: Title keyword ratio above which posts are duplicates
            body_threshold: Body shingle Jaccard above which posts are duplicates
            shingle_size: Words per body shingle
        """
        self.title_threshold = (settings.TITLE_SIMILARITY_THRESHOLD
                                if title_threshold is None else title_threshold)
        self.body_threshold = (settings.BODY_SIMILARITY_THRESHOLD
                               if body_threshold is None else body_threshold)
        self.shingle_size = settings.SHINGLE_SIZE if shingle_size is None else shingle_size

    def compare(self, first: Post, second: Post,
                first_shingles: Optional[FrozenSet[str]] = None,
                second_shingles: Optional[FrozenSet[str]] = None) -> Optional[DuplicatePair]:
        """
        Compare two posts.

        Returns:
            Optional[DuplicatePair]: The pair when either similarity crosses
            its threshold, otherwise None
        """
        if first_shingles is None:
            first_shingles = shingles(md.prose_text(first.body), self.shingle_size)
        if second_shingles is None:
            second_shingles = shingles(md.prose_text(second.body), self.shingle_size)

        title_score = title_similarity(first.title, second.title)
        body_score = jaccard(first_shingles, second_shingles)

        reasons = []
        if title_score > self.title_threshold:
            reasons.append("title")
        if body_score > self.body_threshold:
            reasons.append("body")
        if not reasons:
            return None

        return DuplicatePair(
            first=first.path,
            second=second.path,
            title_similarity=round(title_score, 4),
            body_similarity=round(body_score, 4),
            reason="+".join(reasons),
        )

    def find_duplicates(self, posts: List[Post]) -> List[DuplicatePair]:
        """
        Find every near-duplicate pair in a corpus.

        Args:
            posts: Posts to compare pairwise

        Returns:
            List[DuplicatePair]: Pairs sorted by body similarity, highest first
        """
        body_shingles = {
            post.path: shingles(md.prose_text(post.body), self.shingle_size)
            for post in posts
        }

        pairs = []
        for first, second in combinations(posts, 2):
            pair = self.compare(first, second, body_shingles[first.path], body_shingles[second.path])
            if pair:
                logger.debug(f"Near-duplicate ({pair.reason}): {pair.first} <-> {pair.second}")
                pairs.append(pair)

        logger.info(f"Compared {len(posts)} posts, found {len(pairs)} near-duplicate pairs")
        return sorted(pairs, key=lambda p: (-p.body_similarity, -p.title_similarity, p.first, p.second))


def exception_name(title: Optional[str]) -> Optional[str]:
    """Return the first exception class name mentioned in a title."""
    if not title:
        return None
    match = EXCEPTION_NAME_REGEX.search(title)
    return match.group(1) if match else None


def group_by_exception(posts: List[Post]) -> Dict[str, List[Post]]:
    """
    Group posts by the exception class named in their title.

    Args:
        posts: Posts to group

    Returns:
        dict: Exception name to posts, sorted by name; posts whose title
        names no exception are left out
    """
    groups: Dict[str, List[Post]] = defaultdict(list)
    for post in posts:
        name = exception_name(post.title)
        if name:
            groups[name].append(post)
    return dict(sorted(groups.items()))
