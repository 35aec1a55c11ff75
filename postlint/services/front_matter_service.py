"""
Front Matter Service Module

This module handles the YAML front-matter contract consumed by the static
site generator. It splits a post file into its front-matter block and body,
parses and normalises the metadata, and builds Post objects.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import yaml

from postlint.config import settings
from postlint.data.models import Post
from postlint.utils.exceptions import (
    FrontMatterMissingError, FrontMatterParseError, PostReadError
)
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

FRONT_MATTER_OPEN = "---"
FRONT_MATTER_CLOSE = ("---", "...")
QUOTE_CHARS = ("'", '"')
TOP_LEVEL_KEY_PATTERN = re.compile(r'^([^\s#\-][^:]*):(\s|$)')


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as strings for parse_post_date."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Jekyll date forms, most specific first
DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
]


def split_front_matter(text: str) -> Tuple[str, str, int]:
    """
    Split a post into its front-matter YAML and Markdown body.

    Args:
        text: Full file contents

    Returns:
        Tuple: (yaml_text, body, body_line_offset) where body_line_offset is
        the 1-based file line on which the body starts

    Raises:
        FrontMatterMissingError: If the file does not open with '---'
        FrontMatterParseError: If the opening delimiter is never closed
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_OPEN:
        raise FrontMatterMissingError("Post does not start with a '---' front-matter block", line=1)

    for index in range(1, len(lines)):
        if lines[index].strip() in FRONT_MATTER_CLOSE:
            yaml_text = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            return yaml_text, body, index + 2

    raise FrontMatterParseError("Front-matter block opened on line 1 is never closed", line=1)


def parse_front_matter(yaml_text: str) -> Dict[str, Any]:
    """
    Parse front-matter YAML into a mapping.

    Args:
        yaml_text: The text between the front-matter delimiters

    Returns:
        dict: The parsed mapping, empty for an empty block

    Raises:
        FrontMatterParseError: If the YAML is invalid or not a mapping
    """
    try:
        data = yaml.load(yaml_text, Loader=FrontMatterLoader)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # +2: one for 1-based lines, one for the opening delimiter
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterParseError(f"Invalid front-matter YAML: {problem}", line=line) from e
    except ValueError as e:
        raise FrontMatterParseError(f"Invalid front-matter value: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterParseError(
            f"Front matter must be a mapping, got {type(data).__name__}", line=2
        )
    return data


def find_key_lines(yaml_text: str) -> Dict[str, int]:
    """
    Map each top-level front-matter key to its line in the post file.

    Args:
        yaml_text: The text between the front-matter delimiters

    Returns:
        dict: Key name to 1-based file line, first occurrence wins
    """
    key_lines = {}
    for index, line in enumerate(yaml_text.splitlines()):
        match = TOP_LEVEL_KEY_PATTERN.match(line)
        if match:
            key = match.group(1).strip().strip("'\"")
            key_lines.setdefault(key, index + 2)
    return key_lines


def normalize_title(value: Any) -> Optional[str]:
    """
    Clean up a title as authored in front matter.

    Removes surrounding quotes (repeatedly, so '"Title"' becomes Title),
    stray quote characters left at either end, embedded newlines, and
    runs of whitespace.

    Args:
        value: Raw title value

    Returns:
        Optional[str]: The cleaned title, or None when empty
    """
    if value is None:
        return None

    title = " ".join(str(value).split())
    while len(title) >= 2 and title[0] == title[-1] and title[0] in QUOTE_CHARS:
        title = title[1:-1].strip()

    # Only an unmatched quote at either end is stray
    if title[:1] in QUOTE_CHARS and title.count(title[0]) % 2 == 1:
        title = title[1:].strip()
    if title.endswith('"') and title.count('"') % 2 == 1:
        title = title[:-1].strip()
    return title or None


def is_malformed_title(value: Any) -> bool:
    """
    Check whether a raw title shows authoring damage.

    Args:
        value: Raw title value

    Returns:
        bool: True for non-string titles, embedded newlines, or literal
        quote characters left at either end after YAML unquoting
    """
    if value is None:
        return False
    if not isinstance(value, str):
        return True
    if "\n" in value or "\r" in value:
        return True
    stripped = value.strip()
    return stripped.startswith(QUOTE_CHARS) or stripped.endswith('"')


def parse_post_date(value: Any) -> Optional[datetime]:
    """
    Convert a front-matter date to a datetime.

    Args:
        value: A datetime, date or Jekyll-style date string

    Returns:
        Optional[datetime]: The timestamp, or None when unparseable
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def as_string_list(value: Any, split_words: bool = True) -> List[str]:
    """
    Coerce a front-matter list field to a list of strings.

    Args:
        value: None, a scalar, or a list
        split_words: Split a plain string on whitespace, as Jekyll does

    Returns:
        List[str]: Stripped, non-empty entries
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value if item is not None]
        return [item for item in items if item]
    if isinstance(value, str) and split_words:
        return value.split()
    text = str(value).strip()
    return [text] if text else []


def dedupe_tags(tags: List[str]) -> List[str]:
    """Remove case-insensitive duplicates, keeping the first spelling."""
    seen = set()
    unique = []
    for tag in tags:
        key = tag.lower()
        if key not in seen:
            seen.add(key)
            unique.append(tag)
    return unique


def build_post(path: str, text: str) -> Post:
    """
    Build a Post from file contents.

    Args:
        path: Where the text was read from
        text: Full file contents

    Returns:
        Post: The parsed post

    Raises:
        FrontMatterMissingError, FrontMatterParseError
    """
    yaml_text, body, body_line_offset = split_front_matter(text)
    front_matter = parse_front_matter(yaml_text)

    raw_title = front_matter.get("title")
    mermaid = front_matter.get("mermaid")
    toc = front_matter.get("toc")

    return Post(
        path=path,
        title=normalize_title(raw_title),
        raw_title=raw_title,
        date=parse_post_date(front_matter.get("date")),
        categories=as_string_list(front_matter.get("categories")),
        tags=dedupe_tags(as_string_list(front_matter.get("tags"))),
        mermaid=mermaid if isinstance(mermaid, bool) else None,
        toc=toc if isinstance(toc, bool) else None,
        body=body,
        front_matter=front_matter,
        body_line_offset=body_line_offset,
        key_lines=find_key_lines(yaml_text),
    )


def read_post_text(path: str, encoding: Optional[str] = None) -> str:
    """
    Read a post file.

    Raises:
        PostReadError: If the file cannot be read or decoded
    """
    encoding = encoding or settings.FILE_ENCODING
    try:
        with open(path, "r", encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise PostReadError(f"Cannot decode {path} as {encoding}: {e}", path=path) from e
    except OSError as e:
        raise PostReadError(f"Cannot read {path}: {e}", path=path) from e


def load_post(path: str, encoding: Optional[str] = None) -> Post:
    """
    Read and parse one post file.

    Args:
        path: Post file path
        encoding: Text encoding, defaults to settings.FILE_ENCODING

    Returns:
        Post: The parsed post

    Raises:
        PostReadError, FrontMatterMissingError, FrontMatterParseError
    """
    text = read_post_text(path, encoding)
    post = build_post(path, text)
    logger.debug(f"Loaded post {path}: {post.title!r}")
    return post
