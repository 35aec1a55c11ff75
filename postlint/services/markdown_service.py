"""
Markdown Service Module

This module inspects the structure of a post body: fenced code blocks,
ATX headings, prose word counts, outbound links, and the sections of the
repeated authoring template. It also converts Markdown to HTML.
"""

import re
from typing import Dict, List, Tuple

import markdown

from postlint.config import settings
from postlint.data.models import CodeBlock, Heading

FENCE_OPEN_PATTERN = re.compile(r'^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$')
HEADING_PATTERN = re.compile(r'^ {0,3}(?P<marks>#{1,6})[ \t]+(?P<text>.*?)[ \t]*$')
CLOSING_HASHES_PATTERN = re.compile(r'(^|[ \t]+)#+$')
INLINE_CODE_PATTERN = re.compile(r'`[^`\n]*`')
# Parentheses are allowed only in balanced pairs, as in Wikipedia links
URL_PATTERN = re.compile(r'https?://(?:[^\s<>"\'()\[\]`]|\([^\s<>"\'()`]*\))+')
WORD_PATTERN = re.compile(r"[A-Za-z0-9][\w'’-]*")
URL_TRAILING_PUNCTUATION = ".,;:!?*_"


def _is_fence_close(line: str, fence: str) -> bool:
    """Check whether a line closes a fence opened with `fence`."""
    stripped = line.strip()
    if len(line) - len(line.lstrip(" ")) > 3:
        return False
    return (
        len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


def scan_body(body: str, line_offset: int = 1) -> Tuple[List[CodeBlock], List[Tuple[int, str]]]:
    """
    Separate a body into fenced code blocks and prose lines.

    Args:
        body: Markdown body
        line_offset: File line number of the first body line

    Returns:
        Tuple: (code_blocks, prose_lines) where prose_lines holds
        (line_number, text) pairs for every line outside a fence
    """
    blocks: List[CodeBlock] = []
    prose: List[Tuple[int, str]] = []

    open_fence = None
    open_info = None
    open_line = 0
    content: List[str] = []

    for index, line in enumerate(body.splitlines()):
        line_number = line_offset + index

        if open_fence is None:
            match = FENCE_OPEN_PATTERN.match(line)
            # Backtick fences may not carry backticks in their info string
            if match and not (match.group("fence")[0] == "`" and "`" in match.group("info")):
                open_fence = match.group("fence")
                info = match.group("info").strip()
                open_info = info.split()[0].strip("{}.") if info else None
                open_line = line_number
                content = []
            else:
                prose.append((line_number, line))
            continue

        if _is_fence_close(line, open_fence):
            blocks.append(CodeBlock(
                language=open_info or None,
                content="\n".join(content),
                start_line=open_line,
                fence=open_fence,
                closed=True,
            ))
            open_fence = None
        else:
            content.append(line)

    if open_fence is not None:
        blocks.append(CodeBlock(
            language=open_info or None,
            content="\n".join(content),
            start_line=open_line,
            fence=open_fence,
            closed=False,
        ))

    return blocks, prose


def extract_code_blocks(body: str, line_offset: int = 1) -> List[CodeBlock]:
    """Return the fenced code blocks of a body, including an unclosed trailing one."""
    return scan_body(body, line_offset)[0]


def extract_headings(body: str, line_offset: int = 1) -> List[Heading]:
    """
    Return the ATX headings of a body, ignoring '#' lines inside code fences.

    Args:
        body: Markdown body
        line_offset: File line number of the first body line

    Returns:
        List[Heading]: Headings in document order
    """
    headings = []
    for line_number, line in scan_body(body, line_offset)[1]:
        match = HEADING_PATTERN.match(line)
        if not match:
            continue
        text = CLOSING_HASHES_PATTERN.sub("", match.group("text")).strip()
        headings.append(Heading(level=len(match.group("marks")), text=text, line=line_number))
    return headings


def prose_text(body: str) -> str:
    """Return the body with fenced code removed."""
    return "\n".join(line for _, line in scan_body(body)[1])


def word_count(body: str) -> int:
    """Count prose words outside code fences."""
    return len(WORD_PATTERN.findall(prose_text(body)))


def extract_links(body: str) -> List[str]:
    """
    Collect http(s) URLs outside code fences and inline code spans.

    Args:
        body: Markdown body

    Returns:
        List[str]: Unique URLs in order of first appearance
    """
    links = []
    seen = set()
    for _, line in scan_body(body)[1]:
        line = INLINE_CODE_PATTERN.sub("", line)
        for url in URL_PATTERN.findall(line):
            url = url.rstrip(URL_TRAILING_PUNCTUATION)
            if url not in seen:
                seen.add(url)
                links.append(url)
    return links


def find_template_sections(headings: List[Heading]) -> Dict[str, bool]:
    """
    Check which sections of the authoring template a post contains.

    Args:
        headings: Headings of the post

    Returns:
        dict: Section name mapped to whether a heading matches it
    """
    found = {}
    for section, pattern in settings.TEMPLATE_SECTION_PATTERNS.items():
        regex = re.compile(pattern, re.IGNORECASE)
        found[section] = any(regex.search(heading.text) for heading in headings)
    return found


def render_html(body: str) -> str:
    """Convert a Markdown body to an HTML fragment."""
    return markdown.markdown(body, extensions=settings.MARKDOWN_EXTENSIONS)
