"""
Render Service Module

This module converts posts to standalone HTML pages, the same
Markdown-to-HTML step a static site generator performs.
"""

import html
import os
from typing import List, Optional

from postlint.config import settings
from postlint.data.models import Post
from postlint.services import markdown_service as md
from postlint.utils.exceptions import RenderError
from postlint.utils.helpers import ensure_dir_exists
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
{scripts}</head>
<body>
<article>
<header>
<h1>{title}</h1>
<p class="post-meta">{meta}</p>
</header>
{content}
</article>
</body>
</html>
"""


class RenderService:
    """Service for rendering posts to HTML."""

    def __init__(self, mermaid_script_url: Optional[str] = None):
        self.mermaid_script_url = mermaid_script_url or settings.MERMAID_SCRIPT_URL

    def _meta_line(self, post: Post) -> str:
        """Build the escaped date / categories / tags line."""
        parts = []
        if post.date is not None:
            parts.append(f'<time datetime="{post.date.isoformat()}">{post.date.strftime("%Y-%m-%d")}</time>')
        if post.categories:
            parts.append(
                '<span class="categories">'
                + " / ".join(html.escape(c) for c in post.categories)
                + "</span>"
            )
        if post.tags:
            parts.append(
                '<span class="tags">'
                + ", ".join(html.escape(t) for t in post.tags)
                + "</span>"
            )
        return " | ".join(parts)

    def render_post(self, post: Post) -> str:
        """
        Render a post as a standalone HTML document.

        Args:
            post: The post to render

        Returns:
            str: HTML document

        Raises:
            RenderError: If the Markdown conversion fails
        """
        try:
            content = md.render_html(post.body)
        except Exception as e:
            raise RenderError(f"Cannot render {post.path}: {e}") from e

        scripts = ""
        if post.mermaid:
            scripts = (
                f'<script src="{html.escape(self.mermaid_script_url)}"></script>\n'
                '<script>mermaid.initialize({startOnLoad: true});</script>\n'
            )

        return PAGE_TEMPLATE.format(
            title=html.escape(post.title or post.slug),
            scripts=scripts,
            meta=self._meta_line(post),
            content=content,
        )

    def render_corpus(self, posts: List[Post], out_dir: str) -> List[str]:
        """
        Write one <slug>.html file per post.

        Args:
            posts: Posts to render
            out_dir: Destination directory, created when missing

        Returns:
            List[str]: Paths written
        """
        ensure_dir_exists(out_dir)
        written = []
        for post in posts:
            page = self.render_post(post)
            target = os.path.join(out_dir, f"{post.slug}.html")
            if target in written:
                logger.warning(f"Two posts share the slug '{post.slug}', {post.path} overwrites the earlier page")
            with open(target, "w", encoding="utf-8") as f:
                f.write(page)
            if target not in written:
                written.append(target)

        logger.info(f"Rendered {len(posts)} posts to {len(written)} pages in {out_dir}")
        return written
