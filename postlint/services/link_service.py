"""
Link Service Module

This module checks the outbound links that posts cite, typically the AWS
documentation listed under a post's References section.
"""

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple, Union

import requests

from postlint.config import settings
from postlint.data.models import LinkCheckResult, Post
from postlint.services import markdown_service as md
from postlint.utils.exceptions import LinkCheckError
from postlint.utils.helpers import is_valid_url, retry
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

# Servers that reject HEAD are retried with GET
HEAD_FALLBACK_STATUSES = (403, 404, 405, 501)


class LinkService:
    """Service for checking reference links."""

    def __init__(
        self,
        workers: Optional[int] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the link service.

        Args:
            workers: Number of concurrent requests
            timeout: Seconds per request
            session: requests session to reuse, created when omitted
        """
        self.workers = workers or settings.LINK_CHECK_WORKERS
        self.timeout = timeout or settings.LINK_CHECK_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update(settings.REQUEST_HEADERS)

    def collect_links(self, posts: List[Post]) -> Dict[str, List[str]]:
        """
        Map each valid URL cited in the corpus to the posts citing it.

        Args:
            posts: Posts to scan

        Returns:
            dict: URL to post paths, URLs in sorted order
        """
        links: Dict[str, List[str]] = defaultdict(list)
        for post in posts:
            for url in md.extract_links(post.body):
                if is_valid_url(url):
                    links[url].append(post.path)
                else:
                    logger.debug(f"Ignoring invalid URL in {post.path}: {url}")
        return dict(sorted(links.items()))

    def _request(self, url: str) -> int:
        """Issue HEAD, falling back to GET, and return the status code."""
        response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        if response.status_code in HEAD_FALLBACK_STATUSES or response.status_code >= 500:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        return response.status_code

    def check_url(self, url: str) -> Tuple[str, Union[int, str]]:
        """
        Check one URL, retrying connection failures.

        Args:
            url: URL to check

        Returns:
            Tuple: (url, status) where status is the HTTP status code or
            the error text when every attempt failed
        """
        try:
            status = retry(
                lambda: self._request(url),
                max_attempts=settings.LINK_CHECK_RETRIES,
                delay=settings.LINK_CHECK_RETRY_DELAY,
                exceptions=(requests.exceptions.ConnectionError, requests.exceptions.Timeout),
            )
            return url, status
        except requests.exceptions.RequestException as e:
            logger.warning(f"Link check failed for {url}: {e}")
            return url, str(e)

    def check_links(self, posts: List[Post]) -> List[LinkCheckResult]:
        """
        Check every URL cited by the corpus concurrently.

        Args:
            posts: Posts to scan

        Returns:
            List[LinkCheckResult]: One result per unique URL, sorted by URL

        Raises:
            LinkCheckError: If the thread pool cannot run the checks
        """
        links = self.collect_links(posts)
        if not links:
            logger.info("No links found to check")
            return []

        logger.info(f"Checking {len(links)} unique links with {self.workers} workers")
        try:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                statuses = dict(executor.map(self.check_url, links.keys()))
        except RuntimeError as e:
            raise LinkCheckError(f"Link checking aborted: {e}") from e

        results = []
        for url, paths in links.items():
            status = statuses[url]
            ok = isinstance(status, int) and status < 400
            results.append(LinkCheckResult(url=url, status=status, ok=ok, posts=paths))

        broken = [r for r in results if not r.ok]
        logger.info(f"Link check complete: {len(results) - len(broken)} healthy, {len(broken)} broken")
        return results
