"""
Tests for Link Service

Unit tests for collecting cited links and checking them over HTTP.
All network access goes through a mocked requests session.
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from postlint.services.link_service import LinkService


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session, headers={})


@pytest.fixture
def link_service(session):
    with patch('postlint.services.link_service.settings.LINK_CHECK_RETRY_DELAY', 0):
        yield LinkService(workers=2, timeout=3, session=session)


class TestCollectLinks:
    """Tests for LinkService.collect_links."""

    def test_collect_links_groups_posts(self, link_service, make_post):
        posts = [
            make_post(path="a.md", body="See https://docs.aws.amazon.com/rds/ and https://example.com/x"),
            make_post(path="b.md", body="Also https://docs.aws.amazon.com/rds/"),
        ]

        links = link_service.collect_links(posts)

        assert list(links) == ["https://docs.aws.amazon.com/rds/", "https://example.com/x"]
        assert links["https://docs.aws.amazon.com/rds/"] == ["a.md", "b.md"]

    def test_collect_links_none(self, link_service, make_post):
        assert link_service.collect_links([make_post(body="No links here.")]) == {}

    def test_session_headers_set(self, session, link_service):
        assert "User-Agent" in session.headers


class TestCheckUrl:
    """Tests for LinkService.check_url."""

    def test_head_ok(self, link_service, session, mock_http_response):
        session.head.return_value = mock_http_response(200)

        assert link_service.check_url("https://example.com") == ("https://example.com", 200)
        session.get.assert_not_called()
        session.head.assert_called_once_with("https://example.com", timeout=3, allow_redirects=True)

    @pytest.mark.parametrize("head_status", [403, 405, 503])
    def test_falls_back_to_get(self, link_service, session, mock_http_response, head_status):
        session.head.return_value = mock_http_response(head_status)
        session.get.return_value = mock_http_response(200)

        assert link_service.check_url("https://example.com")[1] == 200
        session.get.assert_called_once()

    def test_connection_error_retried_then_reported(self, link_service, session):
        session.head.side_effect = requests.exceptions.ConnectionError("refused")

        with patch('postlint.services.link_service.settings.LINK_CHECK_RETRIES', 2):
            url, status = link_service.check_url("https://down.example.com")

        assert url == "https://down.example.com"
        assert "refused" in status
        assert session.head.call_count == 2

    def test_other_request_errors_not_retried(self, link_service, session):
        session.head.side_effect = requests.exceptions.TooManyRedirects("loop")

        _, status = link_service.check_url("https://loop.example.com")

        assert "loop" in status
        assert session.head.call_count == 1


class TestCheckLinks:
    """Tests for LinkService.check_links."""

    def test_check_links(self, link_service, session, make_post, mock_http_response):
        def head(url, **kwargs):
            return mock_http_response(404 if "missing" in url else 200, url)

        session.head.side_effect = head
        session.get.side_effect = head
        posts = [
            make_post(path="a.md", body="https://example.com/ok https://example.com/missing"),
            make_post(path="b.md", body="https://example.com/missing"),
        ]

        results = link_service.check_links(posts)

        assert [(r.url, r.status, r.ok) for r in results] == [
            ("https://example.com/missing", 404, False),
            ("https://example.com/ok", 200, True),
        ]
        assert results[0].posts == ["a.md", "b.md"]

    def test_check_links_without_links(self, link_service, session, make_post):
        assert link_service.check_links([make_post(body="Nothing cited.")]) == []
        session.head.assert_not_called()
