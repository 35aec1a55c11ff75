"""
Tests for Duplicate Service

Unit tests covering title keyword similarity, body shingling,
pairwise duplicate detection and grouping by exception name.
"""

import pytest

from postlint.services.duplicate_service import (
    DuplicateService, title_keywords, title_similarity, shingles, jaccard,
    exception_name, group_by_exception
)
from postlint.data.corpus import Corpus


class TestTitleSimilarity:
    """Tests for title_keywords and title_similarity."""

    def test_keywords_drop_short_and_stop_words(self):
        keywords = title_keywords("Understanding ConflictException in Amazon Textract")

        assert keywords == {"conflictexception", "amazon", "textract"}

    def test_keywords_strip_punctuation(self):
        assert title_keywords("Handling: Throttling, Retries!") == {"throttling", "retries"}

    def test_keywords_empty_title(self):
        assert title_keywords(None) == set()
        assert title_keywords("") == set()

    def test_identical_titles(self):
        title = "ConflictException in Amazon Textract"

        assert title_similarity(title, title) == 1.0

    def test_similarity_relative_to_larger_set(self):
        """Sharing one keyword of three is a third, not a full match."""
        score = title_similarity(
            "ConflictException in Amazon Textract",
            "ThrottlingException in Amazon RDS",
        )

        assert score == pytest.approx(1 / 3)

    def test_no_keywords(self):
        assert title_similarity("The and for", "ConflictException") == 0.0


class TestShingles:
    """Tests for shingles and jaccard."""

    def test_shingles(self):
        result = shingles("One two three four", size=2)

        assert result == frozenset(["one two", "two three", "three four"])

    def test_short_text_single_shingle(self):
        assert shingles("Just two", size=5) == frozenset(["just two"])

    def test_empty_text(self):
        assert shingles("", size=3) == frozenset()

    def test_jaccard(self):
        assert jaccard(frozenset("ab"), frozenset("bc")) == pytest.approx(1 / 3)
        assert jaccard(frozenset(), frozenset()) == 0.0


class TestDuplicateService:
    """Tests for DuplicateService."""

    @pytest.fixture
    def service(self):
        return DuplicateService(title_threshold=0.8, body_threshold=0.6, shingle_size=3)

    def test_identical_posts(self, service, make_post):
        first = make_post(path="a.md")
        second = make_post(path="b.md")

        pair = service.compare(first, second)

        assert pair.reason == "title+body"
        assert pair.title_similarity == 1.0
        assert pair.body_similarity == 1.0

    def test_title_only_duplicate(self, service, make_post):
        first = make_post(path="a.md", body="Completely different words about queues and retries.")
        second = make_post(path="b.md", body="Nothing shared with that other text whatsoever here.")

        pair = service.compare(first, second)

        assert pair.reason == "title"

    def test_body_only_duplicate(self, service, make_post):
        first = make_post(path="a.md", title="ConflictException in Amazon Textract")
        second = make_post(path="b.md", title="ThrottlingException in Amazon RDS")

        pair = service.compare(first, second)

        assert pair.reason == "body"

    def test_distinct_posts(self, service, make_post):
        first = make_post(path="a.md", title="ConflictException in Textract",
                          body="Textract conflicts happen when adapters change.")
        second = make_post(path="b.md", title="ThrottlingException in DynamoDB",
                           body="DynamoDB throttles requests over provisioned capacity.")

        assert service.compare(first, second) is None

    def test_find_duplicates_in_corpus(self, sample_corpus):
        posts, _ = Corpus(sample_corpus).load()

        pairs = DuplicateService(title_threshold=0.8, body_threshold=0.6).find_duplicates(posts)

        assert len(pairs) == 1
        assert pairs[0].first.endswith("2023-08-14-textract-conflict-exception.md")
        assert pairs[0].second.endswith("2023-08-15-textract-conflict-exception-again.md")

    def test_find_duplicates_sorted_by_body_similarity(self, service, make_post):
        posts = [
            make_post(path="a.md", body="alpha beta gamma delta epsilon"),
            make_post(path="b.md", body="alpha beta gamma delta zeta"),
            make_post(path="c.md", body="alpha beta gamma delta epsilon"),
        ]

        pairs = service.find_duplicates(posts)

        assert [(p.first, p.second) for p in pairs][0] == ("a.md", "c.md")
        assert pairs[0].body_similarity >= pairs[-1].body_similarity


class TestExceptionGroups:
    """Tests for exception_name and group_by_exception."""

    @pytest.mark.parametrize("title,expected", [
        ("Understanding ConflictException in Amazon Textract", "ConflictException"),
        ("Handling InternalServerError from Bedrock", "InternalServerError"),
        ("What is a ServiceFault?", "ServiceFault"),
        ("Getting started with Amazon S3", None),
        (None, None),
    ])
    def test_exception_name(self, title, expected):
        assert exception_name(title) == expected

    def test_group_by_exception(self, make_post):
        posts = [
            make_post(path="a.md", title="ThrottlingException in RDS"),
            make_post(path="b.md", title="ConflictException in Textract"),
            make_post(path="c.md", title="ThrottlingException in SQS"),
            make_post(path="d.md", title="Intro to AWS"),
        ]

        groups = group_by_exception(posts)

        assert list(groups) == ["ConflictException", "ThrottlingException"]
        assert [p.path for p in groups["ThrottlingException"]] == ["a.md", "c.md"]
