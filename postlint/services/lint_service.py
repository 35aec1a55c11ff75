"""
Lint Service Module

This module runs the content-linting rules over posts: the front-matter
contract, fenced code blocks, the authoring template, and body length.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from postlint.config import settings
from postlint.data.models import LintIssue, Post
from postlint.services import front_matter_service as fm
from postlint.services import markdown_service as md
from postlint.utils.exceptions import (
    FrontMatterMissingError, FrontMatterParseError, PostLintError, PostReadError
)
from postlint.utils.helpers import split_post_filename
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

ERROR = "error"
WARNING = "warning"
INFO = "info"

SEVERITY_RANK = {INFO: 0, WARNING: 1, ERROR: 2}

# Rule code -> (severity, description)
RULES: Dict[str, Tuple[str, str]] = {
    "FM001": (ERROR, "file has no front-matter block"),
    "FM002": (ERROR, "front matter is not a valid YAML mapping"),
    "FM003": (ERROR, "required front-matter key missing"),
    "FM004": (ERROR, "title is empty"),
    "FM005": (WARNING, "title is malformed"),
    "FM006": (ERROR, "date cannot be parsed"),
    "FM007": (WARNING, "categories is not a (vendor, service) pair"),
    "FM008": (WARNING, "tags is empty"),
    "FM009": (WARNING, "duplicate tags"),
    "FM010": (ERROR, "toggle key is not a boolean"),
    "FM011": (INFO, "unknown front-matter key"),
    "FM012": (WARNING, "file name date differs from front-matter date"),
    "CB001": (WARNING, "fenced code block has no language"),
    "CB002": (ERROR, "code fence is never closed"),
    "CB003": (INFO, "code block is empty"),
    "TPL001": (INFO, "template section missing"),
    "BODY001": (WARNING, "body is too short"),
    "IO001": (ERROR, "file cannot be read"),
}


def severity_at_least(severity: str, minimum: str) -> bool:
    """Check whether a severity meets a minimum level."""
    return SEVERITY_RANK[severity] >= SEVERITY_RANK[minimum]


class LintService:
    """Service for running lint rules over posts."""

    def __init__(
        self,
        required_keys: Optional[List[str]] = None,
        optional_keys: Optional[List[str]] = None,
        disabled_rules: Optional[Iterable[str]] = None,
        min_body_words: Optional[int] = None,
    ):
        """
        Initialize the lint service.

        Args:
            required_keys: Front-matter keys every post must carry
            optional_keys: Keys allowed in addition to the required ones
            disabled_rules: Rule codes to skip
            min_body_words: Minimum prose words before BODY001 fires
        """
        self.required_keys = list(required_keys if required_keys is not None
                                  else settings.REQUIRED_FRONT_MATTER_KEYS)
        self.optional_keys = list(optional_keys if optional_keys is not None
                                  else settings.OPTIONAL_FRONT_MATTER_KEYS)
        self.boolean_keys = list(settings.BOOLEAN_FRONT_MATTER_KEYS)
        self.known_keys = set(self.required_keys) | set(self.optional_keys) | set(
            settings.KNOWN_EXTRA_FRONT_MATTER_KEYS
        )
        self.disabled_rules = set(disabled_rules if disabled_rules is not None
                                  else settings.DISABLED_RULES)
        self.min_body_words = (min_body_words if min_body_words is not None
                               else settings.MIN_BODY_WORD_COUNT)

    def _issue(self, issues: List[LintIssue], path: str, rule: str,
               message: str, line: Optional[int] = None) -> None:
        """Append an issue unless its rule is disabled."""
        if rule in self.disabled_rules:
            return
        severity = RULES[rule][0]
        issues.append(LintIssue(path=path, rule=rule, severity=severity, message=message, line=line))

    def _key_line(self, post: Post, key: str) -> Optional[int]:
        """Find the file line of a top-level front-matter key."""
        return post.key_lines.get(key)

    # -------------------------------------------------------------------------
    # Front matter
    # -------------------------------------------------------------------------

    def check_front_matter(self, post: Post) -> List[LintIssue]:
        """Check the front-matter contract of a post."""
        issues: List[LintIssue] = []
        data = post.front_matter
        path = post.path

        for key in self.required_keys:
            if key not in data or data[key] is None:
                self._issue(issues, path, "FM003", f"Missing required front-matter key '{key}'", 1)

        if "title" in data and data["title"] is not None:
            if not post.title:
                self._issue(issues, path, "FM004", "Title is empty", self._key_line(post, "title"))
            elif fm.is_malformed_title(post.raw_title):
                self._issue(issues, path, "FM005",
                            f"Title is malformed (embedded newline or stray quotes): {post.title!r}",
                            self._key_line(post, "title"))

        if data.get("date") is not None and post.date is None:
            self._issue(issues, path, "FM006", f"Date cannot be parsed: {data['date']!r}",
                        self._key_line(post, "date"))

        if data.get("categories") is not None and len(post.categories) != settings.CATEGORY_PAIR_LENGTH:
            self._issue(issues, path, "FM007",
                        f"Categories should be a (vendor, service) pair, got {post.categories}",
                        self._key_line(post, "categories"))

        if "tags" in data and data["tags"] is not None:
            raw_tags = fm.as_string_list(data.get("tags"))
            if not raw_tags:
                self._issue(issues, path, "FM008", "Tags are empty", self._key_line(post, "tags"))
            elif len(raw_tags) != len(post.tags):
                seen = set()
                repeated = []
                for tag in raw_tags:
                    if tag.lower() in seen and tag not in repeated:
                        repeated.append(tag)
                    seen.add(tag.lower())
                self._issue(issues, path, "FM009", f"Duplicate tags: {', '.join(repeated)}",
                            self._key_line(post, "tags"))

        for key in self.boolean_keys:
            if key in data and not isinstance(data[key], bool):
                self._issue(issues, path, "FM010",
                            f"'{key}' must be true or false, got {data[key]!r}",
                            self._key_line(post, key))

        for key in data:
            if key not in self.known_keys:
                self._issue(issues, path, "FM011", f"Unknown front-matter key '{key}'",
                            self._key_line(post, str(key)))

        file_date, _ = split_post_filename(path)
        if file_date and post.date is not None and post.date.strftime("%Y-%m-%d") != file_date:
            self._issue(issues, path, "FM012",
                        f"File name date {file_date} differs from front-matter date "
                        f"{post.date.strftime('%Y-%m-%d')}",
                        self._key_line(post, "date"))

        return issues

    # -------------------------------------------------------------------------
    # Body
    # -------------------------------------------------------------------------

    def check_code_blocks(self, post: Post) -> List[LintIssue]:
        """Check fenced code blocks of a post."""
        issues: List[LintIssue] = []
        for block in md.extract_code_blocks(post.body, post.body_line_offset):
            if not block.closed:
                self._issue(issues, post.path, "CB002",
                            f"Code fence {block.fence} is never closed", block.start_line)
            if not block.language:
                self._issue(issues, post.path, "CB001",
                            "Fenced code block has no declared language", block.start_line)
            if not block.content.strip():
                self._issue(issues, post.path, "CB003", "Code block is empty", block.start_line)
        return issues

    def check_template(self, post: Post) -> List[LintIssue]:
        """Report sections of the authoring template the post lacks."""
        issues: List[LintIssue] = []
        headings = md.extract_headings(post.body, post.body_line_offset)
        for section, present in md.find_template_sections(headings).items():
            if not present:
                self._issue(issues, post.path, "TPL001", f"Missing template section '{section}'")
        return issues

    def check_body(self, post: Post) -> List[LintIssue]:
        """Check the post body length."""
        issues: List[LintIssue] = []
        words = md.word_count(post.body)
        if words < self.min_body_words:
            self._issue(issues, post.path, "BODY001",
                        f"Body has {words} words, minimum is {self.min_body_words}",
                        post.body_line_offset)
        return issues

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def lint_post(self, post: Post) -> List[LintIssue]:
        """
        Run every enabled rule over a parsed post.

        Args:
            post: The post to check

        Returns:
            List[LintIssue]: Issues sorted by line
        """
        issues = (
            self.check_front_matter(post)
            + self.check_code_blocks(post)
            + self.check_template(post)
            + self.check_body(post)
        )
        return sorted(issues, key=lambda issue: issue.line or 0)

    def issues_for_error(self, path: str, error: PostLintError) -> List[LintIssue]:
        """Convert a load failure into lint issues."""
        issues: List[LintIssue] = []
        if isinstance(error, FrontMatterMissingError):
            self._issue(issues, path, "FM001", str(error), error.line)
        elif isinstance(error, FrontMatterParseError):
            self._issue(issues, path, "FM002", str(error), error.line)
        elif isinstance(error, PostReadError):
            self._issue(issues, path, "IO001", str(error))
        else:
            raise error
        return issues

    def lint_file(self, path: str) -> List[LintIssue]:
        """
        Load and lint one file, turning load failures into issues.

        Args:
            path: Post file path

        Returns:
            List[LintIssue]: Issues for the file
        """
        try:
            post = fm.load_post(path)
        except (FrontMatterMissingError, FrontMatterParseError, PostReadError) as e:
            logger.warning(f"Cannot parse {path}: {e}")
            return self.issues_for_error(path, e)
        return self.lint_post(post)

    def lint_corpus(
        self,
        posts: List[Post],
        failures: Optional[List[Tuple[str, PostLintError]]] = None,
    ) -> List[LintIssue]:
        """
        Lint a whole corpus.

        Args:
            posts: Successfully loaded posts
            failures: (path, error) pairs for files that failed to load

        Returns:
            List[LintIssue]: Issues sorted by path, then line
        """
        issues: List[LintIssue] = []
        for path, error in failures or []:
            issues.extend(self.issues_for_error(path, error))
        for post in posts:
            issues.extend(self.lint_post(post))

        logger.info(f"Linted {len(posts) + len(failures or [])} files, found {len(issues)} issues")
        return sorted(issues, key=lambda issue: (issue.path, issue.line or 0))


def filter_issues(issues: List[LintIssue], min_severity: str = INFO) -> List[LintIssue]:
    """Keep issues at or above a severity."""
    return [issue for issue in issues if severity_at_least(issue.severity, min_severity)]


def count_by_severity(issues: List[LintIssue]) -> Dict[str, int]:
    """Count issues per severity level."""
    counts = {ERROR: 0, WARNING: 0, INFO: 0}
    for issue in issues:
        counts[issue.severity] += 1
    return counts
