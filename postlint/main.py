"""
postlint Application

This is the main entry point for postlint.
It loads a corpus of Jekyll-style Markdown blog posts and runs one of
the content pipeline commands over it: linting, near-duplicate detection,
index export, category summary, reference-link checking, or HTML rendering.
"""

import sys
import json
import argparse
import logging
from typing import Callable, List, Optional, Tuple

from postlint.config import settings
from postlint.config.validators import validate_settings, get_config_summary
from postlint.data.corpus import Corpus, to_dataframe, category_summary
from postlint.data.models import Post
from postlint.data.protocols import PostSource
from postlint.services.duplicate_service import DuplicateService, group_by_exception
from postlint.services.index_service import IndexService
from postlint.services.lint_service import (
    LintService, filter_issues, count_by_severity, SEVERITY_RANK
)
from postlint.services.link_service import LinkService
from postlint.services.protocols import (
    DuplicateServiceProtocol, IndexServiceProtocol, LintServiceProtocol,
    LinkServiceProtocol, RenderServiceProtocol
)
from postlint.services.render_service import RenderService
from postlint.utils.exceptions import (
    PostLintError, ConfigurationError, CorpusError, ExportError, LinkCheckError, RenderError
)
from postlint.utils.helpers import truncate_text
from postlint.utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_FAILURE = 2


class PostLinter:
    """
    Main application class for postlint.

    This class wires the corpus to the content services and
    turns their results into reports and exit codes.
    """

    def __init__(
        self,
        lint_service: Optional[LintServiceProtocol] = None,
        duplicate_service: Optional[DuplicateServiceProtocol] = None,
        link_service: Optional[LinkServiceProtocol] = None,
        render_service: Optional[RenderServiceProtocol] = None,
        index_service: Optional[IndexServiceProtocol] = None,
        source_factory: Optional[Callable[[str], PostSource]] = None,
        validate: bool = True,
        out=None,
    ):
        """
        Initialize postlint.

        Args:
            lint_service: Lint rules runner
            duplicate_service: Near-duplicate detector
            link_service: Reference-link checker, created on first use when omitted
            render_service: HTML renderer
            index_service: Index exporter
            source_factory: Builds the post source for a path, defaults to Corpus
            validate: Validate settings before running
            out: Stream reports are written to, defaults to stdout
        """
        if validate:
            validate_settings()

        self.lint_service = lint_service or LintService()
        self.duplicate_service = duplicate_service or DuplicateService()
        self._link_service = link_service
        self.render_service = render_service or RenderService()
        self.index_service = index_service or IndexService()
        self.source_factory = source_factory or Corpus
        self.out = out or sys.stdout

    @property
    def link_service(self) -> LinkServiceProtocol:
        if self._link_service is None:
            self._link_service = LinkService()
        return self._link_service

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def load(self, path: str) -> Tuple[List[Post], list]:
        """Load the corpus at `path`."""
        return self.source_factory(path).load()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def lint(self, path: str, min_severity: str = "info", output_format: str = "text") -> int:
        """
        Lint every post under `path`.

        Returns:
            int: EXIT_FINDINGS when any error-level issue is found, else EXIT_OK
        """
        posts, failures = self.load(path)
        all_issues = self.lint_service.lint_corpus(posts, failures)
        issues = filter_issues(all_issues, min_severity)
        counts = count_by_severity(all_issues)

        if output_format == "json":
            self._print(json.dumps({
                "files": len(posts) + len(failures),
                "counts": counts,
                "issues": [issue.to_dict() for issue in issues],
            }, indent=2))
        else:
            for issue in issues:
                self._print(str(issue))
            self._print(
                f"\n{len(posts) + len(failures)} files checked: "
                f"{counts['error']} errors, {counts['warning']} warnings, {counts['info']} info"
            )

        return EXIT_FINDINGS if counts["error"] else EXIT_OK

    def duplicates(self, path: str) -> int:
        """
        Report near-duplicate posts under `path`.

        Returns:
            int: EXIT_FINDINGS when any pair is found, else EXIT_OK
        """
        posts, _ = self.load(path)
        pairs = self.duplicate_service.find_duplicates(posts)

        for pair in pairs:
            self._print(
                f"{pair.first} <-> {pair.second} "
                f"(title {pair.title_similarity:.2f}, body {pair.body_similarity:.2f}, {pair.reason})"
            )
        self._print(f"\n{len(pairs)} near-duplicate pairs among {len(posts)} posts")
        return EXIT_FINDINGS if pairs else EXIT_OK

    def index(self, path: str, output: str) -> int:
        """Export the corpus index to `output`."""
        posts, _ = self.load(path)
        written = self.index_service.export(to_dataframe(posts), output)
        self._print(f"Wrote index of {len(posts)} posts to {written}")
        return EXIT_OK

    def summary(self, path: str) -> int:
        """Print post counts per category and per exception class."""
        posts, failures = self.load(path)
        df = to_dataframe(posts)

        self._print(f"Posts: {len(posts)} ({len(failures)} unreadable)")
        self._print("\nPosts per category:")
        summary = category_summary(df)
        if summary.empty:
            self._print("  (none)")
        else:
            self._print(summary.to_string(index=False))

        self._print("\nPosts per exception:")
        groups = group_by_exception(posts)
        if not groups:
            self._print("  (none)")
        for name, grouped in groups.items():
            self._print(f"  {name}: {len(grouped)}")
        return EXIT_OK

    def links(self, path: str) -> int:
        """
        Check the links cited by posts under `path`.

        Returns:
            int: EXIT_FINDINGS when any link is broken, else EXIT_OK
        """
        posts, _ = self.load(path)
        results = self.link_service.check_links(posts)
        broken = [result for result in results if not result.ok]

        for result in broken:
            self._print(f"[X] Status {result.status} | {result.url}")
            for post_path in result.posts:
                self._print(f"      cited in {post_path}")
        self._print(f"\n{len(results)} unique links, {len(broken)} broken")
        return EXIT_FINDINGS if broken else EXIT_OK

    def render(self, path: str, output_dir: str) -> int:
        """Render every post under `path` to HTML in `output_dir`."""
        posts, failures = self.load(path)
        for failed_path, error in failures:
            logger.warning(f"Not rendering {failed_path}: {truncate_text(str(error), 120)}")
        written = self.render_service.render_corpus(posts, output_dir)
        self._print(f"Rendered {len(written)} pages to {output_dir}")
        return EXIT_OK


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="postlint",
        description="Lint, index and render a corpus of Jekyll Markdown posts"
    )
    parser.add_argument('--log-file', type=str, default=None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='WARNING', help='Logging level')

    subparsers = parser.add_subparsers(dest='command', required=True)

    lint_parser = subparsers.add_parser('lint', help='Check front matter, code fences and template sections')
    lint_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)
    lint_parser.add_argument('--disable', type=str, default='',
                             help='Comma-separated rule codes to skip (e.g. TPL001,FM011)')
    lint_parser.add_argument('--min-severity', type=str, choices=list(SEVERITY_RANK),
                             default=settings.DEFAULT_MIN_SEVERITY, help='Lowest severity to report')
    lint_parser.add_argument('--min-words', type=int, default=None,
                             help='Minimum prose words in a post body')
    lint_parser.add_argument('--format', dest='output_format', choices=['text', 'json'], default='text')

    dup_parser = subparsers.add_parser('duplicates', help='Find near-duplicate posts')
    dup_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)
    dup_parser.add_argument('--title-threshold', type=float, default=None)
    dup_parser.add_argument('--body-threshold', type=float, default=None)

    index_parser = subparsers.add_parser('index', help='Export post metadata to CSV or JSON')
    index_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)
    index_parser.add_argument('--output', '-o', type=str, required=True)

    summary_parser = subparsers.add_parser('summary', help='Count posts per category and exception')
    summary_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)

    links_parser = subparsers.add_parser('links', help='Check links cited by posts')
    links_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)
    links_parser.add_argument('--workers', type=int, default=None)
    links_parser.add_argument('--timeout', type=int, default=None)

    render_parser = subparsers.add_parser('render', help='Render posts to HTML')
    render_parser.add_argument('path', nargs='?', default=settings.POSTS_DIR)
    render_parser.add_argument('--output-dir', type=str, default=settings.HTML_OUTPUT_DIR)

    return parser.parse_args(argv)


def build_linter(args) -> PostLinter:
    """Create a PostLinter configured from command line arguments."""
    lint_service = None
    duplicate_service = None
    link_service = None

    if args.command == 'lint':
        disabled = list(settings.DISABLED_RULES)
        disabled += [rule.strip().upper() for rule in args.disable.split(',') if rule.strip()]
        lint_service = LintService(disabled_rules=disabled, min_body_words=args.min_words)
    elif args.command == 'duplicates':
        duplicate_service = DuplicateService(
            title_threshold=args.title_threshold,
            body_threshold=args.body_threshold,
        )
    elif args.command == 'links':
        link_service = LinkService(workers=args.workers, timeout=args.timeout)

    return PostLinter(
        lint_service=lint_service,
        duplicate_service=duplicate_service,
        link_service=link_service,
    )


def run_command(linter: PostLinter, args) -> int:
    """Dispatch the parsed command to the linter."""
    if args.command == 'lint':
        return linter.lint(args.path, args.min_severity, args.output_format)
    if args.command == 'duplicates':
        return linter.duplicates(args.path)
    if args.command == 'index':
        return linter.index(args.path, args.output)
    if args.command == 'summary':
        return linter.summary(args.path)
    if args.command == 'links':
        return linter.links(args.path)
    if args.command == 'render':
        return linter.render(args.path, args.output_dir)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_arguments(argv)

    try:
        # Set up logging
        log_level = getattr(logging, args.log_level)
        setup_file_logging(args.log_file, log_level)

        logger.info(f"Starting postlint {args.command}")
        logger.debug(f"Configuration: {get_config_summary()}")

        linter = build_linter(args)
        exit_code = run_command(linter, args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        exit_code = EXIT_FAILURE
    except CorpusError as e:
        logger.error(f"Corpus error: {e}", exc_info=True)
        exit_code = EXIT_FAILURE
    except (ExportError, RenderError) as e:
        logger.error(f"Output error: {e}", exc_info=True)
        exit_code = EXIT_FAILURE
    except LinkCheckError as e:
        logger.error(f"Link check error: {e}", exc_info=True)
        exit_code = EXIT_FAILURE
    except OSError as e:
        logger.error(f"I/O error: {e}", exc_info=True)
        exit_code = EXIT_FAILURE
    except PostLintError as e:
        logger.error(f"postlint error: {e}", exc_info=True)
        exit_code = EXIT_FAILURE
    except Exception as e:
        logger.error(f"Unhandled exception in postlint: {e}", exc_info=True)
        exit_code = EXIT_FAILURE

    logger.info(f"postlint finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
