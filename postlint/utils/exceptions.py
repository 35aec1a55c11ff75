"""
Custom Exception Classes for postlint

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""


class PostLintError(Exception):
    """Base exception for all postlint application errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(PostLintError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Corpus Errors
# =============================================================================

class CorpusError(PostLintError):
    """Base exception for errors reading the post corpus."""
    pass


class PostReadError(CorpusError):
    """Raised when a post file cannot be read or decoded."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class FrontMatterError(CorpusError):
    """Base exception for front-matter problems."""

    def __init__(self, message: str, line: int = None):
        super().__init__(message)
        self.line = line


class FrontMatterMissingError(FrontMatterError):
    """Raised when a post does not start with a front-matter block."""
    pass


class FrontMatterParseError(FrontMatterError):
    """Raised when the front-matter block is unclosed or is not a YAML mapping."""
    pass


# =============================================================================
# Output Errors
# =============================================================================

class ExportError(PostLintError):
    """Raised when the corpus index cannot be written."""
    pass


class RenderError(PostLintError):
    """Raised when a post cannot be rendered to HTML."""
    pass


# =============================================================================
# Network Errors
# =============================================================================

class LinkCheckError(PostLintError):
    """Raised when link checking cannot run at all."""
    pass
