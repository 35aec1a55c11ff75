"""
Content Lists and Authoring Conventions for postlint

This module contains the front-matter contract, the repeated authoring
template, and other content patterns used by the linting rules.
Kept apart from settings.py to separate data from configuration logic.
"""

# Front-matter keys consumed by the static site generator
REQUIRED_FRONT_MATTER_KEYS = [
    "title",
    "date",
    "categories",
    "tags",
]

OPTIONAL_FRONT_MATTER_KEYS = [
    "mermaid",      # diagram rendering toggle
    "toc",          # table-of-contents toggle
]

# Keys that must hold YAML booleans when present
BOOLEAN_FRONT_MATTER_KEYS = [
    "mermaid",
    "toc",
]

# Keys commonly carried by Jekyll themes; reported as unknown only when not listed here
KNOWN_EXTRA_FRONT_MATTER_KEYS = [
    "layout",
    "author",
    "description",
    "image",
    "pin",
    "math",
    "comments",
    "permalink",
    "published",
    "last_modified_at",
]

# Sections of the repeated post template, matched case-insensitively against heading text
TEMPLATE_SECTION_PATTERNS = {
    "Introduction": r"\b(introduction|overview)\b",
    "What is": r"^\s*(what\s+is|what\s+are|understanding)\b",
    "Causes": r"\b(causes?|reasons?|why\b.*\boccur)",
    "Handling": r"\b(handl(e|ing)|resolv(e|ing)|fix(ing)?|troubleshoot(ing)?|mitigat(e|ing)|best\s+practices?)\b",
    "Code Examples": r"\b(code|example|examples|snippets?|sample)\b",
    "Conclusion": r"\b(conclusion|summary|wrapping\s+up)\b",
    "References": r"\b(references?|further\s+reading|resources|see\s+also)\b",
}

# AWS SDK exception class names discussed in post titles
EXCEPTION_NAME_PATTERN = r"\b([A-Z][A-Za-z0-9]*(?:Exception|Error|Fault))\b"

# Common English words ignored when comparing titles
TITLE_STOP_WORDS = [
    "the", "and", "for", "with", "from", "into", "what", "when", "how",
    "why", "your", "you", "are", "this", "that", "aws", "sdk", "understanding",
    "handling", "guide",
]
