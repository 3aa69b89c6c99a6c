"""
Gistbook Backend - Validation & Integrity Rules
===============================================

What:  Pure functions implementing the input rules and the subject
       integrity rules. No store access, no I/O.
Who:   SnippetService and SubjectService call them before any mutating store
       call; gistbook.presentation and gistbook.client reuse the matching rule.

Matching rule:
    A snippet's category refers to a subject when the two strings are equal
    ignoring case (`same_subject`). Whitespace is significant: " Math" does
    not refer to "Math". The duplicate check, the delete guard, the
    "snippets by subject" query and the grouping of the board all use this
    one rule. The SQL side calls the same `fold_case` through the `fold()`
    function that RecordStore registers on every SQLite connection, so
    non-ASCII letters ("Élan" / "élan") match in SQL exactly as in Python.
"""

from typing import Any, Iterable, Mapping, Optional

from gistbook.exceptions import MissingFieldError

SNIPPET_FIELDS = ("title", "category", "content")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def fold_case(value: Optional[str]) -> Optional[str]:
    """Case-fold key used for every subject-name comparison. NULL stays NULL."""
    if value is None:
        return None
    return value.lower()


def same_subject(a: str, b: str) -> bool:
    """True if `a` and `b` name the same subject."""
    return fold_case(a) == fold_case(b)


def validate_snippet_input(
    title: Optional[str],
    category: Optional[str],
    content: Optional[str],
) -> None:
    """
    Check that all three snippet fields are present and non-empty.

    Whitespace-only values count as empty. Accepted values are stored as
    given; nothing is trimmed.

    Raises:
        MissingFieldError: naming the first missing field
    """
    values = {"title": title, "category": category, "content": content}
    for field in SNIPPET_FIELDS:
        if _is_blank(values[field]):
            raise MissingFieldError(
                message="Title, category, and content are required.",
                field=field,
            )


def validate_subject_name(name: Optional[str]) -> str:
    """
    Trim a submitted subject name and make sure something is left.

    Returns:
        The trimmed name, which is what gets stored.

    Raises:
        MissingFieldError: name is absent or blank
    """
    if _is_blank(name):
        raise MissingFieldError(message="Subject name is required.", field="name")
    return name.strip()


def is_duplicate_subject(name: str, existing_names: Iterable[str]) -> bool:
    """True if `name` matches any existing subject name ignoring case."""
    return any(same_subject(name, existing) for existing in existing_names)


def count_referencing(subject_name: str, snippets: Iterable[Mapping[str, Any]]) -> int:
    """Number of snippets whose category refers to `subject_name`."""
    return sum(
        1 for snippet in snippets
        if snippet.get("category") is not None
        and same_subject(snippet["category"], subject_name)
    )


def can_delete_subject(subject_name: str, snippets: Iterable[Mapping[str, Any]]) -> bool:
    """
    True iff no snippet refers to `subject_name`.

    When this is False the caller reports the blocking count
    (see count_referencing and SubjectInUseError).
    """
    return count_referencing(subject_name, snippets) == 0
