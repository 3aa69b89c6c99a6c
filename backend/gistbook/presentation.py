"""
Gistbook - Presentation Aggregator
==================================

What:  Turns the subject list and the snippet list returned by the API into
       the board the UI renders: one section per subject, in subject order,
       followed by an "Uncategorized" section for orphaned snippets.
Who:   gistbook.client builds a Board after every refresh. The browser page
       (static/script.js) applies the same rules.

Rules:
    - Buckets follow the order of the subject list (the API returns it
      sorted by name).
    - A snippet goes to the subject its category refers to under
      validation.same_subject; otherwise to "Uncategorized".
    - Every subject gets a section, even an empty one. "Uncategorized" is
      shown only when it holds snippets.
    - Within a section snippets keep the API order (newest first).
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from gistbook.validation import fold_case

UNCATEGORIZED = "Uncategorized"

NO_SUBJECTS_MESSAGE = (
    'No subjects defined yet. Please add subjects via "Manage Subjects" '
    "to organize your gists."
)
NO_SNIPPETS_MESSAGE = "No gists yet. Be the first to create one!"

Snippet = Dict[str, Any]


def group_snippets(
    subject_names: Sequence[str],
    snippets: Iterable[Snippet],
) -> "OrderedDict[str, List[Snippet]]":
    """
    Bucket snippets by subject name.

    Returns an OrderedDict with one key per subject name, in the given order,
    plus a terminal UNCATEGORIZED key. If a real subject is itself named
    "Uncategorized" (any case), orphans are filed under that subject instead
    of a second bucket with the same title.
    """
    groups: "OrderedDict[str, List[Snippet]]" = OrderedDict(
        (name, []) for name in subject_names
    )
    by_key: Dict[str, str] = {}
    for name in subject_names:
        by_key.setdefault(fold_case(name), name)

    orphans: List[Snippet] = []
    for snippet in snippets:
        category = snippet.get("category")
        owner = by_key.get(fold_case(category)) if category else None
        if owner is None:
            orphans.append(snippet)
        else:
            groups[owner].append(snippet)

    existing = by_key.get(fold_case(UNCATEGORIZED))
    if existing is not None:
        groups[existing].extend(orphans)
    else:
        groups[UNCATEGORIZED] = orphans
    return groups


@dataclass
class Board:
    """Snapshot of the grouped view, rebuilt from scratch on every refresh."""

    subjects: List[Dict[str, Any]] = field(default_factory=list)
    snippets: List[Snippet] = field(default_factory=list)
    groups: "OrderedDict[str, List[Snippet]]" = field(default_factory=OrderedDict)

    @property
    def subject_names(self) -> List[str]:
        return [subject["name"] for subject in self.subjects]

    @property
    def has_snippets(self) -> bool:
        return any(self.groups.values())

    @property
    def sections(self) -> List[Tuple[str, List[Snippet]]]:
        """Sections to render: every subject, then Uncategorized if non-empty."""
        names = self.subject_names
        result = [(name, self.groups.get(name, [])) for name in names]
        orphans = self.groups.get(UNCATEGORIZED, [])
        if UNCATEGORIZED not in names and orphans:
            result.append((UNCATEGORIZED, orphans))
        return result

    @property
    def empty_message(self) -> Optional[str]:
        """The empty-state text to show instead of sections, if any."""
        if self.has_snippets:
            return None
        if not self.subjects:
            return NO_SUBJECTS_MESSAGE
        return NO_SNIPPETS_MESSAGE


def build_board(subjects: List[Dict[str, Any]], snippets: List[Snippet]) -> Board:
    names = [subject["name"] for subject in subjects]
    return Board(
        subjects=list(subjects),
        snippets=list(snippets),
        groups=group_snippets(names, snippets),
    )
