import re
from typing import Iterable, Optional, Tuple

from progressreport.core.models import SubjectDefinition, SubjectMark


_NON_ALNUM = re.compile(r"[^a-z0-9]")

# Equivalence groups, stored in normalized form ("English - II" -> "englishii").
SUBJECT_ALIASES: Tuple[frozenset, ...] = (
    frozenset({"math", "maths", "mathematics"}),
    frozenset({"english", "englishi", "engi"}),
    frozenset({"englishii", "engii"}),
    frozenset({"socialstudies", "socialscience"}),
    frozenset({"spellings", "spelling"}),
    frozenset({"rhymes", "rhyme"}),
)


def normalize_subject_name(name: Optional[str]) -> str:
    if not name:
        return ""
    return _NON_ALNUM.sub("", name.strip().casefold())


def subjects_match(first: Optional[str], second: Optional[str]) -> bool:
    a = normalize_subject_name(first)
    b = normalize_subject_name(second)
    if not a or not b:
        return False
    if a == b:
        return True
    return any(a in group and b in group for group in SUBJECT_ALIASES)


def find_subject_mark(
    results: Optional[Iterable[SubjectMark]],
    subject_def: Optional[SubjectDefinition],
) -> Optional[SubjectMark]:
    """Return the first recorded mark whose subject resolves to ``subject_def``.

    Missing inputs and unmatched names give ``None``; callers score that as zero.
    """
    if not results or subject_def is None or not subject_def.name:
        return None
    for mark in results:
        if subjects_match(subject_def.name, mark.subject):
            return mark
    return None
