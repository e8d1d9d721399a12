"""
Territory Resolver

Builds the "owner" and "group owner" display strings shown for a machine
from its categorized territory assignments.

Only assignments in the requested category contribute. Every matching row
overwrites the previous result, so with several matches the LAST one in the
list wins. This mirrors long-standing production output and is pinned by
tests; do not switch it to first-match without product sign-off.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .config import MergeSettings
from .models import TerritoryAssignment

OWNER_TRACK = ('territory_name', 'territory_owner')
GROUP_TRACK = ('group_name', 'group_owner')


@dataclass(frozen=True)
class TerritoryDisplay:
    owner: str = ''
    group_owner: str = ''
    territory_name: str = ''
    group_name: str = ''


def is_general(name: str, general_label: str = 'General') -> bool:
    return name.strip().lower() == general_label.lower()


def _compose(name: Optional[str], owner: Optional[str], general_label: str) -> str:
    name_text = name or ''
    if is_general(name_text, general_label):
        return general_label
    joiner = '-' if name_text and owner else ''
    return name_text + joiner + (owner or '')


def resolve_track(assignments: Optional[Iterable[TerritoryAssignment]], category_id: str,
                  track: Tuple[str, str] = OWNER_TRACK,
                  general_label: str = 'General') -> str:
    """
    Resolve one display string (owner or group owner track).

    Args:
        assignments: Territory rows in the order received, or None
        category_id: Category whose rows are eligible
        track: Pair of attribute names (name, owner) to read
        general_label: Sentinel that replaces "General" territories

    Returns:
        Display string, empty when nothing matched
    """
    if not assignments:
        return ''

    name_attr, owner_attr = track
    result = ''
    for assignment in assignments:
        if assignment.category_id != str(category_id):
            continue
        result = _compose(getattr(assignment, name_attr), getattr(assignment, owner_attr), general_label)
    return result


def _last_match(assignments, category_id: str) -> Optional[TerritoryAssignment]:
    match = None
    for assignment in assignments or ():
        if assignment.category_id == str(category_id):
            match = assignment
    return match


def resolve_territory(assignments: Optional[Iterable[TerritoryAssignment]], category_id: str,
                      settings: Optional[MergeSettings] = None) -> TerritoryDisplay:
    """Resolve both display tracks plus the raw names of the winning row."""
    settings = settings or MergeSettings()
    assignments = list(assignments) if assignments else []
    label = settings.general_label
    match = _last_match(assignments, category_id)

    return TerritoryDisplay(
        owner=resolve_track(assignments, category_id, OWNER_TRACK, label),
        group_owner=resolve_track(assignments, category_id, GROUP_TRACK, label),
        territory_name=(match.territory_name or '') if match else '',
        group_name=(match.group_name or '') if match else '',
    )
