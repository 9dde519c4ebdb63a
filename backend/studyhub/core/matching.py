"""Match Filters: pure rules for which levels satisfy a match query."""

from studyhub.core.domain_types import GroupLevel, MatchType


def resolve_match_type(raw: str | None) -> MatchType:
    """Anything other than "group" searches users."""
    return MatchType.GROUP if raw == MatchType.GROUP.value else MatchType.USER


def group_levels_for(level: str | None) -> list[str] | None:
    """Levels a group may have to match the requested level.

    Mixed groups match every level. None means no level filter.
    """
    if not level:
        return None
    if level == GroupLevel.MIXED.value:
        return [GroupLevel.MIXED.value]
    return [level, GroupLevel.MIXED.value]
