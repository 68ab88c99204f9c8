# ==============================================================================
# User Aggregator - Pure Domain Logic
# ==============================================================================
"""
Per-identity roster built from a full list of page visits.

Visits are folded one at a time into a mapping of identity -> UserProfile.
Profiles are frozen; each step replaces the profile for the visit's identity
with an updated copy. The mapping itself is created fresh by every call, so
nothing is shared between calls.

Visits missing an identity, a visit time or a session id are skipped and
logged; they never raise.
"""

import logging
from collections.abc import Iterable
from functools import reduce

from pagevisits.core.dates import instant_sort_key, safe_parse_date
from pagevisits.core.models import UserProfile, VisitEvent

logger = logging.getLogger(__name__)


def _is_missing(value: object) -> bool:
    return value is None or value == ""


def is_valid_visit(visit: VisitEvent) -> bool:
    """True if the visit has an identity, a visit time and a session id."""
    return not any(_is_missing(v) for v in (visit.email, visit.visited_at, visit.session_id))


def _new_profile(visit: VisitEvent) -> UserProfile:
    return UserProfile(
        email=visit.email,
        visit_count=1,
        first_visit=visit.visited_at,
        last_visit=visit.visited_at,
        sessions=[visit.session_id],
    )


def _add_visit(profile: UserProfile, visit: VisitEvent) -> UserProfile:
    """
    Return a copy of profile updated with one more visit.

    The visit is always counted. first_visit/last_visit only move when both
    the incoming and the stored value normalize.
    """
    first_visit = profile.first_visit
    last_visit = profile.last_visit

    visit_time = visit.visit_time
    if visit_time is not None:
        incoming = instant_sort_key(visit_time)

        stored_last = safe_parse_date(last_visit)
        if stored_last is not None and incoming > instant_sort_key(stored_last):
            last_visit = visit.visited_at

        stored_first = safe_parse_date(first_visit)
        if stored_first is not None and incoming < instant_sort_key(stored_first):
            first_visit = visit.visited_at

    sessions = profile.sessions
    if visit.session_id not in sessions:
        sessions = [*sessions, visit.session_id]

    return profile.model_copy(
        update={
            "visit_count": profile.visit_count + 1,
            "first_visit": first_visit,
            "last_visit": last_visit,
            "sessions": sessions,
        }
    )


def _fold_visit(profiles: dict[str, UserProfile], visit: VisitEvent) -> dict[str, UserProfile]:
    if not is_valid_visit(visit):
        logger.warning(
            "Skipping invalid visit %s: email=%r visited_at=%r session_id=%r",
            visit.id,
            visit.email,
            visit.visited_at,
            visit.session_id,
        )
        return profiles

    current = profiles.get(visit.email)
    profiles[visit.email] = _new_profile(visit) if current is None else _add_visit(current, visit)
    return profiles


def compute_users(visits: Iterable[VisitEvent]) -> list[UserProfile]:
    """
    Build the user roster.

    Args:
        visits: All page visits

    Returns:
        One UserProfile per distinct identity, sorted by visit_count
        descending. Ties keep first-encountered order.
    """
    visits = list(visits)
    profiles = reduce(_fold_visit, visits, {})

    skipped = len(visits) - sum(profile.visit_count for profile in profiles.values())
    if skipped:
        logger.warning("Skipped %d of %d visits with missing fields", skipped, len(visits))

    return sorted(profiles.values(), key=lambda profile: profile.visit_count, reverse=True)


def lookup_user(users: Iterable[UserProfile], email: str) -> UserProfile | None:
    """Find the roster entry for an identity, or None."""
    return next((user for user in users if user.email == email), None)


def filter_by_identity(visits: Iterable[VisitEvent], email: str) -> list[VisitEvent]:
    """Visits whose identity matches email exactly, in input order."""
    return [visit for visit in visits if visit.email == email]
