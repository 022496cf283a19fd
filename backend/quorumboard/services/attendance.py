"""Attendance aggregation for a single candidate date.

Pure functions only: callers load the room's response and guest rows and
fold them here after every write, so the tally is always recomputed from the
full row set rather than maintained incrementally.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from quorumboard.models.candidate import ResponseStatus


@dataclass(frozen=True)
class AttendanceTally:
    yes_members: int
    maybe: int
    no: int
    guest_count: int
    yes_total: int
    minimum: int
    quorum_reached: bool

    @property
    def remaining(self) -> int:
        """How many more affirmative attendees are needed (0 once reached)."""
        return max(0, self.minimum - self.yes_total)


def tally_candidate(
    responses: Iterable[Any],
    guests: Iterable[Any],
    candidate_id: str,
    minimum: int,
) -> AttendanceTally:
    """Count responses and guests for ``candidate_id`` and compare against ``minimum``.

    ``responses`` need ``candidate_id`` and ``status``; ``guests`` need
    ``candidate_id``. Rows for other candidates are ignored, so the whole
    room's rows may be passed in. Members without a row are not counted at
    all, and guests without a candidate never count.
    """
    yes_members = maybe = no = 0
    for r in responses:
        if r.candidate_id != candidate_id:
            continue
        status = ResponseStatus(r.status)
        if status == ResponseStatus.yes:
            yes_members += 1
        elif status == ResponseStatus.maybe:
            maybe += 1
        else:
            no += 1

    guest_count = sum(1 for g in guests if g.candidate_id is not None and g.candidate_id == candidate_id)
    yes_total = yes_members + guest_count
    return AttendanceTally(
        yes_members=yes_members,
        maybe=maybe,
        no=no,
        guest_count=guest_count,
        yes_total=yes_total,
        minimum=minimum,
        quorum_reached=yes_total >= minimum,
    )


def status_of(responses: Iterable[Any], candidate_id: str, user_id: str) -> Optional[ResponseStatus]:
    """Return ``user_id``'s status for the candidate, or None when they have not answered."""
    for r in responses:
        if r.candidate_id == candidate_id and r.user_id == user_id:
            return ResponseStatus(r.status)
    return None
