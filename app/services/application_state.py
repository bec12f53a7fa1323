"""Application status workflow: the transition table and the machine applying it."""

from collections.abc import Callable, Mapping
from datetime import datetime
from types import MappingProxyType

from app.exceptions import IllegalTransitionError
from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.utils.clock import utc_now

# Single source of truth for legal status changes
TRANSITIONS: Mapping[ApplicationStatus, frozenset[ApplicationStatus]] = MappingProxyType(
    {
        ApplicationStatus.PENDING: frozenset(
            {
                ApplicationStatus.ACCEPTED,
                ApplicationStatus.REJECTED,
                ApplicationStatus.WITHDRAWN,
            }
        ),
        ApplicationStatus.ACCEPTED: frozenset(
            {ApplicationStatus.COMPLETED, ApplicationStatus.WITHDRAWN}
        ),
        ApplicationStatus.REJECTED: frozenset(),
        ApplicationStatus.WITHDRAWN: frozenset(),
        ApplicationStatus.COMPLETED: frozenset(),
    }
)

# Targets that record a review decision
REVIEW_STATUSES = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED})


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Return True if `current -> target` is an edge of the transition table."""
    return target in TRANSITIONS.get(current, frozenset())


def allowed_transitions(status: ApplicationStatus) -> list[ApplicationStatus]:
    """Statuses reachable from `status` in one step, in declaration order."""
    reachable = TRANSITIONS.get(status, frozenset())
    return [s for s in ApplicationStatus if s in reachable]


def is_terminal(status: ApplicationStatus) -> bool:
    return not TRANSITIONS.get(status)


class ApplicationStateMachine:
    """
    Validates status changes and computes the resulting application value.

    The machine never touches persistence: `apply_transition` returns a new,
    detached Application and the caller decides how to store it.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def can_transition(
        self, current: ApplicationStatus, target: ApplicationStatus
    ) -> bool:
        return can_transition(current, target)

    def apply_transition(
        self,
        application: Application,
        target: ApplicationStatus,
        review_notes: str | None = None,
    ) -> Application:
        """
        Move `application` to `target`.

        Accepting or rejecting stamps `reviewed_at` with the clock and stores
        `review_notes`. Withdrawing and completing keep the review fields as
        they are.

        Parameters:
            application: Current application; left unmodified.
            target: Requested status.
            review_notes: Reviewer comment, only used for accept/reject.

        Returns:
            Application: A new instance carrying the updated fields.

        Raises:
            IllegalTransitionError: If the move is not in TRANSITIONS.
        """
        current = application.status
        if not can_transition(current, target):
            raise IllegalTransitionError(current, target)

        changes: dict[str, object] = {"status": target}
        if target in REVIEW_STATUSES:
            changes["reviewed_at"] = self._clock()
            changes["review_notes"] = review_notes

        # Nothing is stored here; the caller logs once its write succeeds
        return Application(**(application.model_dump() | changes))
