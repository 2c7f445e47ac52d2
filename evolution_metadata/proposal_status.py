"""Proposal review status as a closed tagged union."""
from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

AWAITING_REVIEW = "awaitingReview"
SCHEDULED_FOR_REVIEW = "scheduledForReview"
ACTIVE_REVIEW = "activeReview"
ACCEPTED = "accepted"
ACCEPTED_WITH_REVISIONS = "acceptedWithRevisions"
PREVIEWING = "previewing"
IMPLEMENTED = "implemented"
RETURNED_FOR_REVISION = "returnedForRevision"
REJECTED = "rejected"
WITHDRAWN = "withdrawn"
ERROR = "error"

# Declaration order doubles as the sort order.
STATUS_STATES: tuple[str, ...] = (
    AWAITING_REVIEW,
    SCHEDULED_FOR_REVIEW,
    ACTIVE_REVIEW,
    ACCEPTED,
    ACCEPTED_WITH_REVISIONS,
    PREVIEWING,
    IMPLEMENTED,
    RETURNED_FOR_REVISION,
    REJECTED,
    WITHDRAWN,
    ERROR,
)

# Associated fields per state, in wire emission order.
STATE_FIELDS: dict[str, tuple[str, ...]] = {
    AWAITING_REVIEW: (),
    SCHEDULED_FOR_REVIEW: ("start", "end"),
    ACTIVE_REVIEW: ("start", "end"),
    ACCEPTED: (),
    ACCEPTED_WITH_REVISIONS: (),
    PREVIEWING: (),
    IMPLEMENTED: ("version",),
    RETURNED_FOR_REVISION: (),
    REJECTED: (),
    WITHDRAWN: (),
    ERROR: ("reason",),
}

FIELD_NAMES: tuple[str, ...] = ("version", "start", "end", "reason")


@total_ordering
@dataclass(frozen=True)
class ProposalStatus:
    state: str
    start: str | None = None
    end: str | None = None
    version: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.state not in STATE_FIELDS:
            raise ValueError(f"Unknown proposal status state '{self.state}'.")
        required = STATE_FIELDS[self.state]
        for name in FIELD_NAMES:
            value = getattr(self, name)
            if name in required and not isinstance(value, str):
                raise ValueError(f"Status '{self.state}' requires string field '{name}'.")
            if name not in required and value is not None:
                raise ValueError(f"Status '{self.state}' does not carry field '{name}'.")

    @property
    def fields(self) -> dict[str, str]:
        """Associated values in emission order."""
        return {name: getattr(self, name) for name in STATE_FIELDS[self.state]}

    @property
    def is_error(self) -> bool:
        return self.state == ERROR

    def _sort_key(self) -> tuple[int, tuple[str, ...]]:
        return STATUS_STATES.index(self.state), tuple(self.fields.values())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ProposalStatus):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if not self.fields:
            return self.state
        details = ", ".join(f"{name}: {value}" for name, value in self.fields.items())
        return f"{self.state}({details})"

    @classmethod
    def awaiting_review(cls) -> "ProposalStatus":
        return cls(AWAITING_REVIEW)

    @classmethod
    def scheduled_for_review(cls, start: str, end: str) -> "ProposalStatus":
        return cls(SCHEDULED_FOR_REVIEW, start=start, end=end)

    @classmethod
    def active_review(cls, start: str, end: str) -> "ProposalStatus":
        return cls(ACTIVE_REVIEW, start=start, end=end)

    @classmethod
    def accepted(cls) -> "ProposalStatus":
        return cls(ACCEPTED)

    @classmethod
    def accepted_with_revisions(cls) -> "ProposalStatus":
        return cls(ACCEPTED_WITH_REVISIONS)

    @classmethod
    def previewing(cls) -> "ProposalStatus":
        return cls(PREVIEWING)

    @classmethod
    def implemented(cls, version: str) -> "ProposalStatus":
        return cls(IMPLEMENTED, version=version)

    @classmethod
    def returned_for_revision(cls) -> "ProposalStatus":
        return cls(RETURNED_FOR_REVISION)

    @classmethod
    def rejected(cls) -> "ProposalStatus":
        return cls(REJECTED)

    @classmethod
    def withdrawn(cls) -> "ProposalStatus":
        return cls(WITHDRAWN)

    @classmethod
    def error(cls, reason: str) -> "ProposalStatus":
        return cls(ERROR, reason=reason)


STATUS_EXTRACTION_NOT_ATTEMPTED = ProposalStatus.error("Status extraction not attempted")
STATUS_EXTRACTION_FAILED = ProposalStatus.error("Status extraction failed")


def unknown_status(value: str) -> ProposalStatus:
    return ProposalStatus.error(f"Unknown status value '{value}'")
