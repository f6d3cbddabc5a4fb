"""
Patient admission lifecycle.

    New ──store──▶ OnWaitlist ──admit──▶ AdmittedTo(hospital)
                       ▲                        │
                       └───────remove───────────┘

New: not yet persisted. OnWaitlist: persisted, unassigned.
AdmittedTo: assigned to exactly one hospital, by name.
Any other transition is a programming error and raises IllegalTransitionError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IllegalTransitionError(RuntimeError):
    """A caller asked for a lifecycle transition the state machine forbids."""


class StatusKind(str, Enum):
    NEW = "new"
    ON_WAITLIST = "on_waitlist"
    ADMITTED = "admitted"


@dataclass(frozen=True)
class AdmissionStatus:
    kind: StatusKind
    hospital: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is StatusKind.ADMITTED and not self.hospital:
            raise ValueError("An admitted status needs a hospital name")
        if self.kind is not StatusKind.ADMITTED and self.hospital is not None:
            raise ValueError(f"Status {self.kind.value} cannot carry a hospital name")

    @classmethod
    def new(cls) -> "AdmissionStatus":
        return cls(StatusKind.NEW)

    @classmethod
    def on_waitlist(cls) -> "AdmissionStatus":
        return cls(StatusKind.ON_WAITLIST)

    @classmethod
    def admitted_to(cls, hospital: str) -> "AdmissionStatus":
        return cls(StatusKind.ADMITTED, hospital)

    @property
    def is_new(self) -> bool:
        return self.kind is StatusKind.NEW

    @property
    def is_waitlisted(self) -> bool:
        return self.kind is StatusKind.ON_WAITLIST

    @property
    def is_admitted(self) -> bool:
        return self.kind is StatusKind.ADMITTED

    def to_waitlist(self) -> "AdmissionStatus":
        """First store of a new patient, or removal from a hospital."""
        if self.is_waitlisted:
            raise IllegalTransitionError("Patient is already on the waitlist")
        return AdmissionStatus.on_waitlist()

    def admit(self, hospital: str) -> "AdmissionStatus":
        if not self.is_waitlisted:
            raise IllegalTransitionError(f"Cannot admit a patient who is {self}")
        return AdmissionStatus.admitted_to(hospital)

    def __str__(self) -> str:
        if self.is_admitted:
            return f"admitted to {self.hospital}"
        if self.is_waitlisted:
            return "on waitlist"
        return "new patient"
