"""
Hospital value object.

The roster holds patient identifiers only; full patient records are resolved
through the patient repository when a caller needs them.
"""

from dataclasses import dataclass, field
from typing import Tuple
from uuid import UUID


@dataclass(frozen=True)
class Hospital:
    id: int
    name: str
    patient_ids: Tuple[UUID, ...] = field(default_factory=tuple)
