"""
VerificationResult value object - outcome of one sign-in attempt.
"""

from dataclasses import dataclass
from typing import Optional

from gardien.domain.value_objects.failure_reason import FailureReason
from gardien.domain.value_objects.identity import Identity


@dataclass(frozen=True)
class VerificationResult:
    """Either Ok(identity) or Err(reason), never both."""

    identity: Optional[Identity] = None
    reason: Optional[FailureReason] = None

    def __post_init__(self):
        if (self.identity is None) == (self.reason is None):
            raise ValueError("Exactly one of identity or reason must be set")

    @classmethod
    def ok(cls, identity: Identity) -> "VerificationResult":
        return cls(identity=identity)

    @classmethod
    def rejected(cls, reason: FailureReason) -> "VerificationResult":
        return cls(reason=reason)

    @property
    def authenticated(self) -> bool:
        return self.identity is not None
