"""
Authentication outcomes.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Success:
    user: Any
    info: Any = None


@dataclass(frozen=True)
class Fail:
    info: Any = None


@dataclass(frozen=True)
class Error:
    cause: BaseException


AuthenticationOutcome = Union[Success, Fail, Error]


class OutcomeRecorder:
    """AuthenticationActions implementation that keeps the reported outcome.
    
    A recorder belongs to a single attempt; reporting twice is a bug in the
    caller and raises ``RuntimeError``.
    """
    
    def __init__(self):
        self.outcome: Optional[AuthenticationOutcome] = None
    
    def _record(self, outcome: AuthenticationOutcome) -> None:
        if self.outcome is not None:
            raise RuntimeError(f"Outcome already reported: {self.outcome!r}")
        self.outcome = outcome
    
    def success(self, user: Any, info: Any = None) -> None:
        self._record(Success(user, info))
    
    def fail(self, info: Any = None) -> None:
        self._record(Fail(info))
    
    def error(self, err: BaseException) -> None:
        self._record(Error(err))
    
    @property
    def reported(self) -> bool:
        return self.outcome is not None
