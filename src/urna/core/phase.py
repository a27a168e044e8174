"""Máquina de fases monotónica: NotStarted → Active → Ended.

English:
    Monotonic phase machine: NotStarted → Active → Ended.
"""

from __future__ import annotations

from .errors import ErrorKind, LedgerRejection
from .models import ElectionPhase


class PhaseMachine:
    """Guarda la fase actual y valida transiciones de un solo uso.

    English: Holds the current phase and validates one-shot transitions.
    """

    def __init__(self) -> None:
        self._phase = ElectionPhase.NOT_STARTED

    @property
    def phase(self) -> ElectionPhase:
        return self._phase

    def require(self, expected: ElectionPhase, kind: ErrorKind, message: str) -> None:
        if self._phase is not expected:
            raise LedgerRejection(kind, message)

    def check_start(self, candidate_count: int) -> None:
        self.require(ElectionPhase.NOT_STARTED, ErrorKind.ALREADY_STARTED, "Already started")
        if candidate_count <= 0:
            raise LedgerRejection(ErrorKind.NO_CANDIDATES, "No candidates")

    def check_end(self) -> None:
        self.require(ElectionPhase.ACTIVE, ErrorKind.NOT_ACTIVE, "Not active")

    def advance(self) -> ElectionPhase:
        # Only ever called after check_start/check_end.
        self._phase = ElectionPhase(self._phase + 1)
        return self._phase
