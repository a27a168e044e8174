# Errors Module
# AUTO-DOC-INDEX
#
# ES: Índice rápido
#   1) Propósito del módulo
#   2) Componentes principales
#   3) Puntos de extensión
#
# EN: Quick index
#   1) Module purpose
#   2) Main components
#   3) Extension points
#
# Secciones / Sections:
#   - Configuración / Configuration
#   - Lógica principal / Core logic
#   - Integraciones / Integrations

"""Taxonomía de rechazos y resultado etiquetado de las operaciones.

Toda llamada rechazada deja el libro exactamente como estaba; el motivo
viaja en un ``LedgerResult`` fallido en lugar de propagarse como excepción.

English:
    Rejection taxonomy and tagged result of ledger operations.

    Every rejected call leaves the ledger exactly as it was; the reason
    travels in a failed ``LedgerResult`` instead of propagating as an
    exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from .events import LedgerEvent

T = TypeVar("T")


class ErrorKind(Enum):
    """Motivos tipados de rechazo.

    English: Typed rejection reasons.
    """

    UNAUTHORIZED = "unauthorized"
    ALREADY_AUTHORIZED = "already_authorized"
    ALREADY_STARTED = "already_started"
    ALREADY_VOTED = "already_voted"
    NOT_ACTIVE = "not_active"
    NO_CANDIDATES = "no_candidates"
    INVALID_CANDIDATE = "invalid_candidate"
    INVALID_INPUT = "invalid_input"
    INVALID_IDENTITY = "invalid_identity"
    ELECTION_NOT_ENDED = "election_not_ended"


@dataclass(frozen=True)
class LedgerError:
    """Rechazo tipado devuelto al llamador. / Typed rejection returned to the caller."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class LedgerRejection(Exception):
    """Raised by validators; converted to a failed ``LedgerResult`` by the ledger."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"[{kind.value}] {message}")

    def to_error(self) -> LedgerError:
        return LedgerError(kind=self.kind, message=self.message)


@dataclass(frozen=True)
class LedgerResult(Generic[T]):
    """Resultado etiquetado: éxito con valor (y evento) o fallo con motivo.

    Attributes:
        ok (bool): True si la llamada se aplicó.
        value (Optional[T]): Valor devuelto en éxito.
        error (Optional[LedgerError]): Motivo del rechazo en fallo.
        event (Optional[LedgerEvent]): Entrada añadida al registro, si la hubo.

    English:
        Tagged result: success with a value (and event) or failure with a reason.

    Attributes:
        ok (bool): True when the call was applied.
        value (Optional[T]): Returned value on success.
        error (Optional[LedgerError]): Rejection reason on failure.
        event (Optional[LedgerEvent]): Log entry appended, if any.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[LedgerError] = None
    event: Optional["LedgerEvent"] = None

    @classmethod
    def success(cls, value: T, event: Optional["LedgerEvent"] = None) -> "LedgerResult[T]":
        return cls(ok=True, value=value, event=event)

    @classmethod
    def failure(cls, error: LedgerError) -> "LedgerResult[T]":
        return cls(ok=False, error=error)

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None
