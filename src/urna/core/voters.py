# Voters Module
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

"""Registro de votantes: autorización única y estado de voto por identidad.

English:
    Voter registry: one-time authorization and vote status per identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ErrorKind, LedgerError, LedgerRejection
from .identity import normalize_identity
from .models import VoterRecord

_UNREGISTERED = VoterRecord()


@dataclass(frozen=True)
class BatchAuthorization:
    """Resultado de autorizar varias identidades en una sola llamada.

    English: Outcome of authorizing several identities in one call.
    """

    authorized: Tuple[str, ...]
    failed: Tuple[Tuple[Any, LedgerError], ...]


def check_batch(voters: Any) -> Sequence[Any]:
    if not isinstance(voters, (list, tuple)):
        raise LedgerRejection(ErrorKind.INVALID_INPUT, "voters must be a list of identities")
    if not voters:
        raise LedgerRejection(ErrorKind.INVALID_INPUT, "voters cannot be empty")
    return voters


class VoterRegistry:
    """Registros por identidad más la lista en orden de autorización.

    English: Per-identity records plus the list in authorization order.
    """

    def __init__(self) -> None:
        self._records: Dict[str, VoterRecord] = {}
        self._order: List[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def get(self, identity: object) -> VoterRecord:
        normalized = normalize_identity(identity)
        if normalized is None:
            return _UNREGISTERED
        return self._records.get(normalized, _UNREGISTERED)

    def check_authorization(self, voter: str) -> None:
        if self.get(voter).is_registered:
            raise LedgerRejection(ErrorKind.ALREADY_AUTHORIZED, "Already authorized")

    def authorize(self, voter: str) -> VoterRecord:
        record = VoterRecord(is_registered=True)
        self._records[voter] = record
        self._order.append(voter)
        return record

    def require_registered(self, caller: object) -> VoterRecord:
        """Devuelve el registro del llamador o lanza ``UNAUTHORIZED``.

        English: Return the caller record or raise ``UNAUTHORIZED``.
        """
        record = self.get(caller)
        if not record.is_registered:
            raise LedgerRejection(ErrorKind.UNAUTHORIZED, "Voter not authorized")
        return record

    def record_vote(self, voter: str, candidate_id: int, timestamp: int) -> VoterRecord:
        record = VoterRecord(
            is_registered=True,
            has_voted=True,
            voted_candidate_id=candidate_id,
            timestamp=timestamp,
        )
        self._records[voter] = record
        return record

    def identities(self) -> List[str]:
        return list(self._order)

    def at(self, index: int) -> Optional[str]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self._order):
            return self._order[index]
        return None
