"""Reconstrucción auditable del libro a partir de un registro exportado.

Verifica la cadena de hashes y vuelve a aplicar cada entrada a través de
las operaciones públicas del libro; cada evento regenerado debe producir
exactamente el mismo hash que el registrado.

English:
    Auditable ledger rebuild from an exported event log.

    Verifies the hash chain and re-applies every entry through the public
    ledger operations; every regenerated event must produce exactly the
    recorded hash.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

import structlog

from .core.errors import LedgerResult
from .core.events import EventKind, LedgerEvent, verify_chain
from .core.identity import DEFAULT_NULL_IDENTITIES
from .ledger import ElectionLedger

logger = structlog.get_logger(__name__)


class _RecordedClock:
    """Devuelve las marcas de tiempo registradas en orden. / Yields recorded timestamps in order."""

    def __init__(self, timestamps: Iterable[int]):
        self._pending: Deque[int] = deque(timestamps)

    def __call__(self) -> int:
        if not self._pending:
            raise ValueError("Replay clock exhausted")
        return self._pending.popleft()


def _apply(ledger: ElectionLedger, event: LedgerEvent) -> LedgerResult:
    payload = event.payload
    owner = ledger.owner
    if event.kind is EventKind.CANDIDATE_REGISTERED:
        return ledger.register_candidate(owner, payload["name"], payload["party"], payload["description"])
    if event.kind is EventKind.VOTER_AUTHORIZED:
        return ledger.authorize_voter(owner, payload["voter"])
    if event.kind is EventKind.ELECTION_STARTED:
        return ledger.start_election(owner)
    if event.kind is EventKind.ELECTION_ENDED:
        return ledger.end_election(owner)
    if event.kind is EventKind.VOTE_CAST:
        return ledger.vote(payload["voter"], payload["candidate_id"])
    return ledger.transfer_ownership(payload["previous_owner"], payload["new_owner"])


def replay_events(
    owner: str,
    events: Iterable[LedgerEvent],
    *,
    null_identities: Iterable[str] = DEFAULT_NULL_IDENTITIES,
    election_id: Optional[str] = None,
) -> ElectionLedger:
    """Reconstruye un ``ElectionLedger`` desde sus eventos.

    Args:
        owner (str): Propietario inicial del libro original.
        events (Iterable[LedgerEvent]): Registro completo, desde la secuencia 0.

    Returns:
        ElectionLedger: Libro con el mismo estado y el mismo hash de cabeza.

    Raises:
        ValueError: Si la cadena está rota o alguna entrada es rechazada o
            diverge del hash registrado.

    English:
        Rebuilds an ``ElectionLedger`` from its events.

    Args:
        owner (str): Initial owner of the original ledger.
        events (Iterable[LedgerEvent]): Full log, starting at sequence 0.

    Returns:
        ElectionLedger: Ledger with the same state and head hash.

    Raises:
        ValueError: When the chain is broken, or an entry is rejected or
            diverges from its recorded hash.
    """
    entries: List[LedgerEvent] = list(events)
    verification = verify_chain(entries)
    if not verification.valid:
        raise ValueError(f"Event chain broken at index {verification.broken_at}: {verification.errors}")

    clock = _RecordedClock(
        event.payload["timestamp"] for event in entries if event.kind is EventKind.VOTE_CAST
    )
    ledger = ElectionLedger(owner, clock=clock, null_identities=null_identities, election_id=election_id)

    for event in entries:
        result = _apply(ledger, event)
        if not result.ok:
            raise ValueError(f"Replay rejected event {event.sequence} ({event.kind.value}): {result.error}")
        if result.event is None or result.event.hash != event.hash:
            raise ValueError(f"Replay diverged at event {event.sequence} ({event.kind.value})")

    logger.info("ledger_replayed", events=len(entries), head_hash=ledger.head_hash)
    return ledger
