"""Registro de eventos encadenado por hashes (append-only).

Cada llamada exitosa que muta el libro añade exactamente una entrada. Las
entradas son inmutables y cada una enlaza el hash de la anterior, de modo
que cualquier edición, reordenamiento o borrado es detectable.

English:
    Hash-chained, append-only event log.

    Every successful mutating call appends exactly one entry. Entries are
    immutable and each one links the previous hash, so any edit, reorder or
    deletion is detectable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .hashchain import GENESIS_HASH, canonical_json, compute_hash

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Tipos de evento emitidos por el libro. / Event kinds emitted by the ledger."""

    CANDIDATE_REGISTERED = "CandidateRegistered"
    VOTER_AUTHORIZED = "VoterAuthorized"
    ELECTION_STARTED = "ElectionStarted"
    ELECTION_ENDED = "ElectionEnded"
    VOTE_CAST = "VoteCast"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


EVENT_FIELDS: Dict[EventKind, tuple[str, ...]] = {
    EventKind.CANDIDATE_REGISTERED: ("id", "name", "party", "description"),
    EventKind.VOTER_AUTHORIZED: ("voter",),
    EventKind.ELECTION_STARTED: (),
    EventKind.ELECTION_ENDED: (),
    EventKind.VOTE_CAST: ("voter", "candidate_id", "timestamp"),
    EventKind.OWNERSHIP_TRANSFERRED: ("previous_owner", "new_owner"),
}


def event_body(sequence: int, kind: EventKind, payload: Mapping[str, Any]) -> str:
    """JSON canónico del contenido hasheado de una entrada.

    English: Canonical JSON of the hashed content of an entry.
    """
    return canonical_json({"sequence": sequence, "kind": kind.value, "payload": dict(payload)})


@dataclass(frozen=True)
class LedgerEvent:
    """Entrada inmutable del registro. / Immutable log entry."""

    sequence: int
    kind: EventKind
    payload: Mapping[str, Any]
    previous_hash: str
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence": self.sequence,
            "kind": self.kind.value,
            "payload": dict(self.payload),
            "previous_hash": self.previous_hash,
            "hash": self.hash,
        }


def build_event(
    sequence: int,
    kind: EventKind,
    payload: Mapping[str, Any],
    previous_hash: str,
) -> LedgerEvent:
    """Construye una entrada enlazada sin añadirla a ningún registro.

    English: Build a linked entry without appending it to any log.
    """
    expected = EVENT_FIELDS[kind]
    if tuple(sorted(payload)) != tuple(sorted(expected)):
        raise ValueError(f"{kind.value} payload must have fields {expected}, got {tuple(payload)}")
    frozen_payload = MappingProxyType(dict(payload))
    digest = compute_hash(event_body(sequence, kind, frozen_payload), previous_hash or None)
    return LedgerEvent(
        sequence=sequence,
        kind=kind,
        payload=frozen_payload,
        previous_hash=previous_hash,
        hash=digest,
    )


class EventLog:
    """Secuencia append-only de ``LedgerEvent``.

    No es segura entre hilos por sí misma; el libro la protege con su lock.

    English:
        Append-only sequence of ``LedgerEvent``.

        Not thread-safe on its own; the ledger guards it with its lock.
    """

    def __init__(self) -> None:
        self._entries: List[LedgerEvent] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(list(self._entries))

    @property
    def head_hash(self) -> str:
        return self._entries[-1].hash if self._entries else GENESIS_HASH

    def prepare(self, kind: EventKind, payload: Mapping[str, Any]) -> LedgerEvent:
        """Construye la siguiente entrada sin confirmarla. / Build the next entry without committing it."""
        return build_event(len(self._entries), kind, payload, self.head_hash)

    def commit(self, event: LedgerEvent) -> None:
        if event.sequence != len(self._entries) or event.previous_hash != self.head_hash:
            raise ValueError(f"Event {event.sequence} does not extend the log head")
        self._entries.append(event)

    def since(self, offset: int = 0) -> List[LedgerEvent]:
        if offset < 0:
            raise ValueError("offset must be non-negative")
        return self._entries[offset:]


@dataclass(frozen=True)
class ChainVerification:
    """Resultado de verificar toda la cadena. / Result of full chain verification."""

    valid: bool
    total_links: int
    verified_links: int
    broken_at: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    head_hash: str = GENESIS_HASH


def verify_chain(events: Iterable[LedgerEvent]) -> ChainVerification:
    """Recorre todas las entradas y verifica la integridad de la cadena.

    Para cada entrada n confirma que la secuencia es n, que
    ``previous_hash[n] == hash[n-1]`` y que el hash almacenado coincide
    con el recalculado sobre su contenido.

    English:
        Walks every entry and verifies chain integrity.

        For each entry n, confirms the sequence is n, that
        ``previous_hash[n] == hash[n-1]`` and that the stored hash matches
        the one recomputed over its content.
    """
    entries = list(events)
    previous_hash = GENESIS_HASH
    verified = 0

    for idx, event in enumerate(entries):
        error: Optional[str] = None
        if event.sequence != idx:
            error = f"sequence_mismatch index={idx} sequence={event.sequence}"
        elif event.previous_hash != previous_hash:
            error = f"previous_hash_mismatch index={idx}"
        else:
            expected = compute_hash(
                event_body(event.sequence, event.kind, event.payload),
                previous_hash or None,
            )
            if expected != event.hash:
                error = f"hash_mismatch index={idx} expected={expected[:16]}... stored={event.hash[:16]}..."

        if error is not None:
            logger.warning("eventlog_chain_broken %s", error)
            return ChainVerification(
                valid=False,
                total_links=len(entries),
                verified_links=verified,
                broken_at=idx,
                errors=[error],
                head_hash=previous_hash,
            )

        verified += 1
        previous_hash = event.hash

    return ChainVerification(
        valid=True,
        total_links=len(entries),
        verified_links=verified,
        head_hash=previous_hash,
    )
