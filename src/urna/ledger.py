"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/urna/ledger.py`.
Este módulo forma parte de Urna y está documentado para facilitar
la navegación, mantenimiento y auditoría técnica.

Componentes detectados:
  - ElectionLedger

Notas:
- Todas las mutaciones se serializan bajo un único lock: validar, aplicar
  y registrar ocurren juntos o no ocurren.
- Las consultas toman el mismo lock y devuelven instantáneas inmutables.

======================== ENGLISH ========================
File: `src/urna/ledger.py`.
This module is part of Urna and is documented to improve
navigation, maintenance, and technical auditability.

Detected components:
  - ElectionLedger

Notes:
- All mutations are serialized under a single lock: validate, apply and
  log happen together or not at all.
- Queries take the same lock and return immutable snapshots.
"""

from __future__ import annotations

import threading
import time
import uuid
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

import structlog

from .core.candidates import CandidateRegistry
from .core.errors import ErrorKind, LedgerError, LedgerRejection, LedgerResult
from .core.events import ChainVerification, EventKind, EventLog, LedgerEvent, verify_chain
from .core.identity import DEFAULT_NULL_IDENTITIES, IdentityGate, normalize_identity
from .core.models import (
    Candidate,
    ElectionPhase,
    ElectionResults,
    ElectionStatus,
    MyVote,
    VoterRecord,
    Winner,
)
from .core.phase import PhaseMachine
from .core.results import compute_results, resolve_winner
from .core.voters import BatchAuthorization, VoterRegistry, check_batch
from .logging import bind_context

T = TypeVar("T")
Clock = Callable[[], int]
Subscriber = Callable[[LedgerEvent], None]
_Step = Callable[[], Tuple[Any, Optional[LedgerEvent]]]


def unix_clock() -> int:
    """Segundos UNIX enteros, como mínimo 1. / Integer UNIX seconds, at least 1."""
    return max(1, int(time.time()))


class ElectionLedger:
    """Libro electoral autoritativo: estado, operaciones protegidas y registro.

    Cada operación recibe la identidad del llamador como argumento explícito
    y devuelve un ``LedgerResult``; los rechazos nunca modifican el estado.

    English:
        Authoritative election ledger: state, guarded operations and log.

        Every operation takes the caller identity as an explicit argument and
        returns a ``LedgerResult``; rejections never modify state.
    """

    def __init__(
        self,
        owner: str,
        *,
        clock: Optional[Clock] = None,
        null_identities: Iterable[str] = DEFAULT_NULL_IDENTITIES,
        election_id: Optional[str] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._notify_lock = threading.RLock()
        self._gate = IdentityGate(owner, null_identities)
        self._candidates = CandidateRegistry()
        self._voters = VoterRegistry()
        self._phase = PhaseMachine()
        self._events = EventLog()
        self._total_votes = 0
        self._clock: Clock = clock or unix_clock
        self._subscribers: List[Subscriber] = []
        self._delivered = 0
        self._delivering = False
        self.election_id = election_id or uuid.uuid4().hex[:8]
        self._logger = bind_context(structlog.get_logger(__name__), election_id=self.election_id)
        self._logger.info("ledger_created", owner=self._gate.owner)

    # ------------------------------------------------------------------
    # Serialized execution
    # ------------------------------------------------------------------

    def _execute(self, operation: str, caller: Any, step: _Step) -> LedgerResult:
        log = bind_context(self._logger, caller=normalize_identity(caller), operation=operation)
        with self._lock:
            try:
                value, event = step()
            except LedgerRejection as exc:
                log.warning("ledger_call_rejected", kind=exc.kind.value, reason=exc.message)
                return LedgerResult.failure(exc.to_error())

        if event is not None:
            log.info(
                "ledger_event_committed",
                sequence=event.sequence,
                kind=event.kind.value,
                hash=event.hash,
            )
            self._notify()
        return LedgerResult.success(value, event)

    def _append(self, kind: EventKind, payload: dict, apply: Callable[[], Any]) -> Tuple[Any, LedgerEvent]:
        # Caller holds the lock and every check has already passed.
        event = self._events.prepare(kind, payload)
        value = apply()
        self._events.commit(event)
        return value, event

    def _query(self, step: Callable[[], T]) -> LedgerResult[T]:
        with self._lock:
            try:
                return LedgerResult.success(step())
            except LedgerRejection as exc:
                return LedgerResult.failure(exc.to_error())

    # ------------------------------------------------------------------
    # Identity gate
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        with self._lock:
            return self._gate.owner

    def transfer_ownership(self, caller: Any, new_owner: Any) -> LedgerResult[str]:
        def step():
            target = self._gate.check_transfer(caller, new_owner)
            payload = {"previous_owner": self._gate.owner, "new_owner": target}
            _, event = self._append(
                EventKind.OWNERSHIP_TRANSFERRED,
                payload,
                lambda: self._gate.apply_transfer(target),
            )
            return target, event

        return self._execute("transfer_ownership", caller, step)

    # ------------------------------------------------------------------
    # Candidate registry
    # ------------------------------------------------------------------

    def register_candidate(self, caller: Any, name: Any, party: Any, description: Any) -> LedgerResult[int]:
        def step():
            self._gate.require_owner(caller)
            self._phase.require(ElectionPhase.NOT_STARTED, ErrorKind.ALREADY_STARTED, "Already started")
            clean_name, clean_party, clean_description = self._candidates.check_registration(
                name, party, description
            )
            payload = {
                "id": self._candidates.next_id,
                "name": clean_name,
                "party": clean_party,
                "description": clean_description,
            }
            candidate, event = self._append(
                EventKind.CANDIDATE_REGISTERED,
                payload,
                lambda: self._candidates.add(clean_name, clean_party, clean_description),
            )
            return candidate.id, event

        return self._execute("register_candidate", caller, step)

    def get_candidate(self, candidate_id: Any) -> LedgerResult[Candidate]:
        return self._query(lambda: self._candidates.require(candidate_id))

    def get_all_candidate_ids(self) -> List[int]:
        with self._lock:
            return self._candidates.ids()

    @property
    def candidate_count(self) -> int:
        with self._lock:
            return len(self._candidates)

    # ------------------------------------------------------------------
    # Voter registry
    # ------------------------------------------------------------------

    def _authorize_one(self, voter: Any) -> Tuple[str, LedgerEvent]:
        identity = self._gate.validate_identity(voter, role="voter")
        self._voters.check_authorization(identity)
        _, event = self._append(
            EventKind.VOTER_AUTHORIZED,
            {"voter": identity},
            lambda: self._voters.authorize(identity),
        )
        return identity, event

    def authorize_voter(self, caller: Any, voter: Any) -> LedgerResult[str]:
        def step():
            self._gate.require_owner(caller)
            return self._authorize_one(voter)

        return self._execute("authorize_voter", caller, step)

    def authorize_voters(self, caller: Any, voters: Any) -> LedgerResult[BatchAuthorization]:
        """Autoriza varias identidades en orden; cada una se acepta o rechaza por separado.

        El propietario y la forma de la lista se validan antes de tocar el
        estado. Cada identidad aceptada añade su propio ``VoterAuthorized``;
        las rechazadas (duplicadas, nulas, ya autorizadas) se informan en
        ``failed`` sin detener el resto del lote.

        English:
            Authorize several identities in order; each is accepted or rejected
            on its own.

            The owner and the list shape are validated before any state is
            touched. Every accepted identity appends its own ``VoterAuthorized``;
            rejected ones (duplicates, null, already authorized) are reported in
            ``failed`` without stopping the rest of the batch.
        """
        log = bind_context(self._logger, caller=normalize_identity(caller), operation="authorize_voters")
        authorized: List[str] = []
        failed: List[Tuple[Any, LedgerError]] = []
        with self._lock:
            try:
                self._gate.require_owner(caller)
                entries = check_batch(voters)
            except LedgerRejection as exc:
                log.warning("ledger_call_rejected", kind=exc.kind.value, reason=exc.message)
                return LedgerResult.failure(exc.to_error())

            for voter in entries:
                try:
                    identity, event = self._authorize_one(voter)
                except LedgerRejection as exc:
                    failed.append((voter, exc.to_error()))
                    continue
                authorized.append(identity)
                log.info(
                    "ledger_event_committed",
                    sequence=event.sequence,
                    kind=event.kind.value,
                    hash=event.hash,
                )

        log.info("ledger_batch_authorized", authorized=len(authorized), failed=len(failed))
        if authorized:
            self._notify()
        return LedgerResult.success(BatchAuthorization(authorized=tuple(authorized), failed=tuple(failed)))

    def get_voter_info(self, identity: Any) -> VoterRecord:
        with self._lock:
            return self._voters.get(identity)

    def get_voter_list(self) -> List[str]:
        with self._lock:
            return self._voters.identities()

    def voter_at(self, index: int) -> LedgerResult[str]:
        def step() -> str:
            identity = self._voters.at(index)
            if identity is None:
                raise LedgerRejection(ErrorKind.INVALID_INPUT, f"No voter at index {index!r}")
            return identity

        return self._query(step)

    # ------------------------------------------------------------------
    # Phase state machine
    # ------------------------------------------------------------------

    @property
    def phase(self) -> ElectionPhase:
        with self._lock:
            return self._phase.phase

    def start_election(self, caller: Any) -> LedgerResult[ElectionPhase]:
        def step():
            self._gate.require_owner(caller)
            self._phase.check_start(len(self._candidates))
            return self._append(EventKind.ELECTION_STARTED, {}, self._phase.advance)

        return self._execute("start_election", caller, step)

    def end_election(self, caller: Any) -> LedgerResult[ElectionPhase]:
        def step():
            self._gate.require_owner(caller)
            self._phase.check_end()
            return self._append(EventKind.ELECTION_ENDED, {}, self._phase.advance)

        return self._execute("end_election", caller, step)

    # ------------------------------------------------------------------
    # Vote & tally engine
    # ------------------------------------------------------------------

    def vote(self, caller: Any, candidate_id: Any) -> LedgerResult[int]:
        """Emite un voto; devuelve la marca de tiempo registrada.

        El orden de validación es fijo: registro, fase, voto previo y por
        último el ID del candidato.

        English:
            Cast a vote; returns the recorded timestamp.

            Validation order is fixed: registration, phase, prior vote and
            finally the candidate ID.
        """

        def step():
            record = self._voters.require_registered(caller)
            self._phase.require(ElectionPhase.ACTIVE, ErrorKind.NOT_ACTIVE, "Election not active")
            if record.has_voted:
                raise LedgerRejection(ErrorKind.ALREADY_VOTED, "Already voted")
            self._candidates.require(candidate_id)

            voter = normalize_identity(caller)
            timestamp = max(1, int(self._clock()))

            def apply() -> int:
                self._candidates.record_vote(candidate_id)
                self._total_votes += 1
                self._voters.record_vote(voter, candidate_id, timestamp)
                return timestamp

            return self._append(
                EventKind.VOTE_CAST,
                {"voter": voter, "candidate_id": candidate_id, "timestamp": timestamp},
                apply,
            )

        return self._execute("vote", caller, step)

    def get_my_vote(self, caller: Any) -> LedgerResult[MyVote]:
        def step() -> MyVote:
            record = self._voters.require_registered(caller)
            if not record.has_voted:
                return MyVote(has_voted=False, candidate_id=0, name="", party="", timestamp=0)
            candidate = self._candidates.require(record.voted_candidate_id)
            return MyVote(
                has_voted=True,
                candidate_id=candidate.id,
                name=candidate.name,
                party=candidate.party,
                timestamp=record.timestamp,
            )

        return self._query(step)

    @property
    def total_votes(self) -> int:
        with self._lock:
            return self._total_votes

    def get_election_status(self) -> ElectionStatus:
        with self._lock:
            return ElectionStatus(
                phase=self._phase.phase,
                candidate_count=len(self._candidates),
                total_votes=self._total_votes,
                voter_count=len(self._voters),
            )

    # ------------------------------------------------------------------
    # Results / winner resolver
    # ------------------------------------------------------------------

    def _require_ended(self) -> None:
        self._phase.require(ElectionPhase.ENDED, ErrorKind.ELECTION_NOT_ENDED, "Election not ended")

    def get_results(self) -> LedgerResult[ElectionResults]:
        def step() -> ElectionResults:
            self._require_ended()
            return compute_results(self._candidates.all())

        return self._query(step)

    def get_winner(self) -> LedgerResult[Winner]:
        def step() -> Winner:
            self._require_ended()
            return resolve_winner(self._candidates.all())

        return self._query(step)

    # ------------------------------------------------------------------
    # Event log
    # ------------------------------------------------------------------

    @property
    def head_hash(self) -> str:
        with self._lock:
            return self._events.head_hash

    def events_since(self, offset: int = 0) -> List[LedgerEvent]:
        """Lectura por desplazamiento (pull). / Offset-based pull read."""
        with self._lock:
            return self._events.since(offset)

    def verify_events(self) -> ChainVerification:
        with self._lock:
            entries = self._events.since(0)
        return verify_chain(entries)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Registra un suscriptor (push) y devuelve la función para darlo de baja.

        Los suscriptores reciben, en orden de secuencia, cada evento
        confirmado después de suscribirse. Un suscriptor que falla se
        registra en el log y no afecta al libro.

        English:
            Register a push subscriber and return its unsubscribe function.

            Subscribers receive, in sequence order, every event committed
            after subscribing. A failing subscriber is logged and does not
            affect the ledger.
        """
        with self._notify_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._notify_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        with self._notify_lock:
            # A subscriber that commits re-enters here; the outer loop delivers its events.
            if self._delivering:
                return
            self._delivering = True
            try:
                while True:
                    with self._lock:
                        pending = self._events.since(self._delivered)
                        self._delivered += len(pending)
                    if not pending:
                        return
                    for event in pending:
                        for callback in list(self._subscribers):
                            try:
                                callback(event)
                            except Exception:
                                self._logger.exception(
                                    "ledger_subscriber_failed",
                                    sequence=event.sequence,
                                    kind=event.kind.value,
                                )
            finally:
                self._delivering = False
