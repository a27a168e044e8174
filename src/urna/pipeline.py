"""Ejecución de escenarios electorales contra el libro.

English:
    Runs election scenarios against the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import structlog

from .core.errors import LedgerError, LedgerResult
from .core.identity import DEFAULT_NULL_IDENTITIES
from .ledger import Clock, ElectionLedger
from .logging import bind_context
from .schemas import ElectionScenario

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Rejection:
    """Paso del escenario rechazado por el libro. / Scenario step rejected by the ledger."""

    step: str
    error: LedgerError


@dataclass
class ScenarioReport:
    ledger: ElectionLedger
    rejections: List[Rejection] = field(default_factory=list)

    def record(self, step: str, result: LedgerResult) -> None:
        if not result.ok and result.error is not None:
            self.rejections.append(Rejection(step=step, error=result.error))


def run_scenario(
    scenario: ElectionScenario,
    *,
    clock: Optional[Clock] = None,
    null_identities: Iterable[str] = DEFAULT_NULL_IDENTITIES,
) -> ScenarioReport:
    """Aplica el escenario paso a paso; los rechazos se acumulan, no se lanzan.

    English: Apply the scenario step by step; rejections are collected, not raised.
    """
    ledger = ElectionLedger(
        scenario.owner,
        clock=clock,
        null_identities=null_identities,
        election_id=scenario.election_id,
    )
    report = ScenarioReport(ledger=ledger)
    owner = scenario.owner

    for candidate in scenario.candidates:
        report.record(
            f"register_candidate:{candidate.name}",
            ledger.register_candidate(owner, candidate.name, candidate.party, candidate.description),
        )
    if scenario.voters:
        batch = ledger.authorize_voters(owner, scenario.voters)
        if not batch.ok:
            report.record("authorize_voters", batch)
        else:
            for voter, error in batch.value.failed:
                report.rejections.append(Rejection(step=f"authorize_voter:{voter}", error=error))
    if scenario.start:
        report.record("start_election", ledger.start_election(owner))
    for ballot in scenario.votes:
        report.record(f"vote:{ballot.voter}->{ballot.candidate_id}", ledger.vote(ballot.voter, ballot.candidate_id))
    if scenario.end:
        report.record("end_election", ledger.end_election(owner))

    log = bind_context(logger, election_id=ledger.election_id, operation="run_scenario")
    log.info(
        "scenario_completed",
        events=len(ledger.events_since(0)),
        rejections=len(report.rejections),
    )
    return report
