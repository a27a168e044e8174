"""Fixtures compartidas para las pruebas del libro electoral.

Shared fixtures for the election ledger tests.
"""

from __future__ import annotations

import pytest

from support import CANDIDATES, OWNER, VOTERS, StepClock
from urna.ledger import ElectionLedger


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def ledger(clock: StepClock) -> ElectionLedger:
    return ElectionLedger(OWNER, clock=clock, election_id="test-election")


@pytest.fixture
def seeded_ledger(ledger: ElectionLedger) -> ElectionLedger:
    """Libro con tres candidatos y cuatro votantes autorizados."""
    for name, party, description in CANDIDATES:
        assert ledger.register_candidate(OWNER, name, party, description).ok
    for voter in VOTERS:
        assert ledger.authorize_voter(OWNER, voter).ok
    return ledger


@pytest.fixture
def active_ledger(seeded_ledger: ElectionLedger) -> ElectionLedger:
    assert seeded_ledger.start_election(OWNER).ok
    return seeded_ledger
