"""Constantes y utilidades compartidas por las pruebas.

Constants and helpers shared by the tests.
"""

from __future__ import annotations

from urna.ledger import ElectionLedger

OWNER = "0xowner"
VOTERS = ["0xvoter1", "0xvoter2", "0xvoter3", "0xvoter4"]
OUTSIDER = "0xoutsider"

CANDIDATES = [
    ("Samadhan", "Party A", "For the people"),
    ("Harsh", "Party B", "Youth Power"),
    ("Aman", "Party C", "For Justice"),
]


class StepClock:
    """Reloj determinista que avanza un segundo por lectura."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


def assert_invariants(ledger: ElectionLedger) -> None:
    """total_votes == suma de votos; IDs contiguos 1..candidate_count."""
    ids = ledger.get_all_candidate_ids()
    assert ids == list(range(1, ledger.candidate_count + 1))
    counts = [ledger.get_candidate(candidate_id).value.vote_count for candidate_id in ids]
    assert ledger.total_votes == sum(counts)
    assert ledger.get_election_status().total_votes == ledger.total_votes
