"""Pruebas de ejecución de escenarios. / Scenario execution tests."""

from support import CANDIDATES, OUTSIDER, OWNER, VOTERS, StepClock
from urna.core.errors import ErrorKind
from urna.core.models import ElectionPhase
from urna.pipeline import run_scenario
from urna.schemas import ElectionScenario


def _scenario(**overrides) -> ElectionScenario:
    data = {
        "owner": OWNER,
        "election_id": "pipeline",
        "candidates": [
            {"name": name, "party": party, "description": description}
            for name, party, description in CANDIDATES
        ],
        "voters": VOTERS[:3],
        "votes": [
            {"voter": VOTERS[0], "candidate_id": 1},
            {"voter": VOTERS[1], "candidate_id": 1},
            {"voter": VOTERS[2], "candidate_id": 2},
        ],
    }
    data.update(overrides)
    return ElectionScenario.model_validate(data)


def test_run_scenario_completes_election():
    report = run_scenario(_scenario(), clock=StepClock())
    ledger = report.ledger

    assert report.rejections == []
    assert ledger.election_id == "pipeline"
    assert ledger.phase is ElectionPhase.ENDED
    assert ledger.get_results().value.vote_counts == (2, 1, 0)
    assert ledger.get_winner().value.name == "Samadhan"


def test_run_scenario_collects_rejections():
    votes = [
        {"voter": VOTERS[0], "candidate_id": 1},
        {"voter": VOTERS[0], "candidate_id": 2},
        {"voter": OUTSIDER, "candidate_id": 1},
        {"voter": VOTERS[1], "candidate_id": 9},
    ]
    report = run_scenario(_scenario(votes=votes), clock=StepClock())

    kinds = [(rejection.step, rejection.error.kind) for rejection in report.rejections]
    assert kinds == [
        (f"vote:{VOTERS[0]}->2", ErrorKind.ALREADY_VOTED),
        (f"vote:{OUTSIDER}->1", ErrorKind.UNAUTHORIZED),
        (f"vote:{VOTERS[1]}->9", ErrorKind.INVALID_CANDIDATE),
    ]
    assert report.ledger.total_votes == 1


def test_run_scenario_without_candidates_cannot_start():
    report = run_scenario(_scenario(candidates=[], votes=[], end=False), clock=StepClock())

    assert [rejection.error.kind for rejection in report.rejections] == [ErrorKind.NO_CANDIDATES]
    assert report.ledger.phase is ElectionPhase.NOT_STARTED


def test_run_scenario_honours_null_identities():
    report = run_scenario(
        _scenario(voters=["0xdead"], votes=[], end=False),
        clock=StepClock(),
        null_identities=["0xDEAD"],
    )

    assert [rejection.error.kind for rejection in report.rejections] == [ErrorKind.INVALID_IDENTITY]
    assert report.ledger.phase is ElectionPhase.ACTIVE
