"""Pruebas del registro de votantes.

Tests for the voter registry.
"""

import pytest

from support import OUTSIDER, OWNER, VOTERS
from urna.core.errors import ErrorKind
from urna.core.events import EventKind
from urna.core.identity import ZERO_ADDRESS
from urna.core.models import VoterRecord


def test_owner_authorizes_voter(ledger):
    """Autorizar emite VoterAuthorized y marca is_registered."""
    result = ledger.authorize_voter(OWNER, VOTERS[0])

    assert result.ok
    assert result.event.kind is EventKind.VOTER_AUTHORIZED
    assert dict(result.event.payload) == {"voter": VOTERS[0]}
    info = ledger.get_voter_info(VOTERS[0])
    assert info.is_registered is True
    assert info.has_voted is False


def test_non_owner_cannot_authorize(ledger):
    result = ledger.authorize_voter(VOTERS[0], VOTERS[1])

    assert result.error_kind is ErrorKind.UNAUTHORIZED
    assert ledger.get_voter_info(VOTERS[1]).is_registered is False


def test_second_authorization_is_rejected(ledger):
    """Escenario B: la segunda autorización falla y el registro no cambia."""
    assert ledger.authorize_voter(OWNER, VOTERS[0]).ok
    before = ledger.get_voter_info(VOTERS[0])
    events_before = len(ledger.events_since(0))

    result = ledger.authorize_voter(OWNER, VOTERS[0])

    assert result.error_kind is ErrorKind.ALREADY_AUTHORIZED
    assert ledger.get_voter_info(VOTERS[0]) == before
    assert ledger.get_voter_info(VOTERS[0]) == VoterRecord(is_registered=True, has_voted=False)
    assert len(ledger.events_since(0)) == events_before


def test_reauthorizing_after_voting_is_rejected(active_ledger):
    active_ledger.vote(VOTERS[0], 1)

    result = active_ledger.authorize_voter(OWNER, VOTERS[0])

    assert result.error_kind is ErrorKind.ALREADY_AUTHORIZED
    assert active_ledger.get_voter_info(VOTERS[0]).has_voted is True


@pytest.mark.parametrize("voter", ["", "   ", None, ZERO_ADDRESS, "0xvoter\udc80"])
def test_invalid_voter_identity(ledger, voter):
    result = ledger.authorize_voter(OWNER, voter)

    assert result.error_kind is ErrorKind.INVALID_IDENTITY
    assert ledger.get_election_status().voter_count == 0


def test_unknown_identity_has_default_record(ledger):
    """Una identidad nunca autorizada devuelve valores por defecto."""
    info = ledger.get_voter_info(OUTSIDER)

    assert info == VoterRecord()
    assert info.voted_candidate_id == 0
    assert info.timestamp == 0


def test_voter_list_keeps_authorization_order(seeded_ledger):
    assert seeded_ledger.get_voter_list() == VOTERS
    assert seeded_ledger.voter_at(0).value == VOTERS[0]
    assert seeded_ledger.voter_at(3).value == VOTERS[3]
    assert seeded_ledger.voter_at(4).error_kind is ErrorKind.INVALID_INPUT
    assert seeded_ledger.voter_at(-1).error_kind is ErrorKind.INVALID_INPUT


def test_authorization_allowed_in_any_phase(active_ledger):
    assert active_ledger.authorize_voter(OWNER, OUTSIDER).ok
    assert active_ledger.vote(OUTSIDER, 2).ok


class TestAuthorizeVoters:
    """Pruebas de autorización por lotes."""

    def test_all_identities_authorized(self, ledger):
        result = ledger.authorize_voters(OWNER, VOTERS)

        assert result.ok
        assert result.value.authorized == tuple(VOTERS)
        assert result.value.failed == ()
        assert ledger.get_voter_list() == VOTERS
        kinds = [event.kind for event in ledger.events_since(0)]
        assert kinds == [EventKind.VOTER_AUTHORIZED] * len(VOTERS)

    def test_partial_success_reports_each_failure(self, ledger):
        ledger.authorize_voter(OWNER, VOTERS[0])

        result = ledger.authorize_voters(OWNER, [VOTERS[0], VOTERS[1], ZERO_ADDRESS, " ", VOTERS[2]])

        assert result.ok
        assert result.value.authorized == (VOTERS[1], VOTERS[2])
        failures = [(voter, error.kind) for voter, error in result.value.failed]
        assert failures == [
            (VOTERS[0], ErrorKind.ALREADY_AUTHORIZED),
            (ZERO_ADDRESS, ErrorKind.INVALID_IDENTITY),
            (" ", ErrorKind.INVALID_IDENTITY),
        ]
        assert len(ledger.events_since(0)) == 3

    def test_duplicates_within_batch(self, ledger):
        result = ledger.authorize_voters(OWNER, [VOTERS[0], f" {VOTERS[0]} ", VOTERS[0]])

        assert result.value.authorized == (VOTERS[0],)
        assert [error.kind for _, error in result.value.failed] == [ErrorKind.ALREADY_AUTHORIZED] * 2
        assert ledger.get_election_status().voter_count == 1

    def test_non_owner_changes_nothing(self, ledger):
        result = ledger.authorize_voters(OUTSIDER, VOTERS)

        assert result.error_kind is ErrorKind.UNAUTHORIZED
        assert ledger.get_voter_list() == []
        assert ledger.events_since(0) == []

    @pytest.mark.parametrize("voters", [[], (), VOTERS[0], None, {VOTERS[0]}])
    def test_rejects_malformed_batch(self, ledger, voters):
        result = ledger.authorize_voters(OWNER, voters)

        assert result.error_kind is ErrorKind.INVALID_INPUT
        assert ledger.events_since(0) == []

    def test_subscribers_receive_every_authorization(self, ledger):
        received = []
        ledger.subscribe(received.append)

        ledger.authorize_voters(OWNER, VOTERS[:2])

        assert [event.payload["voter"] for event in received] == VOTERS[:2]
