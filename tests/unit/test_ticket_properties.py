"""Hypothesis property-based tests for the ticket lifecycle."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from qrtickets.core.constants import REASON_ALREADY_REDEEMED, REASON_VALID, TicketStatus
from qrtickets.services.tickets import (
    TicketConflictError,
    TicketService,
    TicketValidationError,
)
from tests.conftest import InMemoryTicketRepo, StubQREncoder

names = st.text(min_size=1, max_size=40).filter(lambda s: s.strip())
blanks = st.one_of(st.none(), st.text(alphabet=" \t\n\r", max_size=5))


def _service() -> tuple[TicketService, InMemoryTicketRepo, StubQREncoder]:
    repo, encoder = InMemoryTicketRepo(), StubQREncoder()
    return TicketService(ticket_repo=repo, qr_encoder=encoder), repo, encoder


@given(count=st.integers(min_value=1, max_value=60))
@settings(max_examples=30)
def test_ids_never_collide(count: int):
    svc, _, _ = _service()
    ids = [svc.create_ticket(buyer_name="A", event_name="E")["id"] for _ in range(count)]
    assert len(set(ids)) == count


@given(buyer_name=names, event_name=names, buyer_email=st.one_of(st.none(), st.emails()))
@settings(max_examples=100)
def test_created_ticket_is_valid_and_persisted(buyer_name, event_name, buyer_email):
    svc, repo, encoder = _service()
    ticket = svc.create_ticket(
        buyer_name=buyer_name, buyer_email=buyer_email, event_name=event_name
    )
    assert ticket["status"] == TicketStatus.VALID
    assert ticket["buyer_name"] == buyer_name.strip()
    assert encoder.calls == [ticket["id"]]
    assert repo.find_by_id(ticket["id"]) == ticket


@given(buyer_name=st.one_of(blanks, names), event_name=st.one_of(blanks, names))
@settings(max_examples=150)
def test_blank_required_field_writes_nothing(buyer_name, event_name):
    blank_buyer = buyer_name is None or not buyer_name.strip()
    blank_event = event_name is None or not event_name.strip()
    svc, repo, encoder = _service()
    if blank_buyer or blank_event:
        with pytest.raises(TicketValidationError):
            svc.create_ticket(buyer_name=buyer_name, event_name=event_name)
        assert repo.count() == 0
        assert encoder.calls == []
    else:
        svc.create_ticket(buyer_name=buyer_name, event_name=event_name)
        assert repo.count() == 1


@given(attempts=st.integers(min_value=1, max_value=10))
@settings(max_examples=30)
def test_redeem_succeeds_exactly_once(attempts: int):
    svc, _, _ = _service()
    ticket = svc.create_ticket(buyer_name="A", event_name="E")
    assert svc.validate_ticket(ticket["id"]).reason == REASON_VALID

    successes = 0
    for _ in range(attempts):
        try:
            svc.redeem_ticket(ticket["id"])
            successes += 1
        except TicketConflictError:
            pass

    assert successes == 1
    result = svc.validate_ticket(ticket["id"])
    assert (result.valid, result.reason) == (False, REASON_ALREADY_REDEEMED)


@given(target=st.sampled_from(list(TicketStatus)), source=st.sampled_from(list(TicketStatus)))
def test_only_valid_to_redeemed_transition(source: TicketStatus, target: TicketStatus):
    allowed = source is TicketStatus.VALID and target is TicketStatus.REDEEMED
    assert source.can_transition_to(target) is allowed
