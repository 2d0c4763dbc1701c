"""
End-to-end behaviour of the MutualPool facade: conservation of funds,
all-or-nothing operations, contributions and the emergency drain.
"""

import threading

import pytest

from mutualpool.core.exceptions import (
    InvalidInputError, InsufficientPoolError, TransferFailedError,
    UnauthorizedError
)
from mutualpool.models.enums import EventType
from mutualpool.services.custody import InMemoryCustody
from mutualpool.services.mutual_pool import MutualPool

ADMIN = "admin"


class RejectingCustody(InMemoryCustody):
    """Custody whose outgoing transfers can be switched off."""

    def __init__(self):
        super().__init__()
        self.reject = False

    def transfer(self, amount, to):
        if self.reject:
            raise TransferFailedError(to, amount, reason="recipient refused")
        super().transfer(amount, to)


def test_flood_claim_scenario(pool):
    assert pool.purchase("alice", 100000, 30, 1000) == 1
    assert pool.pool_balance() == 1000
    assert pool.submit_claim("alice", 1, 500, "flood damage") == 1

    pool.contribute("bob", 60000)
    assert pool.submit_claim("alice", 1, 50000, "flood damage") == 2
    pool.adjudicate(ADMIN, 2, True)

    assert pool.pool_balance() == 11000
    assert pool.get_policy(1).has_claimed


def test_contributions_accumulate(pool):
    assert pool.contribute("carol", 5000) == 5000
    assert pool.pool_balance() == 5000
    assert pool.contribution_of("carol") == 5000

    assert pool.contribute("carol", 3000) == 8000
    assert pool.pool_balance() == 8000
    assert pool.contribution_of("carol") == 8000


def test_contribution_events(pool):
    pool.contribute("carol", 5000)
    pool.contribute("carol", 3000)

    events = pool.list_events(EventType.CONTRIBUTION_MADE)
    assert [e.data for e in events] == [
        {"amount": 5000, "total": 5000},
        {"amount": 3000, "total": 8000},
    ]


@pytest.mark.parametrize("amount", [0, -10])
def test_non_positive_contribution_rejected(pool, amount):
    with pytest.raises(InvalidInputError):
        pool.contribute("carol", amount)
    assert pool.pool_balance() == 0
    assert pool.contribution_of("carol") == 0


def test_conservation_across_a_busy_history(pool):
    premiums = contributions = payouts = 0

    for holder, coverage, payment in [("alice", 100000, 1000), ("bob", 50000, 900), ("carol", 20000, 200)]:
        pool.purchase(holder, coverage, 60, payment)
        premiums += payment
    for contributor, amount in [("dave", 30000), ("erin", 45000), ("dave", 5000)]:
        pool.contribute(contributor, amount)
        contributions += amount

    pool.submit_claim("alice", 1, 40000, "storm")
    pool.submit_claim("bob", 2, 30000, "theft")
    pool.submit_claim("carol", 3, 20000, "fire")
    pool.adjudicate(ADMIN, 1, True)
    payouts += 40000
    pool.adjudicate(ADMIN, 2, False)
    pool.adjudicate(ADMIN, 3, True)
    payouts += 20000

    with pytest.raises(InsufficientPoolError):
        pool.submit_claim("bob", 2, 30000, "theft again")

    expected = premiums + contributions - payouts
    assert pool.ledger_balance() == expected
    assert pool.pool_balance() == expected
    assert pool.ledger.is_balanced()

    drained = pool.emergency_drain(ADMIN)
    assert drained == expected
    assert pool.ledger_balance() == 0
    assert pool.pool_balance() == 0
    assert pool.ledger.is_balanced()


def test_failed_transfer_rolls_back_adjudication(settings, clock):
    custody = RejectingCustody()
    pool = MutualPool(settings, clock=clock, custody=custody)
    pool.purchase("alice", 100000, 30, 1000)
    pool.contribute("bob", 60000)
    pool.submit_claim("alice", 1, 50000, "flood damage")
    events_before = len(pool.list_events())

    custody.reject = True
    with pytest.raises(TransferFailedError):
        pool.adjudicate(ADMIN, 1, True)

    claim = pool.get_claim(1)
    assert not claim.processed
    assert not claim.approved
    assert not pool.get_policy(1).has_claimed
    assert pool.ledger_balance() == 61000
    assert pool.pool_balance() == 61000
    assert len(pool.list_events()) == events_before

    custody.reject = False
    assert pool.adjudicate(ADMIN, 1, True).payout == 50000


class TestEmergencyDrain:

    def test_only_administrator_may_drain(self, funded_pool):
        with pytest.raises(UnauthorizedError):
            funded_pool.emergency_drain("alice")
        assert funded_pool.pool_balance() == 61000

    def test_drain_sends_everything_to_administrator(self, funded_pool):
        assert funded_pool.emergency_drain(ADMIN) == 61000

        assert funded_pool.pool_balance() == 0
        assert funded_pool.ledger_balance() == 0
        assert funded_pool.custody.disbursed[ADMIN] == 61000
        event = funded_pool.list_events(EventType.EMERGENCY_DRAINED)[0]
        assert event.data == {"amount": 61000}

    def test_pending_approval_fails_after_drain(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 50000, "flood damage")
        funded_pool.emergency_drain(ADMIN)

        with pytest.raises(InsufficientPoolError):
            funded_pool.adjudicate(ADMIN, 1, True)
        assert not funded_pool.get_claim(1).processed

    def test_pool_recovers_with_new_funds(self, funded_pool):
        funded_pool.emergency_drain(ADMIN)
        funded_pool.contribute("bob", 1000)

        assert funded_pool.submit_claim("alice", 1, 1000, "small") == 1
        assert funded_pool.adjudicate(ADMIN, 1, True).payout == 1000
        assert funded_pool.pool_balance() == 0


def test_pool_balance_reports_custody_funds(funded_pool):
    funded_pool.custody.deposit(250, "stray-sender")

    assert funded_pool.pool_balance() == 61250
    assert funded_pool.ledger_balance() == 61000
    assert funded_pool.emergency_drain(ADMIN) == 61250


def test_concurrent_contributions_are_serialised(pool):
    def contribute_many(identity):
        for _ in range(50):
            pool.contribute(identity, 10)

    workers = [threading.Thread(target=contribute_many, args=(f"member-{i}",)) for i in range(8)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert pool.ledger_balance() == 8 * 50 * 10
    assert pool.pool_balance() == 8 * 50 * 10
    assert all(pool.contribution_of(f"member-{i}") == 500 for i in range(8))
    assert [e.sequence for e in pool.list_events(limit=1000)] == list(range(1, 401))


def test_statistics(funded_pool):
    funded_pool.submit_claim("alice", 1, 1000, "a")
    funded_pool.submit_claim("alice", 1, 2000, "b")
    funded_pool.adjudicate(ADMIN, 1, True)

    stats = funded_pool.statistics()

    assert stats["policies"] == {"total": 1, "claimed": 1, "covering": 1, "holders": 1}
    assert stats["claims"]["total"] == 2
    assert stats["claims"]["by_status"] == {"submitted": 1, "approved": 1, "denied": 0}
    assert stats["claims"]["total_paid"] == 1000
    assert stats["pool"]["ledger_balance"] == 60000
    assert stats["pool"]["fund_balance"] == 60000
    assert stats["pool"]["totals"] == {"premium": 1000, "contribution": 60000, "payout": 1000, "drain": 0}
    assert stats["pool"]["balanced"] is True


def test_pending_and_policy_claim_listings(funded_pool):
    funded_pool.submit_claim("alice", 1, 1000, "a")
    funded_pool.submit_claim("alice", 1, 2000, "b")
    funded_pool.adjudicate(ADMIN, 1, False)

    assert [c.claim_id for c in funded_pool.pending_claims()] == [2]
    assert [c.claim_id for c in funded_pool.claims_of_policy(1)] == [1, 2]
    assert funded_pool.claims_of_policy(9) == []
