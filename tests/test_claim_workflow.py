import pytest

from mutualpool.core.exceptions import (
    InvalidInputError, EmptyDescriptionError, NotPolicyholderError,
    PolicyExpiredError, AlreadyClaimedError, ExceedsCoverageError,
    InsufficientPoolError, UnauthorizedError, ClaimNotFoundError,
    AlreadyProcessedError
)
from mutualpool.models.enums import ClaimStatus, EventType

ADMIN = "admin"


class TestSubmit:

    def test_holder_submits_claim(self, funded_pool, clock):
        claim_id = funded_pool.submit_claim("alice", 1, 50000, "flood damage")

        assert claim_id == 1
        claim = funded_pool.get_claim(1)
        assert claim.policy_id == 1
        assert claim.claimant == "alice"
        assert claim.claim_amount == 50000
        assert claim.timestamp == clock.now()
        assert claim.description == "flood damage"
        assert not claim.processed
        assert not claim.approved
        assert claim.status == ClaimStatus.SUBMITTED

    def test_submission_leaves_pool_and_policy_untouched(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 50000, "flood damage")

        assert funded_pool.ledger_balance() == 61000
        assert not funded_pool.get_policy(1).has_claimed

    def test_claim_ids_are_monotonic(self, funded_pool):
        assert funded_pool.submit_claim("alice", 1, 100, "a") == 1
        assert funded_pool.submit_claim("alice", 1, 200, "b") == 2

    def test_emits_submitted_event(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 500, "hail")

        event = funded_pool.list_events(EventType.CLAIM_SUBMITTED)[0]
        assert event.data == {"claim_id": 1, "policy_id": 1, "amount": 500}

    def test_non_holder_rejected(self, funded_pool):
        with pytest.raises(NotPolicyholderError):
            funded_pool.submit_claim("bob", 1, 500, "not mine")

    def test_expiry_boundary(self, funded_pool, clock):
        end_time = funded_pool.get_policy(1).end_time

        clock.current = end_time
        assert funded_pool.submit_claim("alice", 1, 500, "last second") == 1

        clock.current = end_time + 1
        with pytest.raises(PolicyExpiredError):
            funded_pool.submit_claim("alice", 1, 500, "too late")

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount_rejected(self, funded_pool, amount):
        with pytest.raises(InvalidInputError):
            funded_pool.submit_claim("alice", 1, amount, "nothing")

    def test_amount_above_coverage_rejected(self, funded_pool):
        with pytest.raises(ExceedsCoverageError):
            funded_pool.submit_claim("alice", 1, 100001, "too much")

    def test_amount_equal_to_coverage_accepted(self, pool):
        pool.purchase("alice", 10000, 30, 100)
        pool.contribute("bob", 20000)
        assert pool.submit_claim("alice", 1, 10000, "total loss") == 1

    def test_amount_above_pool_rejected(self, pool):
        pool.purchase("alice", 100000, 30, 1000)

        with pytest.raises(InsufficientPoolError):
            pool.submit_claim("alice", 1, 1001, "pool too small")

    def test_empty_description_rejected(self, funded_pool):
        with pytest.raises(EmptyDescriptionError) as exc_info:
            funded_pool.submit_claim("alice", 1, 100, "")

        assert isinstance(exc_info.value, InvalidInputError)
        assert exc_info.value.error_code == "EMPTY_DESCRIPTION"

    def test_rejected_submission_does_not_consume_an_id(self, funded_pool):
        with pytest.raises(EmptyDescriptionError):
            funded_pool.submit_claim("alice", 1, 100, "")

        assert funded_pool.submit_claim("alice", 1, 100, "ok") == 1

    def test_unknown_claim_returns_zero_record(self, pool):
        claim = pool.get_claim(3)
        assert claim.claim_id == 0
        assert claim.claim_amount == 0
        assert not claim.processed


class TestAdjudicate:

    def test_approval_pays_claimant(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 50000, "flood damage")

        claim = funded_pool.adjudicate(ADMIN, 1, True)

        assert claim.processed and claim.approved
        assert claim.status == ClaimStatus.APPROVED
        assert claim.payout == 50000
        assert funded_pool.ledger_balance() == 11000
        assert funded_pool.pool_balance() == 11000
        assert funded_pool.custody.disbursed["alice"] == 50000
        assert funded_pool.get_policy(1).has_claimed

    def test_denial_pays_nothing(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 50000, "flood damage")

        claim = funded_pool.adjudicate(ADMIN, 1, False)

        assert claim.processed and not claim.approved
        assert claim.status == ClaimStatus.DENIED
        assert claim.payout == 0
        assert funded_pool.ledger_balance() == 61000
        assert not funded_pool.get_policy(1).has_claimed

    def test_processed_event_carries_payout(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 400, "a")
        funded_pool.submit_claim("alice", 1, 300, "b")
        funded_pool.adjudicate(ADMIN, 1, False)
        funded_pool.adjudicate(ADMIN, 2, True)

        payouts = [e.data["payout"] for e in funded_pool.list_events(EventType.CLAIM_PROCESSED)]
        assert payouts == [0, 300]

    def test_non_administrator_rejected(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 500, "hail")

        with pytest.raises(UnauthorizedError):
            funded_pool.adjudicate("alice", 1, True)
        assert not funded_pool.get_claim(1).processed

    @pytest.mark.parametrize("claim_id", [0, 2])
    def test_unknown_claim(self, funded_pool, claim_id):
        funded_pool.submit_claim("alice", 1, 500, "hail")
        with pytest.raises(ClaimNotFoundError):
            funded_pool.adjudicate(ADMIN, claim_id, True)

    @pytest.mark.parametrize("first,second", [(True, True), (True, False), (False, True), (False, False)])
    def test_second_adjudication_fails(self, funded_pool, first, second):
        funded_pool.submit_claim("alice", 1, 500, "hail")
        funded_pool.adjudicate(ADMIN, 1, first)
        balance = funded_pool.ledger_balance()
        event_count = len(funded_pool.list_events())

        with pytest.raises(AlreadyProcessedError):
            funded_pool.adjudicate(ADMIN, 1, second)

        assert funded_pool.get_claim(1).approved is first
        assert funded_pool.ledger_balance() == balance
        assert len(funded_pool.list_events()) == event_count

    def test_claimed_policy_rejects_new_claims(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 50000, "flood damage")
        funded_pool.adjudicate(ADMIN, 1, True)

        with pytest.raises(AlreadyClaimedError):
            funded_pool.submit_claim("alice", 1, 100, "again")

    def test_only_one_pending_claim_can_be_approved_per_policy(self, funded_pool):
        funded_pool.submit_claim("alice", 1, 1000, "first")
        funded_pool.submit_claim("alice", 1, 2000, "second")
        funded_pool.adjudicate(ADMIN, 1, True)

        with pytest.raises(AlreadyClaimedError):
            funded_pool.adjudicate(ADMIN, 2, True)

        assert not funded_pool.get_claim(2).processed
        assert funded_pool.ledger_balance() == 60000
        # Denial is still possible
        assert funded_pool.adjudicate(ADMIN, 2, False).status == ClaimStatus.DENIED

    def test_approval_aborts_when_pool_shrank(self, funded_pool):
        funded_pool.purchase("carol", 100000, 30, 1000)
        funded_pool.submit_claim("alice", 1, 50000, "flood")
        funded_pool.submit_claim("carol", 2, 50000, "fire")
        funded_pool.adjudicate(ADMIN, 1, True)

        with pytest.raises(InsufficientPoolError):
            funded_pool.adjudicate(ADMIN, 2, True)

        claim = funded_pool.get_claim(2)
        assert not claim.processed
        assert not claim.approved
        assert not funded_pool.get_policy(2).has_claimed
        assert funded_pool.ledger_balance() == 12000

        funded_pool.contribute("bob", 40000)
        assert funded_pool.adjudicate(ADMIN, 2, True).payout == 50000
        assert funded_pool.ledger_balance() == 2000
