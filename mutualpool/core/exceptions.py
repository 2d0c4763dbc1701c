# mutualpool/core/exceptions.py
"""Custom exceptions for the MutualPool ledger."""

from typing import Optional, Dict, Any


class MutualPoolException(Exception):
    """Base exception for all MutualPool errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# ===================
# Input Exceptions
# ===================

class InvalidInputError(MutualPoolException):
    """Zero or negative amounts, out-of-range durations, empty text."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, error_code: str = "INVALID_INPUT"):
        super().__init__(
            message=f"Invalid input: {message}",
            error_code=error_code,
            details={"field": field} if field else {}
        )


class EmptyDescriptionError(InvalidInputError):
    """Claim filed without a description."""

    def __init__(self):
        super().__init__(
            "claim description must not be empty",
            field="description",
            error_code="EMPTY_DESCRIPTION"
        )


# ===================
# Policy Exceptions
# ===================

class PolicyException(MutualPoolException):
    """Base exception for policy-related errors."""

    status_code = 409


class InsufficientPremiumError(PolicyException):
    """Payment below the required premium."""

    status_code = 400

    def __init__(self, required: int, paid: int):
        super().__init__(
            message=f"Insufficient premium: required {required}, paid {paid}",
            error_code="INSUFFICIENT_PREMIUM",
            details={"required": required, "paid": paid}
        )


class NotPolicyholderError(PolicyException):
    """Acting identity does not hold the policy."""

    status_code = 403

    def __init__(self, policy_id: int, identity: str):
        super().__init__(
            message=f"{identity} is not the holder of policy {policy_id}",
            error_code="NOT_POLICYHOLDER",
            details={"policy_id": policy_id, "identity": identity}
        )


class PolicyInactiveError(PolicyException):
    """Policy is not active."""

    def __init__(self, policy_id: int):
        super().__init__(
            message=f"Policy {policy_id} is not active",
            error_code="POLICY_INACTIVE",
            details={"policy_id": policy_id}
        )


class PolicyExpiredError(PolicyException):
    """Coverage window has closed."""

    def __init__(self, policy_id: int, end_time: int, now: int):
        super().__init__(
            message=f"Policy {policy_id} expired at {end_time}",
            error_code="POLICY_EXPIRED",
            details={"policy_id": policy_id, "end_time": end_time, "now": now}
        )


class AlreadyClaimedError(PolicyException):
    """Policy already paid out once."""

    def __init__(self, policy_id: int):
        super().__init__(
            message=f"Policy {policy_id} has already been claimed",
            error_code="ALREADY_CLAIMED",
            details={"policy_id": policy_id}
        )


# ===================
# Claim Exceptions
# ===================

class ClaimException(MutualPoolException):
    """Base exception for claim-related errors."""

    status_code = 409


class ExceedsCoverageError(ClaimException):
    """Claim amount above the policy coverage."""

    status_code = 400

    def __init__(self, policy_id: int, claim_amount: int, coverage_amount: int):
        super().__init__(
            message=f"Claim of {claim_amount} exceeds coverage {coverage_amount} of policy {policy_id}",
            error_code="EXCEEDS_COVERAGE",
            details={
                "policy_id": policy_id,
                "claim_amount": claim_amount,
                "coverage_amount": coverage_amount
            }
        )


class ClaimNotFoundError(ClaimException):
    """Claim not found in storage."""

    status_code = 404

    def __init__(self, claim_id: int):
        super().__init__(
            message=f"Claim not found: {claim_id}",
            error_code="CLAIM_NOT_FOUND",
            details={"claim_id": claim_id}
        )


class AlreadyProcessedError(ClaimException):
    """Claim was already adjudicated."""

    def __init__(self, claim_id: int):
        super().__init__(
            message=f"Claim {claim_id} has already been processed",
            error_code="ALREADY_PROCESSED",
            details={"claim_id": claim_id}
        )


# ===================
# Pool Exceptions
# ===================

class PoolException(MutualPoolException):
    """Base exception for pool accounting errors."""

    status_code = 409


class InsufficientPoolError(PoolException):
    """Pool balance cannot cover the requested amount."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            message=f"Insufficient pool funds: requested {requested}, available {available}",
            error_code="INSUFFICIENT_POOL",
            details={"requested": requested, "available": available}
        )


class TransferFailedError(PoolException):
    """Value transfer to a recipient was rejected."""

    status_code = 502

    def __init__(self, recipient: str, amount: int, reason: str = ""):
        super().__init__(
            message=f"Transfer of {amount} to {recipient} failed" + (f": {reason}" if reason else ""),
            error_code="TRANSFER_FAILED",
            details={"recipient": recipient, "amount": amount}
        )


# ===================
# Access Exceptions
# ===================

class UnauthorizedError(MutualPoolException):
    """Privileged operation attempted by a non-administrator."""

    status_code = 403

    def __init__(self, identity: str, operation: str):
        super().__init__(
            message=f"{identity} is not authorized to {operation}",
            error_code="UNAUTHORIZED",
            details={"identity": identity, "operation": operation}
        )


# ===================
# Storage Exceptions
# ===================

class StorageError(MutualPoolException):
    """Ledger state could not be persisted."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=f"Storage failure: {message}",
            error_code="STORAGE_ERROR",
            details={"path": path} if path else {}
        )
