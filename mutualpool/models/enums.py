# mutualpool/models/enums.py
from enum import Enum


class ClaimStatus(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    DENIED = "denied"


class LedgerEntryKind(str, Enum):
    PREMIUM = "premium"
    CONTRIBUTION = "contribution"
    PAYOUT = "payout"
    DRAIN = "drain"


class EventType(str, Enum):
    POLICY_CREATED = "PolicyCreated"
    PREMIUM_PAID = "PremiumPaid"
    CLAIM_SUBMITTED = "ClaimSubmitted"
    CLAIM_PROCESSED = "ClaimProcessed"
    CONTRIBUTION_MADE = "ContributionMade"
    EMERGENCY_DRAINED = "EmergencyDrained"
