# mutualpool/core/constants.py
"""Ledger constants."""

# ===================
# Monetary Constants
# ===================

BASIS_POINTS = 10000

# ===================
# Time Constants
# ===================

SECONDS_PER_DAY = 24 * 60 * 60

# ===================
# Identifiers
# ===================

FIRST_POLICY_ID = 1
FIRST_CLAIM_ID = 1

# Zero-value records carry this id
ABSENT_ID = 0
