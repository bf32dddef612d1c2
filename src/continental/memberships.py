"""Shared membership-tier definitions.

This module is the single source of truth for the two continental tiers.
Every ledger key, point table and qualification band is scoped to one of
them, and results are always emitted premier first.
"""

from __future__ import annotations

# Premier tier (Champions competition).
PREMIER = "VCC"

# Challenger tier (Challenge / Continental competition).
CHALLENGER = "CCC"

# Output order: premier entities first, then challenger.
MEMBERSHIPS: tuple[str, ...] = (PREMIER, CHALLENGER)


def validate_membership(membership: str) -> str:
    """Return the membership unchanged, raising ValueError for unknown tiers."""
    if membership not in MEMBERSHIPS:
        raise ValueError(f"membership must be one of {MEMBERSHIPS}, got {membership!r}")
    return membership
