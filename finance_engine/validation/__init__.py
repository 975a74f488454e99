"""Ledger validation package."""

from finance_engine.validation.consistency import ConsistencyChecker, check_consistency

__all__ = ["ConsistencyChecker", "check_consistency"]
