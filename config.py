"""
Centralized configuration for the SideBet settlement engine.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "sidebet.db")

# Bet creation limits. Amounts are in cents (the currency's smallest unit).
BET_TITLE_MIN_LENGTH = _parse_int("BET_TITLE_MIN_LENGTH", 3)
BET_TITLE_MAX_LENGTH = _parse_int("BET_TITLE_MAX_LENGTH", 200)
BET_MIN_WAGER = _parse_int("BET_MIN_WAGER", 1)  # $0.01
BET_MAX_WAGER = _parse_int("BET_MAX_WAGER", 1_000_000)  # $10,000
BET_MAX_WINDOW_SECONDS = _parse_int("BET_MAX_WINDOW_SECONDS", 30 * 24 * 60 * 60)  # 30 days

# A GROUP YES_NO bet nobody called correctly is voided (stakes returned)
# instead of being judged with zero winners.
YES_NO_VOID_ON_NO_WINNERS = _parse_bool("YES_NO_VOID_ON_NO_WINNERS", True)

# Settlement retries when the storage batch is rolled back
SETTLEMENT_MAX_ATTEMPTS = _parse_int("SETTLEMENT_MAX_ATTEMPTS", 3)
SETTLEMENT_RETRY_DELAY_SECONDS = _parse_float("SETTLEMENT_RETRY_DELAY_SECONDS", 0.05)

LEADERBOARD_DEFAULT_LIMIT = _parse_int("LEADERBOARD_DEFAULT_LIMIT", 10)
