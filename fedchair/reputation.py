"""Reputation (credibility) scoring against the dual mandate."""

from .config import (
    CPI_TARGET,
    CREDIBILITY_MAX,
    CREDIBILITY_MIN,
    UNEMPLOYMENT_TARGET,
    ReputationBands,
)


def misery_index(cpi: float, unemployment: float) -> float:
    """Absolute distance from both targets, in percentage points."""
    return abs(cpi - CPI_TARGET) + abs(unemployment - UNEMPLOYMENT_TARGET)


def score_reputation(
    rate_adjustment: float, cpi: float, unemployment: float, bands: ReputationBands
) -> float:
    """Raw credibility delta for one turn, before clamping.

    A surprise move (|adjustment| above the threshold) is penalised on top of
    the mandate band, so the two can stack.
    """
    delta = 0.0
    if abs(rate_adjustment) > bands.shock_move_threshold:
        delta -= bands.shock_move_penalty

    misery = misery_index(cpi, unemployment)
    if misery < bands.calm_misery:
        delta += bands.reward
    elif misery > bands.crisis_misery:
        delta -= bands.penalty
    else:
        delta += bands.small_reward
    return delta


def apply_reputation(credibility: float, delta: float) -> float:
    return max(CREDIBILITY_MIN, min(CREDIBILITY_MAX, credibility + delta))
