"""
Configuration for the Fed Chair Simulator.

Defines the policy targets, state bounds, engine parameters and the two
cadence presets (monthly and quarterly turns).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, NamedTuple, Optional

# --- Dual mandate ---
CPI_TARGET = 2.0
UNEMPLOYMENT_TARGET = 4.0
NEUTRAL_RATE = 3.5  # r-star: rate at which growth/unemployment drift is zero

# --- Hard bounds applied as the last step of each update ---
CREDIBILITY_MIN = 0.0
CREDIBILITY_MAX = 100.0
SENTIMENT_MIN = -50.0
SENTIMENT_MAX = 50.0
CPI_FLOOR = 0.1
UNEMPLOYMENT_FLOOR = 2.0
GDP_GROWTH_FLOOR = -5.0
STOCK_INDEX_FLOOR = 1000.0
RATE_FLOOR = 0.0


class SeedValues(NamedTuple):
    rate: float
    cpi: float
    unemployment: float


# Used when FRED is unavailable: roughly the US position in early 2024
DEFAULT_SEEDS = SeedValues(rate=4.25, cpi=3.0, unemployment=4.0)


@dataclass
class ReputationBands:
    """Credibility rewards and penalties per turn."""

    reward: float  # misery index below calm_misery
    penalty: float  # misery index above crisis_misery (subtracted)
    small_reward: float  # anything in between
    shock_move_penalty: float = 10.0
    shock_move_threshold: float = 0.5  # |adjustment| in percentage points
    calm_misery: float = 1.0
    crisis_misery: float = 4.0


@dataclass
class EngineConfig:
    """All tunable parameters for one simulation session."""

    # --- Cadence ---
    period_months: int = 1
    lag_period: int = 4  # turns before a rate change reaches inflation
    start_date: date = field(default_factory=lambda: date(2024, 1, 1))
    lag_maxlen: Optional[int] = None  # cap on stored lag entries; None keeps all

    # --- Stochastic terms ---
    shock_probability: float = 0.20
    noise_multiplier: float = 1.0

    # --- Reputation ---
    reputation: ReputationBands = field(
        default_factory=lambda: ReputationBands(reward=5.0, penalty=10.0, small_reward=1.0)
    )

    # --- Markets ---
    flow_weight: float = 10.0  # order flow per point of sentiment
    trading_enabled: bool = False

    # --- Initial conditions not supplied by seed data ---
    initial_credibility: float = 50.0
    initial_sentiment: float = 0.0
    initial_gdp_growth: float = 2.0
    initial_stock_index: float = 4000.0
    starting_cash: float = 10_000.0
    starting_portfolio: float = 10_000.0  # passive net worth when trading is off

    @property
    def lag_seed_length(self) -> int:
        return self.lag_period + 2


CADENCE_PRESETS: Dict[str, EngineConfig] = {
    "Monthly": EngineConfig(),
    # Each turn covers three months of drift, so stakes and noise are larger
    "Quarterly": EngineConfig(
        period_months=3,
        lag_period=2,
        shock_probability=0.35,
        noise_multiplier=1.7,
        reputation=ReputationBands(reward=8.0, penalty=15.0, small_reward=3.0),
        flow_weight=25.0,
    ),
}


def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, pinning the day to 1."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def period_label(d: date) -> str:
    """Label like '2024-01'."""
    return f"{d.year:04d}-{d.month:02d}"


def parse_period_label(label: str) -> date:
    """First day of the month named by a 'YYYY-MM' label."""
    year, month = label.split("-")[:2]
    return date(int(year), int(month), 1)
