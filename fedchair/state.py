"""Simulation state and per-turn snapshots."""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import List, Optional

import pandas as pd

from .config import period_label
from .lag import PolicyLagQueue
from .shocks import NEUTRAL_SHOCK, Shock


@dataclass(frozen=True)
class Snapshot:
    """One row of the history log."""

    date: str
    rate: float
    cpi: float
    unemployment: float
    gdp_growth: float
    sentiment: float
    stock_index: Optional[float] = None
    portfolio: Optional[float] = None


@dataclass
class SimulationState:
    """Everything one session needs between turns.

    Created by `PolicySimulator.initialize` and mutated only by
    `PolicySimulator.advance_turn` and the ledger.
    """

    current_date: date
    current_rate: float
    credibility: float
    cpi: float
    unemployment: float
    gdp_growth: float
    market_sentiment: float
    stock_index: float
    previous_stock_index: float
    rate_policy_lag: PolicyLagQueue
    brokerage_flow: float = 0.0
    current_shock: Shock = NEUTRAL_SHOCK
    shock_triggered: bool = False
    history: List[Snapshot] = field(default_factory=list)
    period_index: int = 0

    # Ledger
    cash: float = 0.0
    stock_holdings: int = 0
    portfolio_value: float = 0.0

    @property
    def game_over(self) -> bool:
        return self.credibility <= 0

    @property
    def turns_played(self) -> int:
        return self.period_index

    @property
    def stock_change(self) -> float:
        return self.stock_index - self.previous_stock_index

    @property
    def date_label(self) -> str:
        return period_label(self.current_date)

    def as_dict(self) -> dict:
        """Plain read-only copy of every field for a presentation layer."""
        return {
            "current_date": self.current_date,
            "current_rate": self.current_rate,
            "credibility": self.credibility,
            "cpi": self.cpi,
            "unemployment": self.unemployment,
            "gdp_growth": self.gdp_growth,
            "market_sentiment": self.market_sentiment,
            "stock_index": self.stock_index,
            "previous_stock_index": self.previous_stock_index,
            "brokerage_flow": self.brokerage_flow,
            "rate_policy_lag": [tuple(e) for e in self.rate_policy_lag],
            "current_shock": asdict(self.current_shock),
            "shock_triggered": self.shock_triggered,
            "history": [asdict(s) for s in self.history],
            "period_index": self.period_index,
            "cash": self.cash,
            "stock_holdings": self.stock_holdings,
            "portfolio_value": self.portfolio_value,
            "game_over": self.game_over,
        }

    def history_frame(self) -> pd.DataFrame:
        """History as a DataFrame indexed by period label, for charting."""
        columns = [f.name for f in fields(Snapshot)]
        df = pd.DataFrame([asdict(s) for s in self.history], columns=columns)
        return df.set_index("date")
