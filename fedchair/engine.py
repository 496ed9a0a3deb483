"""
Turn engine for the Fed Chair Simulator.

One call to `advance_turn` turns a single rate decision into a new macro
state. The update runs in a fixed order that models policy transmission:

1. Credibility
   The decision is scored against the dual mandate before anything moves.

2. Sentiment
   Markets react first, scaled by how credible the move is.

3. Growth and Employment
   Growth responds to sentiment, the rate gap and inflation drag;
   unemployment follows growth (Okun's law).

4. Inflation
   Responds to demand and to the rate in effect `lag_period` turns ago,
   not the current one.

5. Asset Index and Order Flow
   Forward-looking: reacts to this turn's sentiment and rate move at once.
"""

import logging
import math
import numbers
from typing import List, NamedTuple, Optional

import numpy as np

from . import ledger
from .config import (
    CPI_FLOOR,
    CPI_TARGET,
    GDP_GROWTH_FLOOR,
    NEUTRAL_RATE,
    RATE_FLOOR,
    SENTIMENT_MAX,
    SENTIMENT_MIN,
    STOCK_INDEX_FLOOR,
    UNEMPLOYMENT_FLOOR,
    UNEMPLOYMENT_TARGET,
    EngineConfig,
    add_months,
    parse_period_label,
    period_label,
)
from .errors import InvalidInput, parse_rate_adjustment
from .lag import PolicyLagQueue
from .reputation import apply_reputation, score_reputation
from .shocks import NEUTRAL_SHOCK, SHOCK_CATALOG, Shock, draw_shock
from .state import SimulationState, Snapshot

logger = logging.getLogger(__name__)

# Noise amplitudes: each term is (u - 0.5) * scale, u ~ U[0, 1)
SENTIMENT_NOISE = 5.0
GDP_NOISE = 0.5
UNEMPLOYMENT_NOISE = 0.2
CPI_NOISE = 0.8
INDEX_NOISE = 20.0
FLOW_NOISE = 20.0


class TurnOutcome(NamedTuple):
    credibility_delta: float  # raw, before clamping
    shock_triggered: bool
    shock: Shock
    game_over: bool


# ============================================================
# Update pipeline stages
# ============================================================

def update_sentiment(sentiment, rate_adjustment, credibility, gdp_growth, cpi, shock, noise):
    policy_impact = rate_adjustment * (credibility / 100) * 20
    gdp_gap = (gdp_growth - 2.0) * 5
    cpi_gap = (cpi - CPI_TARGET) * -5
    new = (
        sentiment * 0.7
        + policy_impact * 0.5
        + gdp_gap * 0.3
        + cpi_gap * 0.2
        + shock.sentiment
        + noise
    )
    return max(SENTIMENT_MIN, min(SENTIMENT_MAX, new))


def update_gdp_growth(gdp_growth, sentiment, rate, cpi, shock, noise):
    rate_gap = rate - NEUTRAL_RATE
    # High inflation erodes real purchasing power
    cpi_gap = cpi - CPI_TARGET
    delta = sentiment * 0.04 - rate_gap * 0.3 - cpi_gap * 0.2 + shock.gdp + noise
    return max(GDP_GROWTH_FLOOR, gdp_growth + delta)


def update_unemployment(unemployment, rate, gdp_growth, noise):
    rate_gap = rate - NEUTRAL_RATE
    gdp_gap = gdp_growth - 2.0
    delta = rate_gap * 0.15 - gdp_gap * 0.25 + noise
    return max(UNEMPLOYMENT_FLOOR, unemployment + delta)


def update_cpi(cpi, lagged_rate, sentiment, gdp_growth, shock, noise):
    rate_effect = (lagged_rate - CPI_TARGET) * 0.25
    demand_effect = sentiment * 0.015 + gdp_growth * 0.1
    # A shock replaces the random supply term rather than adding to it
    external = noise if shock is NEUTRAL_SHOCK else shock.cpi
    return max(CPI_FLOOR, cpi + demand_effect + external - rate_effect)


def update_stock_index(stock_index, sentiment, rate_adjustment, gdp_growth, unemployment, noise):
    macro_effect = (gdp_growth / 2) * 50 + (UNEMPLOYMENT_TARGET - unemployment) * 50
    delta_index = (sentiment * 20 + rate_adjustment * -300 + macro_effect) / 10 + noise
    new = stock_index * (1 + delta_index / stock_index * 0.5)
    return max(STOCK_INDEX_FLOOR, new)


def order_flow(sentiment, weight, noise) -> float:
    return float(round(sentiment * weight + noise))


class PolicySimulator:
    """Turn-based policy engine.

    Holds only configuration and the random source; all session data lives
    in the `SimulationState` passed to each call, so one simulator can drive
    any number of independent sessions.
    """

    def __init__(
        self,
        config: EngineConfig = None,
        rng=None,
        seed: Optional[int] = None,
        shock_catalog=SHOCK_CATALOG,
    ):
        self.config = config or EngineConfig()
        maxlen = self.config.lag_maxlen
        if maxlen is not None and maxlen < self.config.lag_seed_length:
            raise InvalidInput(
                f"lag_maxlen must be at least lag_period + 2 ({self.config.lag_seed_length}), got {maxlen}"
            )
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.shock_catalog = tuple(shock_catalog)

    def _noise(self, scale: float) -> float:
        return (self.rng.random() - 0.5) * scale * self.config.noise_multiplier

    def initialize(
        self,
        seed_rate: float,
        seed_cpi: float,
        seed_unemployment: float,
        history: Optional[List[Snapshot]] = None,
    ) -> SimulationState:
        c = self.config
        for name, value in (("rate", seed_rate), ("cpi", seed_cpi), ("unemployment", seed_unemployment)):
            # numbers.Real covers numpy scalars; strings and bools are rejected
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidInput(f"seed {name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise InvalidInput(f"seed {name} must be finite and non-negative, got {value!r}")
        seed_rate, seed_cpi, seed_unemployment = float(seed_rate), float(seed_cpi), float(seed_unemployment)

        history = list(history or [])
        if history:
            # Simulated turns continue the calendar from the last observation
            try:
                current_date = add_months(parse_period_label(history[-1].date), 1)
            except (AttributeError, ValueError) as e:
                raise InvalidInput(f"history dates must be 'YYYY-MM' labels, got {history[-1]!r}") from e
        else:
            current_date = c.start_date

        lag = PolicyLagQueue(maxlen=c.lag_maxlen)
        # Seeds occupy the periods just before turn 0
        lag.seed(seed_rate, c.lag_seed_length, first_period=-c.lag_seed_length)

        state = SimulationState(
            current_date=current_date,
            current_rate=seed_rate,
            credibility=c.initial_credibility,
            cpi=seed_cpi,
            unemployment=seed_unemployment,
            gdp_growth=c.initial_gdp_growth,
            market_sentiment=c.initial_sentiment,
            stock_index=c.initial_stock_index,
            previous_stock_index=c.initial_stock_index,
            rate_policy_lag=lag,
            history=history,
        )
        if c.trading_enabled:
            state.cash = c.starting_cash
            state.portfolio_value = ledger.mark_to_market(state)
        else:
            state.portfolio_value = c.starting_portfolio

        logger.info(
            "Initialized session: rate=%.2f cpi=%.2f unemployment=%.2f (%d history rows)",
            state.current_rate, state.cpi, state.unemployment, len(state.history),
        )
        return state

    def initialize_from(self, seed_data) -> SimulationState:
        """Initialize from a `fedchair.seed.SeedData` bundle."""
        s = seed_data.seeds
        return self.initialize(s.rate, s.cpi, s.unemployment, history=seed_data.history)

    def advance_turn(self, state: SimulationState, rate_adjustment) -> TurnOutcome:
        """Advance `state` by one period.

        Every new value is computed into locals and committed in one block,
        so the state is never left half-updated.
        """
        c = self.config
        rate_adjustment = parse_rate_adjustment(rate_adjustment)

        # ============================================================
        # 1. SHOCK DRAW
        # ============================================================
        shock = draw_shock(self.rng, c.shock_probability, self.shock_catalog)
        # A catalog entry may have all-zero deltas and still count as fired
        shock_fired = shock is not NEUTRAL_SHOCK

        # ============================================================
        # 2. POLICY DECISION
        # ============================================================
        pushed_rate = state.current_rate + rate_adjustment
        new_rate = max(RATE_FLOOR, pushed_rate)

        # ============================================================
        # 3. CREDIBILITY (scored on pre-turn inflation and unemployment)
        # ============================================================
        credibility_delta = score_reputation(
            rate_adjustment, state.cpi, state.unemployment, c.reputation
        )
        credibility = apply_reputation(state.credibility, credibility_delta)

        # ============================================================
        # 4. SENTIMENT -> GROWTH -> UNEMPLOYMENT
        # ============================================================
        sentiment = update_sentiment(
            state.market_sentiment, rate_adjustment, credibility,
            state.gdp_growth, state.cpi, shock, self._noise(SENTIMENT_NOISE),
        )
        gdp_growth = update_gdp_growth(
            state.gdp_growth, sentiment, new_rate, state.cpi, shock,
            self._noise(GDP_NOISE),
        )
        unemployment = update_unemployment(
            state.unemployment, new_rate, gdp_growth, self._noise(UNEMPLOYMENT_NOISE),
        )

        # ============================================================
        # 5. INFLATION (lagged policy rate)
        # ============================================================
        # The queue push is applied to the real state only at commit; read
        # the lookback as if it had already happened.
        cpi_noise = self._noise(CPI_NOISE)
        lag_view = _LagWithPending(state.rate_policy_lag, pushed_rate)
        lagged_rate = lag_view.lookback(c.lag_period, fallback=new_rate)
        cpi = update_cpi(state.cpi, lagged_rate, sentiment, gdp_growth, shock, cpi_noise)

        # ============================================================
        # 6. MARKETS
        # ============================================================
        previous_index = state.stock_index
        stock_index = update_stock_index(
            previous_index, sentiment, rate_adjustment, gdp_growth, unemployment,
            self._noise(INDEX_NOISE),
        )
        flow = order_flow(sentiment, c.flow_weight, self._noise(FLOW_NOISE))

        if c.trading_enabled:
            portfolio = state.cash + state.stock_holdings * stock_index
        else:
            portfolio = state.portfolio_value * (stock_index / previous_index)

        # ============================================================
        # 7. COMMIT
        # ============================================================
        state.current_shock = shock
        state.shock_triggered = shock_fired
        state.rate_policy_lag.push(pushed_rate, state.period_index)
        state.current_rate = new_rate
        state.credibility = credibility
        state.market_sentiment = sentiment
        state.gdp_growth = gdp_growth
        state.unemployment = unemployment
        state.cpi = cpi
        state.previous_stock_index = previous_index
        state.stock_index = stock_index
        state.brokerage_flow = flow
        state.portfolio_value = portfolio
        state.history.append(
            Snapshot(
                date=period_label(state.current_date),
                rate=new_rate,
                cpi=cpi,
                unemployment=unemployment,
                gdp_growth=gdp_growth,
                sentiment=sentiment,
                stock_index=stock_index,
                portfolio=portfolio,
            )
        )
        state.current_date = add_months(state.current_date, c.period_months)
        state.period_index += 1

        logger.debug(
            "Turn %d: adj=%+.2f rate=%.2f cpi=%.2f unemp=%.2f gdp=%.2f sent=%.1f idx=%.0f cred=%.0f shock=%s",
            state.period_index, rate_adjustment, new_rate, cpi, unemployment,
            gdp_growth, sentiment, stock_index, credibility, shock.name,
        )
        if state.game_over:
            logger.warning("Credibility exhausted after turn %d", state.period_index)

        return TurnOutcome(
            credibility_delta=credibility_delta,
            shock_triggered=shock_fired,
            shock=shock,
            game_over=state.game_over,
        )

    def trade(self, state: SimulationState, direction: str, quantity) -> ledger.TradeResult:
        if not self.config.trading_enabled:
            return ledger.TradeResult(False, "Trading is disabled for this session.")
        return ledger.trade(state, direction, quantity)


class _LagWithPending:
    """Read-only view of a lag queue with one not-yet-committed entry at the tail."""

    def __init__(self, queue: PolicyLagQueue, pending_rate: float):
        self.queue = queue
        self.pending_rate = pending_rate

    def lookback(self, n: int, fallback: float) -> float:
        if n == 0:
            return self.pending_rate
        return self.queue.lookback(n - 1, fallback)
