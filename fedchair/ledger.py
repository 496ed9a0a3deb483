"""
Player trading ledger.

Buys and sells whole units of the asset index against a cash balance. The
ledger never feeds back into the macro pipeline.
"""

import logging
from typing import NamedTuple

from .errors import InsufficientFunds, InsufficientHoldings, InvalidInput, TradeError, parse_quantity

logger = logging.getLogger(__name__)

DIRECTIONS = ("buy", "sell")


class TradeResult(NamedTuple):
    success: bool
    message: str


def mark_to_market(state) -> float:
    return state.cash + state.stock_holdings * state.stock_index


def buy(state, quantity: int) -> float:
    cost = quantity * state.stock_index
    if cost > state.cash:
        raise InsufficientFunds(
            f"Buying {quantity} units costs {cost:,.2f} but only {state.cash:,.2f} cash is available."
        )
    state.cash -= cost
    state.stock_holdings += quantity
    return cost


def sell(state, quantity: int) -> float:
    if quantity > state.stock_holdings:
        raise InsufficientHoldings(
            f"Cannot sell {quantity} units; only {state.stock_holdings} held."
        )
    proceeds = quantity * state.stock_index
    state.cash += proceeds
    state.stock_holdings -= quantity
    return proceeds


def trade(state, direction: str, quantity) -> TradeResult:
    """Execute a trade at the current index level.

    Malformed requests raise InvalidInput. Funding problems come back as a
    failed TradeResult and leave the ledger untouched.
    """
    direction = str(direction).strip().lower()
    if direction not in DIRECTIONS:
        raise InvalidInput(f"direction must be 'buy' or 'sell', got {direction!r}")
    quantity = parse_quantity(quantity)

    try:
        if direction == "buy":
            amount = buy(state, quantity)
        else:
            amount = sell(state, quantity)
    except TradeError as exc:
        logger.info("Trade rejected: %s", exc)
        return TradeResult(False, str(exc))

    state.portfolio_value = mark_to_market(state)
    verb = "Bought" if direction == "buy" else "Sold"
    return TradeResult(True, f"{verb} {quantity} units at {state.stock_index:,.2f} ({amount:,.2f} total).")
