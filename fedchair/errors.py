"""Error taxonomy and input parsing at the engine boundary."""

import math


class SimulationError(Exception):
    """Base class for everything the simulator raises."""


class InvalidInput(SimulationError, ValueError):
    """Malformed rate adjustment, seed, or trade request."""


class TradeError(SimulationError):
    pass


class InsufficientFunds(TradeError):
    pass


class InsufficientHoldings(TradeError):
    pass


class SeedDataError(SimulationError):
    """Seed series could not be fetched or parsed."""


def parse_rate_adjustment(raw, unit: str = "percent") -> float:
    """Convert user input to an adjustment in percentage points.

    `unit="bp"` accepts basis points (slider values), so 25 -> 0.25.
    """
    if isinstance(raw, bool):
        raise InvalidInput(f"rate adjustment must be numeric, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"rate adjustment must be numeric, got {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidInput(f"rate adjustment must be finite, got {raw!r}")
    if unit == "bp":
        return value / 100.0
    if unit != "percent":
        raise InvalidInput(f"unknown unit {unit!r}")
    return value


def parse_quantity(raw) -> int:
    """Trade quantity: a positive whole number of index units."""
    if isinstance(raw, bool):
        raise InvalidInput(f"quantity must be a positive integer, got {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise InvalidInput(f"quantity must be a positive integer, got {raw!r}")
        raw = int(raw)
    try:
        quantity = int(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"quantity must be a positive integer, got {raw!r}") from None
    if quantity <= 0:
        raise InvalidInput(f"quantity must be a positive integer, got {raw!r}")
    return quantity
