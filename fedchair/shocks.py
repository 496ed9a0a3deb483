"""
Exogenous macro shocks.

At most one shock fires per turn. Its deltas are injected into that turn's
sentiment, growth and inflation updates only; nothing is queued.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Shock:
    """A one-turn perturbation profile."""

    name: str
    cpi: float = 0.0
    gdp: float = 0.0
    sentiment: float = 0.0
    narrative: str = ""
    severe: bool = False


# Returned when nothing fires. Compare by identity: a catalog entry with
# all-zero deltas is still a fired shock.
NEUTRAL_SHOCK = Shock(name="none")

# Deltas are in the units of the state they hit: pp of CPI and GDP growth,
# points of sentiment.
SHOCK_CATALOG: Tuple[Shock, ...] = (
    Shock(
        "Oil supply disruption", cpi=0.6, gdp=-0.3, sentiment=-8.0,
        narrative="OPEC+ cuts output sharply; energy prices spike.",
        severe=True,
    ),
    Shock(
        "Regional bank run", cpi=-0.1, gdp=-0.6, sentiment=-15.0,
        narrative="Depositors flee mid-sized lenders; credit conditions tighten.",
        severe=True,
    ),
    Shock(
        "Tariff escalation", cpi=0.4, gdp=-0.4, sentiment=-10.0,
        narrative="New tariffs announced on major trading partners.",
        severe=True,
    ),
    Shock(
        "Productivity surprise", cpi=-0.2, gdp=0.5, sentiment=10.0,
        narrative="Output per hour jumps on AI adoption; margins widen.",
    ),
    Shock(
        "Consumer spending boom", cpi=0.3, gdp=0.4, sentiment=6.0,
        narrative="Retail sales beat every forecast for the period.",
    ),
    Shock(
        "Supply chains ease", cpi=-0.3, gdp=0.2, sentiment=4.0,
        narrative="Shipping costs fall back to pre-pandemic levels.",
    ),
    Shock(
        "Housing slump", cpi=-0.1, gdp=-0.3, sentiment=-6.0,
        narrative="Home sales fall to a decade low as mortgage rates bite.",
    ),
    Shock(
        "Fiscal stimulus package", cpi=0.3, gdp=0.3, sentiment=5.0,
        narrative="Congress passes a large spending bill.",
    ),
)


def draw_shock(rng, probability: float, catalog: Sequence[Shock] = SHOCK_CATALOG) -> Shock:
    """Return a uniformly drawn catalog entry with `probability`, else NEUTRAL_SHOCK.

    `rng` needs `random()` and `integers(n)`, as numpy's Generator provides.
    Exactly one `random()` call is made per draw, plus one `integers()` call
    when a shock fires.
    """
    if not catalog or rng.random() >= probability:
        return NEUTRAL_SHOCK
    return catalog[int(rng.integers(len(catalog)))]
