"""Headlines and labels shown to the player after each decision."""

from typing import NamedTuple


class Headline(NamedTuple):
    text: str
    warning: bool = False


def sentiment_label(sentiment: float) -> str:
    if sentiment > 30:
        return "Extreme greed"
    if sentiment > 10:
        return "Optimistic"
    if sentiment < -30:
        return "Extreme fear"
    if sentiment < -10:
        return "Worried"
    return "Neutral"


def headline(rate_adjustment: float, outcome, surprise_threshold: float = 0.5) -> Headline:
    """Pick the news ticker line for a completed turn.

    Priority: game over, then a fired shock, then the decision itself.
    """
    if outcome.game_over:
        return Headline(
            "Credibility has hit zero. Congress removes the Chair. Game over.", True
        )
    if outcome.shock_triggered:
        shock = outcome.shock
        return Headline(f"BREAKING: {shock.name}. {shock.narrative}", shock.severe)
    if abs(rate_adjustment) > surprise_threshold:
        return Headline("Surprise move! The Fed jolts rates and markets panic.", True)
    if rate_adjustment == 0:
        return Headline("The Fed holds rates steady. Markets wait and see.")
    if outcome.credibility_delta > 0 and abs(rate_adjustment) <= 0.25:
        return Headline("Steady hand: indicators drift toward target and credibility rises.")
    direction = "raises" if rate_adjustment > 0 else "cuts"
    return Headline(f"The Fed {direction} rates by {abs(rate_adjustment) * 100:.0f} bp.")
