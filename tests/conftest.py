import pytest

from fedchair.config import EngineConfig


class FixedRandom:
    """Random source returning the same draw every time.

    0.5 makes every noise term exactly zero and never fires a shock for
    probabilities at or below 0.5.
    """

    def __init__(self, value=0.5, index=0):
        self.value = value
        self.index = index

    def random(self):
        return self.value

    def integers(self, n):
        return self.index % n


class ScriptedRandom(FixedRandom):
    """Plays back `values` from random(), then falls back to 0.5."""

    def __init__(self, values, index=0):
        super().__init__(0.5, index)
        self.values = list(values)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.value


@pytest.fixture
def quiet_config():
    """Monthly cadence with noise and shocks switched off."""
    return EngineConfig(noise_multiplier=0.0, shock_probability=0.0)
