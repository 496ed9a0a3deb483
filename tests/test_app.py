"""
Tests for the Streamlit dashboard

Drives app.py headlessly with streamlit's AppTest.

Tests cover:
- Rate preview follows the slider before any commit
- Committing a decision advances the session by one turn
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from fedchair.config import DEFAULT_SEEDS

APP = str(Path(__file__).resolve().parent.parent / "app.py")


def preview(at):
    return [c.value for c in at.caption if c.value.startswith("Rate after decision")]


@pytest.fixture
def app():
    at = AppTest.from_file(APP, default_timeout=30)
    at.run()
    assert not at.exception
    return at


class TestDecisionPanel:
    def test_preview_starts_at_seed_rate(self, app):
        assert preview(app) == [f"Rate after decision: {DEFAULT_SEEDS.rate:.2f}%"]

    def test_preview_updates_when_slider_moves(self, app):
        """Moving the slider re-renders the preview without committing"""
        app.slider(key="adj_bp").set_value(50).run()
        assert preview(app) == [f"Rate after decision: {DEFAULT_SEEDS.rate + 0.5:.2f}%"]
        assert app.session_state["state"].turns_played == 0

        app.slider(key="adj_bp").set_value(-100).run()
        assert preview(app) == [f"Rate after decision: {DEFAULT_SEEDS.rate - 1.0:.2f}%"]

    def test_commit_advances_one_turn(self, app):
        app.slider(key="adj_bp").set_value(25).run()
        app.button(key="commit").click().run()
        assert not app.exception
        state = app.session_state["state"]
        assert state.turns_played == 1
        assert state.current_rate == pytest.approx(DEFAULT_SEEDS.rate + 0.25)
        assert len(state.history) == 1
