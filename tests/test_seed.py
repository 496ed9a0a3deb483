"""
Tests for the FRED seed loader

Uses httpx.MockTransport in place of the FRED API.
"""

import httpx
import pandas as pd
import pytest

import fedchair.seed as seed
from fedchair.config import DEFAULT_SEEDS
from fedchair.engine import PolicySimulator


def monthly(start, end, value_fn):
    dates = pd.date_range(start, end, freq="MS")
    return [{"date": d.strftime("%Y-%m-%d"), "value": str(value_fn(i))} for i, d in enumerate(dates)]


# CPI index growing exactly 3% a year, starting a year before the rate series
CPI_OBS = monthly("2021-01-01", "2024-03-01", lambda i: 100 * 1.03 ** (i / 12))
RATE_OBS = monthly("2022-01-01", "2024-03-01", lambda i: round(0.25 * (i // 3), 2))
UNRATE_OBS = monthly("2022-01-01", "2024-03-01", lambda i: 3.5 + 0.05 * (i % 4))
UNRATE_OBS[5]["value"] = "."


def fred_transport(overrides=None):
    data = {"FEDFUNDS": RATE_OBS, "CPIAUCSL": CPI_OBS, "UNRATE": UNRATE_OBS}
    data.update(overrides or {})
    requests = []

    def handler(request):
        requests.append(request)
        series_id = request.url.params["series_id"]
        payload = data[series_id]
        if isinstance(payload, int):
            return httpx.Response(payload, json={"error_message": "nope"})
        return httpx.Response(200, json={"observations": payload})

    return httpx.MockTransport(handler), requests


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("FRED_API_KEY", raising=False)
    monkeypatch.setattr(seed, "load_dotenv", lambda *a, **k: False)


class TestLoadSeedData:
    def test_success(self):
        transport, requests = fred_transport()
        data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))

        assert data.source == "fred"
        assert data.seeds.rate == pytest.approx(float(RATE_OBS[-1]["value"]))
        assert data.seeds.cpi == pytest.approx(3.0)
        assert data.seeds.unemployment == pytest.approx(float(UNRATE_OBS[-1]["value"]))

        assert len(data.history) == len(RATE_OBS)
        assert data.history[0].date == "2022-01"
        assert data.history[-1].date == "2024-03"
        assert all(h.gdp_growth == 2.0 and h.sentiment == 0.0 for h in data.history)
        # Missing June observation carried forward from May
        assert data.history[5].unemployment == data.history[4].unemployment

        params = {r.url.params["series_id"]: r.url.params for r in requests}
        assert params["CPIAUCSL"]["observation_start"] == "2021-01-01"
        assert params["FEDFUNDS"]["observation_start"] == seed.START_DATE
        assert params["UNRATE"]["api_key"] == "k"

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("FRED_API_KEY", "env-key")
        transport, requests = fred_transport()
        data = seed.load_seed_data(client=httpx.Client(transport=transport))
        assert data.source == "fred"
        assert requests[0].url.params["api_key"] == "env-key"

    def test_missing_key_falls_back(self):
        data = seed.load_seed_data()
        assert data.source == "default"
        assert data.seeds == DEFAULT_SEEDS
        assert data.history == []

    def test_http_error_falls_back(self):
        transport, _ = fred_transport({"UNRATE": 500})
        data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))
        assert data.source == "default"
        assert data.seeds == DEFAULT_SEEDS

    def test_empty_series_falls_back(self):
        transport, _ = fred_transport({"FEDFUNDS": [{"date": "2024-01-01", "value": "."}]})
        data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))
        assert data.source == "default"

    def test_short_cpi_history_falls_back(self):
        transport, _ = fred_transport({"CPIAUCSL": CPI_OBS[-6:]})
        data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))
        assert data.source == "default"

    def test_malformed_payload_falls_back(self):
        transport, _ = fred_transport({"FEDFUNDS": [{"date": "2024-01-01", "value": "abc"}]})
        data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))
        assert data.source == "default"


def test_engine_accepts_seed_bundle():
    transport, _ = fred_transport()
    data = seed.load_seed_data(api_key="k", client=httpx.Client(transport=transport))
    sim = PolicySimulator(seed=0)
    state = sim.initialize_from(data)
    assert state.current_rate == pytest.approx(data.seeds.rate)
    assert len(state.history) == len(data.history)
    assert state.date_label == "2024-04"
    sim.advance_turn(state, 0.0)
    sim.advance_turn(state, 0.0)
    assert len(state.history) == len(data.history) + 2
    dates = [s.date for s in state.history]
    assert dates[-3:] == ["2024-03", "2024-04", "2024-05"]
    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)


def test_default_bundle_initializes():
    data = seed.load_seed_data()
    state = PolicySimulator(seed=0).initialize_from(data)
    assert state.cpi == DEFAULT_SEEDS.cpi
