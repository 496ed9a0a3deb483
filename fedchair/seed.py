"""
Seed data from FRED (Federal Reserve Economic Data).

Pulls the effective fed funds rate, CPI and unemployment, and turns the
latest observations into starting values for a session. Any failure falls
back to DEFAULT_SEEDS so a game can always start.

Requires FRED_API_KEY in the environment or a .env file.
Free key: https://fred.stlouisfed.org/docs/api/api_key.html
"""

import logging
import os
from typing import List, NamedTuple, Optional

import httpx
import pandas as pd
from dotenv import load_dotenv

from .config import DEFAULT_SEEDS, SeedValues, period_label
from .errors import SeedDataError
from .state import Snapshot

logger = logging.getLogger(__name__)

FRED_BASE_URL = "https://api.stlouisfed.org/fred/series/observations"
SERIES = {
    "rate": "FEDFUNDS",
    "cpi": "CPIAUCSL",  # index level; converted to year-over-year %
    "unemployment": "UNRATE",
}
START_DATE = "2022-01-01"


class SeedData(NamedTuple):
    seeds: SeedValues
    history: List[Snapshot]
    source: str  # "fred" or "default"


class FredClient:
    def __init__(self, api_key: str, client: Optional[httpx.Client] = None, timeout: float = 15.0):
        self.api_key = api_key
        self.client = client or httpx.Client(timeout=timeout)

    def get_series(self, series_id: str, observation_start: str) -> pd.Series:
        params = {
            "series_id": series_id,
            "api_key": self.api_key,
            "file_type": "json",
            "observation_start": observation_start,
        }
        try:
            r = self.client.get(FRED_BASE_URL, params=params)
            r.raise_for_status()
            # FRED marks missing observations with "."
            rows = [
                (o["date"], float(o["value"]))
                for o in r.json()["observations"]
                if o.get("value") != "."
            ]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            raise SeedDataError(f"could not fetch {series_id}: {exc}") from exc

        if not rows:
            raise SeedDataError(f"{series_id} returned no observations")
        dates, values = zip(*rows)
        return pd.Series(values, index=pd.to_datetime(list(dates)), name=series_id)


def _year_ago(start: str) -> str:
    return (pd.Timestamp(start) - pd.DateOffset(years=1)).strftime("%Y-%m-%d")


def build_history(rate: pd.Series, cpi_yoy: pd.Series, unemployment: pd.Series) -> pd.DataFrame:
    """Align the three series on the rate's dates, carrying gaps forward."""
    df = pd.concat(
        {"rate": rate, "cpi": cpi_yoy, "unemployment": unemployment}, axis=1
    ).sort_index()
    df = df.ffill().dropna(subset=["rate"])
    # Series that only start later get their first value back-filled
    return df.bfill().dropna()


def fetch_seed_data(fred: FredClient, start: str = START_DATE) -> SeedData:
    rate = fred.get_series(SERIES["rate"], start)
    cpi_index = fred.get_series(SERIES["cpi"], _year_ago(start))
    unemployment = fred.get_series(SERIES["unemployment"], start)

    cpi_yoy = (cpi_index.pct_change(periods=12) * 100).dropna()
    cpi_yoy = cpi_yoy[cpi_yoy.index >= pd.Timestamp(start)]
    if cpi_yoy.empty:
        raise SeedDataError("not enough CPI history for a year-over-year rate")

    df = build_history(rate, cpi_yoy, unemployment)
    if df.empty:
        raise SeedDataError("series do not overlap")

    history = [
        Snapshot(
            date=period_label(ts.date()),
            rate=float(row.rate),
            cpi=float(row.cpi),
            unemployment=float(row.unemployment),
            gdp_growth=2.0,  # no historical GDP; shown as neutral
            sentiment=0.0,
        )
        for ts, row in df.iterrows()
    ]
    seeds = SeedValues(
        rate=max(0.0, float(rate.iloc[-1])),
        cpi=max(0.0, float(cpi_yoy.iloc[-1])),
        unemployment=max(0.0, float(unemployment.iloc[-1])),
    )
    return SeedData(seeds, history, "fred")


def load_seed_data(api_key: Optional[str] = None, client: Optional[httpx.Client] = None) -> SeedData:
    """Fetch seeds from FRED, or return the static defaults on any failure."""
    if api_key is None:
        load_dotenv()
        api_key = os.getenv("FRED_API_KEY")
    if not api_key:
        logger.warning("FRED_API_KEY not set; using default seeds %s", DEFAULT_SEEDS)
        return SeedData(DEFAULT_SEEDS, [], "default")

    try:
        data = fetch_seed_data(FredClient(api_key, client=client))
    except SeedDataError as exc:
        logger.warning("FRED seed load failed (%s); using default seeds", exc)
        return SeedData(DEFAULT_SEEDS, [], "default")

    logger.info(
        "Loaded FRED seeds: rate=%.2f cpi=%.2f unemployment=%.2f (%d months)",
        data.seeds.rate, data.seeds.cpi, data.seeds.unemployment, len(data.history),
    )
    return data
