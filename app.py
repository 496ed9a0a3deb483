"""
Fed Chair Simulator - Interactive Dashboard

You chair the central bank. Each turn, set a rate adjustment and watch
inflation, unemployment, growth, markets and your credibility respond.

Run with: streamlit run app.py
"""

import logging
from dataclasses import replace

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
from plotly.subplots import make_subplots

from fedchair.config import CADENCE_PRESETS, CPI_TARGET, DEFAULT_SEEDS, UNEMPLOYMENT_TARGET
from fedchair.engine import PolicySimulator
from fedchair.errors import InvalidInput, parse_rate_adjustment
from fedchair.narrative import Headline, headline, sentiment_label
from fedchair.seed import SeedData, load_seed_data

logging.basicConfig(level=logging.INFO)

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="Fed Chair Simulator",
    layout="wide",
    initial_sidebar_state="expanded",
)

COLORS = px.colors.qualitative.Set2

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)


# ── Helper: build line chart ─────────────────────────────────────────
def line_chart(x, y, title, yaxis, color="#1f77b4", target=None):
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=x, y=y, mode="lines", line=dict(color=color, width=2.5),
            hovertemplate="%{y:.2f}<extra></extra>",
        )
    )
    if target is not None:
        fig.add_hline(y=target, line=dict(color="#888", dash="dot", width=1))
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=320,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
    )
    return fig


def policy_chart(df):
    """Rate, CPI and unemployment on shared dates, rate on its own axis."""
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Scatter(x=df.index, y=df["rate"], name="Policy rate (%)",
                   line=dict(color=COLORS[0], width=2.5)),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(x=df.index, y=df["cpi"], name="Inflation (%)",
                   line=dict(color=COLORS[1], width=2)),
        secondary_y=True,
    )
    fig.add_trace(
        go.Scatter(x=df.index, y=df["unemployment"], name="Unemployment (%)",
                   line=dict(color=COLORS[2], width=2)),
        secondary_y=True,
    )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Rate, Inflation and Unemployment", font=dict(size=14)),
        height=380,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.35, font=dict(size=10)),
    )
    fig.update_yaxes(title_text="Rate (%)", secondary_y=False)
    fig.update_yaxes(title_text="CPI / Unemployment (%)", secondary_y=True)
    return fig


def new_game(preset_name, trading, use_fred, seed):
    config = replace(CADENCE_PRESETS[preset_name], trading_enabled=trading)
    seed_data = load_seed_data() if use_fred else SeedData(DEFAULT_SEEDS, [], "default")
    sim = PolicySimulator(config=config, seed=seed)
    st.session_state.sim = sim
    st.session_state.state = sim.initialize_from(seed_data)
    st.session_state.seed_source = seed_data.source
    st.session_state.news = Headline("You are now Chair of the Federal Reserve. Make your first decision.")
    st.session_state.trade_msg = None


# ── Sidebar ──────────────────────────────────────────────────────────
st.sidebar.title("Game Setup")

preset_name = st.sidebar.selectbox("Turn Cadence", list(CADENCE_PRESETS.keys()), index=0)
trading = st.sidebar.checkbox("Enable trading", value=False)
use_fred = st.sidebar.checkbox(
    "Seed from FRED", value=False,
    help="Uses FRED_API_KEY from the environment; falls back to defaults",
)
random_seed = st.sidebar.number_input("Random seed (0 = random)", 0, 10_000, 0, step=1)

if st.sidebar.button("New Game") or "state" not in st.session_state:
    new_game(preset_name, trading, use_fred, random_seed or None)

sim = st.session_state.sim
state = st.session_state.state

if st.session_state.seed_source == "default":
    st.sidebar.caption(
        f"Default seeds: rate {DEFAULT_SEEDS.rate:.2f}%, CPI {DEFAULT_SEEDS.cpi:.2f}%, "
        f"unemployment {DEFAULT_SEEDS.unemployment:.2f}%"
    )
else:
    st.sidebar.caption("Seeded from FRED (latest observations)")

# ── Header ───────────────────────────────────────────────────────────
st.title("Fed Chair Simulator")
st.markdown(
    f"Decision for **{state.date_label}** (turn {state.turns_played + 1}). "
    f"Targets: inflation {CPI_TARGET:.0f}%, unemployment {UNEMPLOYMENT_TARGET:.0f}%."
)

news = st.session_state.news
if news.warning:
    st.error(news.text)
else:
    st.success(news.text)

# Key metrics row
c1, c2, c3, c4, c5, c6 = st.columns(6)
c1.metric("Policy Rate", f"{state.current_rate:.2f}%")
c2.metric("Inflation", f"{state.cpi:.2f}%")
c3.metric("Unemployment", f"{state.unemployment:.2f}%")
c4.metric("GDP Growth", f"{state.gdp_growth:.2f}%")
c5.metric("Credibility", f"{state.credibility:.0f}/100")
c6.metric("Market Mood", sentiment_label(state.market_sentiment))

# ── Decision ─────────────────────────────────────────────────────────
if state.game_over:
    st.error("Credibility has hit zero. Start a new game from the sidebar.")
else:
    # Outside a form so the preview follows the slider as it moves
    adj_bp = st.slider("Rate adjustment (basis points)", -100, 100, 0, step=25, key="adj_bp")
    st.caption(f"Rate after decision: {max(0.0, state.current_rate + adj_bp / 100):.2f}%")
    if st.button("Commit Decision", key="commit", type="primary"):
        try:
            adjustment = parse_rate_adjustment(adj_bp, unit="bp")
        except InvalidInput as exc:
            st.warning(str(exc))
        else:
            outcome = sim.advance_turn(state, adjustment)
            st.session_state.news = headline(adjustment, outcome)
            st.rerun()

# ── Tabs ─────────────────────────────────────────────────────────────
tab_macro, tab_markets, tab_ledger = st.tabs(["Macro", "Markets", "Portfolio"])

df = state.history_frame()

with tab_macro:
    if df.empty:
        st.info("No history yet. Commit a decision to start the chart.")
    else:
        st.plotly_chart(policy_chart(df), use_container_width=True)
        col1, col2 = st.columns(2)
        with col1:
            st.plotly_chart(
                line_chart(df.index, df["gdp_growth"], "GDP Growth (%)", "%", color="#2ca02c"),
                use_container_width=True,
            )
        with col2:
            st.plotly_chart(
                line_chart(df.index, df["sentiment"], "Market Sentiment", "Points",
                           color="#9467bd", target=0),
                use_container_width=True,
            )

with tab_markets:
    m1, m2, m3 = st.columns(3)
    m1.metric("Stock Index", f"{state.stock_index:,.0f}", f"{state.stock_change:+,.1f}")
    m2.metric("Net Order Flow", f"{state.brokerage_flow:+,.0f}")
    m3.metric("Active Shock", state.current_shock.name if state.shock_triggered else "None")
    played = df.dropna(subset=["stock_index"])
    if not played.empty:
        st.plotly_chart(
            line_chart(played.index, played["stock_index"], "Stock Index", "Index", color="#1f77b4"),
            use_container_width=True,
        )

with tab_ledger:
    st.metric("Net Worth", f"{state.portfolio_value:,.2f}")
    if sim.config.trading_enabled:
        l1, l2 = st.columns(2)
        l1.metric("Cash", f"{state.cash:,.2f}")
        l2.metric("Units Held", f"{state.stock_holdings}")
        with st.form("trade"):
            direction = st.radio("Direction", ["buy", "sell"], horizontal=True)
            quantity = st.number_input("Quantity", min_value=1, value=1, step=1)
            if st.form_submit_button("Place Order"):
                try:
                    result = sim.trade(state, direction, quantity)
                except InvalidInput as exc:
                    st.session_state.trade_msg = (False, str(exc))
                else:
                    st.session_state.trade_msg = (result.success, result.message)
                st.rerun()
        if st.session_state.trade_msg:
            ok, msg = st.session_state.trade_msg
            (st.success if ok else st.warning)(msg)
    else:
        st.caption("Passive portfolio tracking the index. Enable trading in the sidebar to trade.")
