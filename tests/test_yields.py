from decimal import Decimal

from katana.yields import (
    PLACEHOLDER_HOLDINGS,
    PLACEHOLDER_POSITIONS,
    YIELD_OPPORTUNITIES,
    filter_yields,
    placeholder_wallet_value,
    summarize_portfolio,
)


def test_filter_yields():
    assert len(filter_yields(YIELD_OPPORTUNITIES)) == 4
    high = filter_yields(YIELD_OPPORTUNITIES, 12.5)
    assert [y.pool for y in high] == ["eth-staking", "eth-usdc-lp", "wbtc-eth-lp"]
    assert filter_yields(YIELD_OPPORTUNITIES, 50) == []
    assert len(filter_yields(YIELD_OPPORTUNITIES, 0)) == 4


def test_summary_totals():
    summary = summarize_portfolio(Decimal("100"), PLACEHOLDER_POSITIONS)
    assert summary.staked_value == Decimal("5500")
    assert summary.pending_rewards == Decimal("71.05")
    assert summary.total_value == Decimal("5671.05")


def test_placeholder_wallet_value():
    assert placeholder_wallet_value(PLACEHOLDER_HOLDINGS) == Decimal("10132.42")
