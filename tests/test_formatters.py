from decimal import Decimal

from katana.holdings import BalanceRecord
from katana.yields import PLACEHOLDER_HOLDINGS, YIELD_OPPORTUNITIES, PortfolioSummary
from terminal.formatters import (
    Palette,
    fmt_money,
    fmt_qty,
    format_balances,
    format_info,
    format_placeholder_holdings,
    format_summary,
    format_usage,
    format_yields,
)


def _rec(symbol, formatted, value):
    return BalanceRecord(symbol, symbol, 1, formatted, Decimal(formatted), Decimal(value))


def test_money_and_qty():
    assert fmt_money(Decimal("5230")) == "$5,230.00"
    assert fmt_money(0) == "$0.00"
    assert fmt_money("0.5") == "$0.500000"
    assert fmt_qty("5230.00") == "5,230.00"
    assert fmt_qty("2.4521") == "2.4521"
    assert fmt_qty("0.000000000000000001") == "0.000000000000000001"


def test_balances_plain():
    txt = format_balances([_rec("USDC", "5230.00", "5230"), _rec("ETH", "2.45", "4900")])
    assert "Katana Balance" in txt
    assert "USDC   5,230.00  (~$5,230.00)" in txt
    assert "ETH    2.45  (~$4,900.00)" in txt
    assert "\x1b[" not in txt


def test_balances_empty_and_colored():
    txt = format_balances([], Palette(enabled=True))
    assert "No non-zero balances found." in txt
    assert "\x1b[33m" in txt


def test_placeholder_holdings():
    txt = format_placeholder_holdings(PLACEHOLDER_HOLDINGS)
    assert txt.startswith("Falling back to cached data...")
    assert "2.4521" in txt and "(~$4,902.42)" in txt
    assert "5,230.00" in txt


def test_yields_table():
    txt = format_yields(YIELD_OPPORTUNITIES)
    assert "POOL" in txt and "RISK" in txt
    assert "eth-staking" in txt and "12.5%" in txt and "$45.2M" in txt
    assert format_yields([]).endswith("No pools match the filter.")


def test_summary():
    txt = format_summary(PortfolioSummary(Decimal("100"), Decimal("5500"), Decimal("71.05")))
    assert "Staked Value:    $5,500.00" in txt
    assert "Total Value:     $5,671.05" in txt


def test_info_and_usage():
    ok = format_info("Katana L2", "http://rpc", 747474, 99)
    assert "Chain ID:      747474" in ok and "RPC reachable: yes" in ok
    down = format_info("Katana L2", "http://rpc", None, None, error="refused")
    assert "RPC reachable: no (refused)" in down
    assert "Usage: katana-cli" in format_usage()
