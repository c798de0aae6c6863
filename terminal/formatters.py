from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence

from katana.holdings import BalanceRecord
from katana.yields import PlaceholderHolding, PortfolioSummary, Position, YieldOpportunity

__all__ = [
    "Palette",
    "fmt_money",
    "fmt_qty",
    "format_balances",
    "format_token_balance",
    "format_placeholder_holdings",
    "format_yields",
    "format_positions",
    "format_summary",
    "format_info",
    "format_usage",
]

RULE = "━"


class Palette:
    """ANSI colour wrapper; ``enabled=False`` returns text untouched."""

    CODES = {
        "green": "\x1b[32m",
        "yellow": "\x1b[33m",
        "cyan": "\x1b[36m",
        "red": "\x1b[31m",
    }
    RESET = "\x1b[0m"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def paint(self, color: str, text: str) -> str:
        if not self.enabled:
            return text
        return f"{self.CODES[color]}{text}{self.RESET}"

    def green(self, text: str) -> str:
        return self.paint("green", text)

    def yellow(self, text: str) -> str:
        return self.paint("yellow", text)

    def cyan(self, text: str) -> str:
        return self.paint("cyan", text)

    def red(self, text: str) -> str:
        return self.paint("red", text)


PLAIN = Palette(enabled=False)


# --- Helpers ---
def _dec(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def fmt_money(value: object) -> str:
    amount = _dec(value)
    if amount == 0:
        return "$0.00"
    if abs(amount) >= 1:
        return f"${amount:,.2f}"
    return f"${amount:.6f}"


def fmt_qty(value: object) -> str:
    """Thousands separators on the integer part; fractional digits are kept as given."""
    text = str(value)
    whole, dot, frac = text.partition(".")
    sign = "-" if whole.startswith("-") else ""
    whole = whole.lstrip("-")
    try:
        whole = f"{int(whole):,}"
    except ValueError:
        return text
    return f"{sign}{whole}{dot}{frac}"


def _rule(width: int) -> str:
    return RULE * width


def _title(palette: Palette, text: str, width: int = 40) -> List[str]:
    return [palette.cyan(f"⚔️  {text}"), _rule(width)]


# --- Balances ---
def format_balances(records: Sequence[BalanceRecord], palette: Palette = PLAIN) -> str:
    lines = _title(palette, "Katana Balance")
    if not records:
        lines.append(palette.yellow("No non-zero balances found."))
        return "\n".join(lines)
    for rec in records:
        lines.append(
            f"{rec.symbol:<6} {palette.green(fmt_qty(rec.formatted))}  (~{fmt_money(rec.value_usd)})"
        )
    return "\n".join(lines)


def format_token_balance(record: BalanceRecord, palette: Palette = PLAIN) -> str:
    lines = _title(palette, "Katana Balance")
    lines.append(f"{record.symbol}: {palette.green(fmt_qty(record.formatted))}  (~{fmt_money(record.value_usd)})")
    return "\n".join(lines)


def format_placeholder_holdings(
    holdings: Iterable[PlaceholderHolding], palette: Palette = PLAIN
) -> str:
    lines = [palette.yellow("Falling back to cached data...")]
    for h in holdings:
        amount = fmt_qty(h.amount)
        label = f"{h.symbol}:"
        lines.append(f"{label:<6} {palette.green(amount)}   (~{fmt_money(h.value_usd)})")
    return "\n".join(lines)


# --- Yields & portfolio ---
def format_yields(opportunities: Sequence[YieldOpportunity], palette: Palette = PLAIN) -> str:
    lines = _title(palette, "Katana Yield Opportunities", 50)
    lines.append(f"{'POOL':<20} {'APY':<10} {'TVL':<12} RISK")
    lines.append(_rule(50))
    if not opportunities:
        lines.append(palette.yellow("No pools match the filter."))
    for y in opportunities:
        risk = palette.green(y.risk) if y.risk == "Low" else palette.yellow(y.risk)
        apy = palette.green(f"{y.apy:g}%".ljust(10))
        lines.append(f"{y.pool:<20} {apy} {y.tvl:<12} {risk}")
    return "\n".join(lines)


def format_positions(positions: Sequence[Position], palette: Palette = PLAIN) -> str:
    lines = ["🌾 Active Positions", _rule(50)]
    lines.append(f"{'POOL':<18} {'DEPOSITED':<12} {'APY':<10} EARNED")
    lines.append(_rule(50))
    for p in positions:
        deposited = f"${p.deposited_usd:,.0f}"
        apy = palette.green(f"{p.apy:g}%".ljust(10))
        earned = palette.green(f"+{fmt_money(p.earned_usd)}")
        lines.append(f"{p.pool:<18} {deposited:<12} {apy} {earned}")
    return "\n".join(lines)


def format_summary(summary: PortfolioSummary, palette: Palette = PLAIN) -> str:
    lines = ["📈 Summary", _rule(40)]
    lines.append(f"Wallet Value:    {palette.green(fmt_money(summary.wallet_value))}")
    lines.append(f"Staked Value:    {palette.green(fmt_money(summary.staked_value))}")
    lines.append(f"Pending Rewards: {palette.green(fmt_money(summary.pending_rewards))}")
    lines.append(_rule(40))
    lines.append(f"Total Value:     {palette.green(fmt_money(summary.total_value))}")
    return "\n".join(lines)


# --- Info & usage ---
def format_info(
    network: str,
    endpoint: Optional[str],
    chain_id: Optional[int],
    block: Optional[int],
    error: Optional[str] = None,
    palette: Palette = PLAIN,
    tokens: Sequence[str] = (),
    pools: Sequence[str] = (),
) -> str:
    lines = _title(palette, f"{network} Network Info")
    lines.append(f"Endpoint:      {endpoint or '-'}")
    lines.append(f"Chain ID:      {chain_id if chain_id is not None else 'n/a'}")
    lines.append(f"Block height:  {block if block is not None else 'n/a'}")
    if error:
        lines.append(f"RPC reachable: {palette.red('no')} ({error})")
    else:
        lines.append(f"RPC reachable: {palette.green('yes')}")
    if tokens:
        lines.append(f"Tokens:        {', '.join(tokens)}")
    if pools:
        lines.append(f"Pools:         {', '.join(pools)}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join([
        "⚔️  Katana CLI - DeFi Operations on Katana L2",
        "",
        "Usage: katana-cli <command> [options]",
        "",
        "Commands:",
        "  balance    - Show token balances",
        "  yields     - List yield opportunities",
        "  portfolio  - Full position overview",
        "  info       - Network identity and connectivity",
        "",
        "Options:",
        "  --wallet   - Wallet address",
        "  --token    - Specific token (for balance)",
        "  --min-apy  - Minimum APY filter (for yields)",
    ])
