"""P&L summary over trade records."""

from typing import Iterable

from tradejournal.models import TradeRecord


def summarize_records(records: Iterable[TradeRecord]) -> dict:
    """Calculate P&L metrics from a list of records.

    Records whose profit/loss does not contain a number count toward the
    total but not toward wins, losses or P&L.

    Args:
        records: Records to summarize.

    Returns:
        Dictionary with P&L metrics.
    """
    records = list(records)
    net_pnl = 0.0
    winning = 0
    losing = 0
    total_wins = 0.0
    total_losses = 0.0

    for record in records:
        pnl = record.pnl_value()
        if pnl is None:
            continue
        net_pnl += pnl
        if pnl > 0:
            winning += 1
            total_wins += pnl
        elif pnl < 0:
            losing += 1
            total_losses += abs(pnl)

    decided = winning + losing
    return {
        "total_trades": len(records),
        "net_pnl": net_pnl,
        "winning_trades": winning,
        "losing_trades": losing,
        "win_rate": (winning / decided * 100) if decided > 0 else 0.0,
        "avg_win": (total_wins / winning) if winning > 0 else 0.0,
        "avg_loss": (total_losses / losing) if losing > 0 else 0.0,
    }
