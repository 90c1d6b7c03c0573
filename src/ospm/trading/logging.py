"""Structured record of trade previews and submissions.

Tracks:
- preview records: every recomputed preview (state, intent, result)
- submission records: trades sent to the Oracle, with the local preview next
  to the authoritative fill so the two can be compared
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from ..market.lmsr import MarketState, Side, TradePreview


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class TradeLogger:
    """Logs previews and submissions to CSV/JSON."""

    log_dir: Path = Path("trade_logs")
    run_id: str = "session_001"

    def __post_init__(self):
        self.preview_records: List[Dict[str, Any]] = []
        self.submission_records: List[Dict[str, Any]] = []

        self.log_dir = Path(self.log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def log_preview(
        self,
        state: MarketState,
        side: Side,
        spend: float,
        preview: Optional[TradePreview],
    ) -> None:
        """Log one recomputed preview.

        Args:
            state: Market snapshot the preview was priced against
            side: Side being bought
            spend: Tokens the visitor intends to spend
            preview: Result, or None when no preview was available
        """
        record = {
            "logged_at": _now(),
            "q_yes": state.q_yes,
            "q_no": state.q_no,
            "b": state.b,
            "side": Side.parse(side).value,
            "spend": spend,
            "has_preview": preview is not None,
        }
        record.update(_preview_fields(preview))
        self.preview_records.append(record)

    def log_submission(
        self,
        market_id: str,
        side: Side,
        spend: float,
        preview: Optional[TradePreview],
        response: Any = None,
    ) -> None:
        """Log a submitted trade.

        Args:
            market_id: Oracle market identifier
            side: Side bought
            spend: Tokens submitted
            preview: Local preview at submission time
            response: Oracle ``TradeResult`` (or None if submission failed)
        """
        record = {
            "logged_at": _now(),
            "market_id": market_id,
            "side": Side.parse(side).value,
            "spend": spend,
        }
        record.update(_preview_fields(preview))

        trade = getattr(response, "trade", None)
        if trade is not None:
            record.update({
                "trade_id": trade.id,
                "shares_got": trade.shares_got,
                "amount_spent": trade.amount_spent,
                "price_before": trade.price_before,
                "price_after": trade.price_after,
            })
        self.submission_records.append(record)

    def save_to_csv(self) -> Dict[str, Path]:
        """Save logged data to CSV files.

        Returns:
            Dictionary mapping data type to file path
        """
        saved_files = {}
        for kind, records in self._tables().items():
            if records:
                path = self.log_dir / f"{self.run_id}_{kind}.csv"
                self._save_csv(path, records)
                saved_files[kind] = path
        return saved_files

    def save_to_json(self) -> Dict[str, Path]:
        """Save logged data to JSON files.

        Returns:
            Dictionary mapping data type to file path
        """
        saved_files = {}
        for kind, records in self._tables().items():
            if records:
                path = self.log_dir / f"{self.run_id}_{kind}.json"
                self._save_json(path, records)
                saved_files[kind] = path
        return saved_files

    def get_summary_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "run_id": self.run_id,
            "num_previews": len(self.preview_records),
            "num_empty_previews": sum(1 for r in self.preview_records if not r["has_preview"]),
            "num_submissions": len(self.submission_records),
            "total_spend_submitted": float(sum(r["spend"] for r in self.submission_records)),
        }

        p_after = np.array([r["p_after"] for r in self.preview_records if r["has_preview"]], dtype=float)
        if p_after.size:
            stats["mean_preview_p_after"] = float(np.mean(p_after))
            stats["min_preview_p_after"] = float(np.min(p_after))
            stats["max_preview_p_after"] = float(np.max(p_after))

        # Local preview vs authoritative fill
        pairs = [
            (r["delta_shares"], r["shares_got"])
            for r in self.submission_records
            if r.get("delta_shares") is not None and r.get("shares_got") is not None
        ]
        if pairs:
            previewed, filled = np.array(pairs, dtype=float).T
            stats["mean_share_deviation"] = float(np.mean(np.abs(filled - previewed)))

        return stats

    def _tables(self) -> Dict[str, List[Dict[str, Any]]]:
        return {"previews": self.preview_records, "submissions": self.submission_records}

    @staticmethod
    def _save_csv(path: Path, records: List[Dict[str, Any]]) -> None:
        fieldnames = set()
        for record in records:
            fieldnames.update(record.keys())

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=sorted(fieldnames))
            writer.writeheader()
            writer.writerows(records)

    @staticmethod
    def _save_json(path: Path, records: List[Dict[str, Any]]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, default=str)


def _preview_fields(preview: Optional[TradePreview]) -> Dict[str, Optional[float]]:
    if preview is None:
        return {"delta_shares": None, "cost": None, "p_before": None, "p_after": None}
    return {
        "delta_shares": preview.delta_shares,
        "cost": preview.cost,
        "p_before": preview.p_before,
        "p_after": preview.p_after,
    }


def create_trade_logger(run_id: str, log_dir: Optional[Path] = None) -> TradeLogger:
    """Create a trade logger.

    Args:
        run_id: Unique identifier for this session
        log_dir: Directory for log files (defaults to ./trade_logs)

    Returns:
        Configured TradeLogger instance
    """
    if log_dir is None:
        log_dir = Path("trade_logs")

    return TradeLogger(log_dir=log_dir, run_id=run_id)
