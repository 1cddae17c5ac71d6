"""
Pattern reports on disk: one JSON file per symbol and run.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Union

from ...domain.entities import PatternReport


class ReportRepository:
    """JSON files under ``output_dir`` named ``patterns_<SYMBOL>_<timestamp>.json``."""

    def __init__(self, output_dir: str = "output"):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        report: PatternReport,
        symbol: str = "UNKNOWN",
        timeframe: str = "",
    ) -> Path:
        """Write ``report`` with a summary header and return the file path."""
        generated_at = datetime.now()
        # microseconds keep files from one multi-symbol scan apart
        stamp = generated_at.strftime("%Y%m%d_%H%M%S_%f")
        filepath = self.output_dir / f"patterns_{self._safe_symbol(symbol)}_{stamp}.json"

        payload = {
            "symbol": symbol,
            "timeframe": timeframe,
            "generated_at": generated_at.isoformat(),
            "summary": self.summarize(report),
            "report": report.to_dict(),
        }
        filepath.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
        return filepath

    def list_reports(self, symbol: str = "") -> List[Path]:
        """Saved report files, oldest first, optionally for one symbol."""
        prefix = f"patterns_{self._safe_symbol(symbol)}_" if symbol else "patterns_"
        return sorted(self.output_dir.glob(f"{prefix}*.json"))

    @staticmethod
    def summarize(report: PatternReport) -> dict:
        return {
            "strongest": report.strongest.name if report.strongest else None,
            "confidence": report.confidence,
            "confluence": report.confluence,
            "bias": report.bias.value,
            "total_patterns": report.total_patterns,
            "bullish": report.bullish_count,
            "bearish": report.bearish_count,
        }

    @staticmethod
    def load(filepath: Union[str, Path]) -> dict:
        """Read a saved report file back as a plain dict."""
        return json.loads(Path(filepath).read_text(encoding="utf-8"))

    @staticmethod
    def _safe_symbol(symbol: str) -> str:
        return symbol.replace("/", "_").replace(":", "_")
