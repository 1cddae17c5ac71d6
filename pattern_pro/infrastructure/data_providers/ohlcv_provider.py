"""
Candle sources for the pattern scanner: a CSV file reader and a ccxt
exchange client behind one ``fetch`` interface.
"""

import csv
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ...domain.value_objects import Candle

logger = logging.getLogger(__name__)

# Accepted header spellings, in priority order, and the positional fallback
COLUMN_ALIASES: Dict[str, Sequence[str]] = {
    "timestamp": ("timestamp", "date", "time", "datetime"),
    "open": ("open", "o"),
    "high": ("high", "h"),
    "low": ("low", "l"),
    "close": ("close", "c"),
    "volume": ("volume", "vol", "v"),
}
POSITIONAL_COLUMNS: Dict[str, int] = {
    "timestamp": 0, "open": 1, "high": 2, "low": 3, "close": 4, "volume": 5,
}


class OHLCVProvider(ABC):
    """Where candles come from."""

    @abstractmethod
    def fetch(
        self,
        symbol: str,
        timeframe: str = "1d",
        limit: int = 120,
        since: Optional[datetime] = None,
    ) -> List[Candle]:
        """Return candles for ``symbol``, oldest first, at most ``limit`` of them."""
        ...


class CSVProvider(OHLCVProvider):
    """
    Candles from a local CSV export.

    The first row is read as a header. Columns are located by name where
    possible (see ``COLUMN_ALIASES``); missing names fall back to the
    ``timestamp, open, high, low, close, volume`` order. Rows that do not
    parse are dropped, and a missing volume cell reads as 0.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)

    def fetch(
        self,
        symbol: str = "",
        timeframe: str = "",
        limit: int = 0,
        since: Optional[datetime] = None,
    ) -> List[Candle]:
        with open(self.file_path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            columns = self.resolve_columns(next(reader, None))
            rows = list(reader)

        candles = [c for c in (self._parse_row(row, columns) for row in rows) if c is not None]
        dropped = len(rows) - len(candles)
        if dropped:
            logger.debug("Dropped %d malformed rows from %s", dropped, self.file_path.name)

        return candles[-limit:] if limit > 0 else candles

    @staticmethod
    def resolve_columns(header: Optional[Sequence[str]]) -> Dict[str, int]:
        """Column index for each candle field."""
        names = [h.strip().lower() for h in header] if header else []
        columns = dict(POSITIONAL_COLUMNS)
        for key, aliases in COLUMN_ALIASES.items():
            match = next((names.index(a) for a in aliases if a in names), None)
            if match is not None:
                columns[key] = match
        return columns

    @staticmethod
    def _parse_row(row: Sequence[str], columns: Dict[str, int]) -> Optional[Candle]:
        try:
            volume_col = columns["volume"]
            return Candle(
                open=float(row[columns["open"]]),
                high=float(row[columns["high"]]),
                low=float(row[columns["low"]]),
                close=float(row[columns["close"]]),
                volume=float(row[volume_col]) if volume_col < len(row) else 0.0,
                timestamp=row[columns["timestamp"]],
            )
        except (ValueError, IndexError):
            return None


class CCXTProvider(OHLCVProvider):
    """Candles from any exchange ccxt supports, looked up by its id."""

    def __init__(self, exchange_id: str = "binance", api_key: str = "", secret: str = ""):
        import ccxt

        exchange_class = getattr(ccxt, exchange_id, None)
        if exchange_class is None:
            raise ValueError(f"Exchange '{exchange_id}' not found in ccxt")

        credentials = {"apiKey": api_key, "secret": secret}
        self.exchange = exchange_class({k: v for k, v in credentials.items() if v})

    def fetch(
        self,
        symbol: str = "BTC/USDT",
        timeframe: str = "1d",
        limit: int = 120,
        since: Optional[datetime] = None,
    ) -> List[Candle]:
        since_ms = int(since.timestamp() * 1000) if since else None
        rows = self.exchange.fetch_ohlcv(symbol, timeframe=timeframe, since=since_ms, limit=limit)
        logger.debug("Fetched %d %s candles for %s", len(rows), timeframe, symbol)
        return [self._to_candle(row) for row in rows]

    @staticmethod
    def _to_candle(row: Sequence[float]) -> Candle:
        # ccxt rows: [ms timestamp, open, high, low, close, volume]
        ts, open_, high, low, close, volume = row[:6]
        return Candle(
            open=float(open_),
            high=float(high),
            low=float(low),
            close=float(close),
            volume=float(volume or 0.0),
            timestamp=datetime.fromtimestamp(ts / 1000),
        )
