# src/currex/adapters/persistence/widget_store.py
"""
Widget Rate Store - Cross-process Handoff of the Latest Rates

The main process writes a WidgetSnapshot after every full refresh; the
widget process reads it without touching the network. The whole payload is
replaced on each write under a single key, and a separate marker key holds
the lastUpdated instant of the last write. Widget settings (the selected currency) live
in the same store.

JSON layout:
    {"bestBuyRates": {cur: Q}, "bestSellRates": {cur: Q},
     "allRates": {cur: [Q, ...]}, "lastUpdated": iso}
    Q = {"currencyType", "buyRate", "sellRate", "bankName", "timestamp"}

Files that USE this module:
- currex.application.rates_service (publishes snapshots after refresh_all)
- currex.app (composition root)
- tests.test_widget_store (unit tests)

Files that this module USES:
- currex.adapters.persistence.blob_store (SharedBlobStore)
- currex.domain.models (WidgetSnapshot, WidgetSettings, BankQuote)
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from currex.adapters.persistence.blob_store import SharedBlobStore
from currex.domain.models import BankQuote, WidgetSettings, WidgetSnapshot

log = logging.getLogger(__name__)

WIDGET_DATA_KEY = "widgetExchangeRateData"
LAST_UPDATE_KEY = "lastUpdateTime"
WIDGET_SETTINGS_KEY = "widgetSettings"


def _parse_instant(raw: str) -> datetime:
    # Accept both "...Z" and "+00:00"
    ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def quote_to_json(quote: BankQuote) -> Dict[str, Any]:
    return {
        "currencyType": quote.currency,
        "buyRate": quote.buy,
        "sellRate": quote.sell,
        "bankName": quote.bank,
        "timestamp": quote.timestamp,
    }


def quote_from_json(data: Dict[str, Any]) -> BankQuote:
    return BankQuote(
        bank=str(data["bankName"]),
        buy=float(data["buyRate"]),
        sell=float(data["sellRate"]),
        timestamp=str(data.get("timestamp", "")),
        currency=str(data.get("currencyType", "")),
    )


def snapshot_to_json(snapshot: WidgetSnapshot) -> Dict[str, Any]:
    """
    Convert WidgetSnapshot to a JSON-serializable dictionary.
    """
    return {
        "bestBuyRates": {cur: quote_to_json(q) for cur, q in snapshot.best_buy_rates.items()},
        "bestSellRates": {cur: quote_to_json(q) for cur, q in snapshot.best_sell_rates.items()},
        "allRates": {
            cur: [quote_to_json(q) for q in quotes]
            for cur, quotes in snapshot.all_rates.items()
        },
        "lastUpdated": snapshot.last_updated.isoformat(),
    }


def snapshot_from_json(data: Dict[str, Any]) -> WidgetSnapshot:
    """
    Create WidgetSnapshot from a JSON dictionary.

    ``allRates`` is optional; payloads written without it read back with an
    empty mapping.

    Raises:
        KeyError, ValueError, TypeError: If the payload is malformed
    """
    return WidgetSnapshot(
        best_buy_rates={cur: quote_from_json(q) for cur, q in data["bestBuyRates"].items()},
        best_sell_rates={cur: quote_from_json(q) for cur, q in data["bestSellRates"].items()},
        all_rates={
            cur: tuple(quote_from_json(q) for q in quotes)
            for cur, quotes in (data.get("allRates") or {}).items()
        },
        last_updated=_parse_instant(data["lastUpdated"]),
    )


class WidgetRateStore:
    """Reads and writes the widget payload in a SharedBlobStore."""

    def __init__(self, blob_store: SharedBlobStore):
        self.blob_store = blob_store

    # --- producer side (main process) ---

    def write(self, snapshot: WidgetSnapshot) -> None:
        """
        Replace the stored payload and set the marker to snapshot.last_updated.

        Raises:
            RuntimeError: If the underlying store fails to write
        """
        payload = json.dumps(snapshot_to_json(snapshot), ensure_ascii=False).encode("utf-8")
        self.blob_store.write(WIDGET_DATA_KEY, payload)
        self.blob_store.write(LAST_UPDATE_KEY, snapshot.last_updated.isoformat().encode("utf-8"))
        log.info(
            "Widget snapshot written: currencies=%s",
            sorted(set(snapshot.best_buy_rates) | set(snapshot.all_rates)),
        )

    # --- consumer side (widget process) ---

    def read(self) -> Optional[WidgetSnapshot]:
        """
        Load the stored payload.

        Returns:
            WidgetSnapshot, or None if nothing was written or it cannot be decoded
        """
        raw = self.blob_store.read(WIDGET_DATA_KEY)
        if raw is None:
            return None
        try:
            return snapshot_from_json(json.loads(raw.decode("utf-8")))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            log.warning("Widget snapshot unreadable, treating as empty: %s", e)
            return None

    def last_update_time(self) -> Optional[datetime]:
        raw = self.blob_store.read(LAST_UPDATE_KEY)
        if raw is None:
            return None
        try:
            return _parse_instant(raw.decode("utf-8").strip())
        except ValueError as e:
            log.warning("Last update marker unreadable: %s", e)
            return None

    def best_buy_rate(self, currency: str) -> Optional[BankQuote]:
        snapshot = self.read()
        if snapshot is None:
            return None
        return snapshot.best_buy_rates.get(currency)

    def best_sell_rate(self, currency: str) -> Optional[BankQuote]:
        snapshot = self.read()
        if snapshot is None:
            return None
        return snapshot.best_sell_rates.get(currency)

    def rates_for(self, currency: str) -> List[BankQuote]:
        """
        Quotes to show in the widget for a currency.

        Uses the full list when the payload has one for the currency;
        otherwise falls back to the best buy quote plus the best sell quote
        (the latter only when it comes from a different bank).
        """
        snapshot = self.read()
        if snapshot is None:
            return []

        if currency in snapshot.all_rates:
            return list(snapshot.all_rates[currency])

        rates: List[BankQuote] = []
        best_buy = snapshot.best_buy_rates.get(currency)
        if best_buy is not None:
            rates.append(best_buy)
        best_sell = snapshot.best_sell_rates.get(currency)
        if best_sell is not None and all(r.bank != best_sell.bank for r in rates):
            rates.append(best_sell)
        return rates

    # --- widget settings ---

    def load_settings(self) -> WidgetSettings:
        """Get widget settings, or the defaults when missing or corrupt."""
        raw = self.blob_store.read(WIDGET_SETTINGS_KEY)
        if raw is None:
            return WidgetSettings()
        try:
            data = json.loads(raw.decode("utf-8"))
            return WidgetSettings(selected_currency=str(data["selectedCurrency"]))
        except (KeyError, ValueError, TypeError) as e:
            log.warning("Widget settings unreadable, using defaults: %s", e)
            return WidgetSettings()

    def save_settings(self, widget_settings: WidgetSettings) -> None:
        payload = json.dumps({"selectedCurrency": widget_settings.selected_currency})
        self.blob_store.write(WIDGET_SETTINGS_KEY, payload.encode("utf-8"))
