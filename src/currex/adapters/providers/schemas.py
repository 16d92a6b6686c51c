# src/currex/adapters/providers/schemas.py
"""
Wire Schemas - Pydantic Models for Rates API Payloads

Describes the JSON returned by the two rates endpoints. Bank names are not
known in advance, so bank arrays are kept as extra fields on the current
rates payload and as a free-form mapping on historical points.

Files that USE this module:
- currex.adapters.providers.parser (validates payloads before normalizing)

Files that this module USES:
- None
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator


class RateRecord(BaseModel):
    """One bank rate record; buy/sell arrive as strings."""

    model_config = ConfigDict(extra="ignore")

    base_currency: str = ""
    currency: str = ""
    rate_buy: str
    rate_sell: str

    @field_validator("rate_buy", "rate_sell", mode="before")
    @classmethod
    def numbers_to_str(cls, v):
        # Some deployments send bare numbers instead of strings
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


_RECORDS = TypeAdapter(List[RateRecord])


class CurrentRatesPayload(BaseModel):
    """Body of GET /api/exchange_rates: one array per bank plus a timestamp."""

    model_config = ConfigDict(extra="allow")

    timestamp: str

    def bank_records(self, banks: Optional[List[str]] = None) -> Dict[str, List[RateRecord]]:
        """
        Validate and return the record arrays per bank.

        Args:
            banks: Fixed bank order; None discovers every array field in
                payload order

        Returns:
            Mapping bank -> records (banks that are absent are left out)
        """
        extra = self.model_extra or {}
        names = list(banks) if banks is not None else [k for k, v in extra.items() if isinstance(v, list)]
        result: Dict[str, List[RateRecord]] = {}
        for name in names:
            raw = extra.get(name)
            if raw is None:
                continue
            result[name] = _RECORDS.validate_python(raw)
        return result


class HistoricalPoint(BaseModel):
    timestamp: str
    rates: Dict[str, Optional[List[RateRecord]]] = {}


class HistoricalRatesPayload(BaseModel):
    """Body of GET /api/exchange_rates_period."""

    currency: str
    period_days: int
    data: List[HistoricalPoint]
