# finstat/adapters/json_statement_codec.py

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from finstat.domain.numeric import numeric_type_name, resolve_numeric_type
from finstat.entities.account import Account
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.cash_flow_statement import CashFlowStatement
from finstat.entities.entity import Entity
from finstat.entities.financial_period_summary import FinancialPeriodSummary
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.multi_period_report import MultiPeriodReport
from finstat.entities.operational_metrics import OperationalMetrics
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries
from finstat.infrastructure.schemas.statement_schema import (
    KIND_KEY,
    PAYLOAD_KEY,
    validate_statement_payload,
)
from finstat.interfaces.statement_codec import StatementCodec

logger = logging.getLogger(__name__)

_KINDS: dict[type, str] = {
    Period: "period",
    Entity: "entity",
    TimeSeries: "time_series",
    Account: "account",
    BalanceSheet: "balance_sheet",
    IncomeStatement: "income_statement",
    CashFlowStatement: "cash_flow_statement",
    OperationalMetrics: "operational_metrics",
    FinancialPeriodSummary: "financial_period_summary",
    MultiPeriodReport: "multi_period_report",
}

# kinds whose values carry no numeric type of their own
_UNTYPED_KINDS = {"period", "entity"}


def _numeric_type_of(obj: Any) -> Optional[type]:
    if isinstance(obj, TimeSeries):
        return obj.numeric_type
    if isinstance(obj, Account):
        return obj.time_series.numeric_type
    if isinstance(obj, OperationalMetrics):
        values = list(obj.metrics.values())
        return type(values[0]) if values else None
    if isinstance(obj, MultiPeriodReport):
        return obj[0].numeric_type
    return getattr(obj, "numeric_type", None)


class JsonStatementCodec(StatementCodec):
    """
    JSON envelope around the keyed `to_dict` encoding:

        {"kind": "balance_sheet", "numeric_type": "decimal", "data": {...}}

    Decimal values travel as strings so no precision is lost.
    """

    def __init__(self, indent: Optional[int] = None) -> None:
        self.indent = indent

    def encode(self, obj: Any) -> str:
        kind = _KINDS.get(type(obj))
        if kind is None:
            raise TypeError(f"Cannot encode object of type {type(obj).__name__}")

        envelope: dict[str, Any] = {KIND_KEY: kind, PAYLOAD_KEY: obj.to_dict()}
        if kind not in _UNTYPED_KINDS:
            numeric_type = _numeric_type_of(obj) or float
            if numeric_type is int:
                numeric_type = float
            envelope["numeric_type"] = numeric_type_name(numeric_type)

        return json.dumps(envelope, indent=self.indent, ensure_ascii=False)

    def decode(self, payload: str, numeric_type: Optional[type] = None) -> Any:
        try:
            envelope = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON payload: {exc}") from exc

        if not isinstance(envelope, dict) or KIND_KEY not in envelope or PAYLOAD_KEY not in envelope:
            raise ValueError(f"Payload must be an object with '{KIND_KEY}' and '{PAYLOAD_KEY}' keys")

        kind = envelope[KIND_KEY]
        data = envelope[PAYLOAD_KEY]
        validate_statement_payload(kind, data)

        if numeric_type is None and "numeric_type" in envelope:
            numeric_type = resolve_numeric_type(envelope["numeric_type"])

        logger.debug(
            "Decoding payload",
            extra={"kind": kind, "numeric_type": numeric_type.__name__ if numeric_type else None},
        )

        if kind == "period":
            return Period.from_dict(data)
        if kind == "entity":
            return Entity.from_dict(data)
        if kind == "time_series":
            return TimeSeries.from_dict(data, numeric_type or float)
        if kind == "account":
            return Account.from_dict(data, numeric_type or float)
        if kind == "operational_metrics":
            return OperationalMetrics.from_dict(data, numeric_type or float)
        if kind == "balance_sheet":
            return BalanceSheet.from_dict(data, numeric_type)
        if kind == "income_statement":
            return IncomeStatement.from_dict(data, numeric_type)
        if kind == "cash_flow_statement":
            return CashFlowStatement.from_dict(data, numeric_type)
        if kind == "financial_period_summary":
            return FinancialPeriodSummary.from_dict(data, numeric_type)
        return MultiPeriodReport.from_dict(data, numeric_type)
