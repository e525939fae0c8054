# finstat/infrastructure/schemas/statement_schema.py

KIND_KEY = "kind"
PAYLOAD_KEY = "data"

STATEMENT_KINDS = {
    "period",
    "entity",
    "time_series",
    "account",
    "balance_sheet",
    "income_statement",
    "cash_flow_statement",
    "operational_metrics",
    "financial_period_summary",
    "multi_period_report",
}

STATEMENT_REQUIRED_KEYS = {
    "period": {"type", "start_date", "end_date"},
    "entity": {"id"},
    "time_series": {"periods", "values"},
    "account": {"entity", "name", "type", "time_series"},
    "balance_sheet": {"entity", "periods", "asset_accounts", "liability_accounts", "equity_accounts"},
    "income_statement": {"entity", "periods", "revenue_accounts", "expense_accounts"},
    "cash_flow_statement": {
        "entity",
        "periods",
        "operating_accounts",
        "investing_accounts",
        "financing_accounts",
    },
    "operational_metrics": {"entity", "period", "metrics"},
    "financial_period_summary": {"entity", "period", "revenue", "net_income", "total_assets"},
    "multi_period_report": {"entity", "period_summaries"},
}

REPORT_FRAME_INDEX = "period"

REPORT_FRAME_COLUMNS = [
    "revenue",
    "gross_profit",
    "operating_income",
    "ebitda",
    "net_income",
    "gross_margin",
    "operating_margin",
    "net_margin",
    "total_assets",
    "total_liabilities",
    "total_equity",
    "working_capital",
    "net_debt",
    "roa",
    "roe",
    "current_ratio",
    "debt_to_equity",
    "debt_to_ebitda",
    "free_cash_flow",
    "eps",
    "pe_ratio",
    "ev_to_ebitda",
]

REPORT_FRAME_DTYPES = {column: "float64" for column in REPORT_FRAME_COLUMNS}


def validate_statement_payload(kind: str, payload: dict) -> None:
    if kind not in STATEMENT_KINDS:
        raise ValueError(f"Unknown statement kind: {kind!r}")

    if not isinstance(payload, dict):
        raise ValueError(f"Invalid {kind} payload: expected an object")

    missing = STATEMENT_REQUIRED_KEYS[kind] - set(payload)
    if missing:
        raise ValueError(f"Invalid {kind} payload. Missing keys: {sorted(missing)}")
