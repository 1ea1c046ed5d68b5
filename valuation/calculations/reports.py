"""
Financial Reports

Bundles the three statement series with a summary of project totals.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List

from valuation.calculations.parameters import ProjectParameters
from valuation.calculations.statements import (
    BalanceSheet,
    CashFlowStatement,
    IncomeStatement,
    generate_balance_sheets,
    generate_cash_flow_statements,
    generate_income_statements,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSummary:
    total_revenue: float
    total_net_income: float
    total_assets: float
    total_liabilities: float
    total_equity: float
    cumulative_cash_flow: float


@dataclass(frozen=True)
class FinancialReports:
    income_statements: List[IncomeStatement]
    balance_sheets: List[BalanceSheet]
    cash_flow_statements: List[CashFlowStatement]
    summary: ReportSummary

    def to_dict(self) -> Dict:
        return asdict(self)


def summarize_statements(
    income_statements: List[IncomeStatement],
    balance_sheets: List[BalanceSheet],
    cash_flow_statements: List[CashFlowStatement],
) -> ReportSummary:
    """
    Roll statement series up into project totals.

    Balance sheet totals are the final year's figures as reported, not
    re-derived.
    """
    final_balance = balance_sheets[-1] if balance_sheets else None

    return ReportSummary(
        total_revenue=sum(stmt.revenue for stmt in income_statements),
        total_net_income=sum(stmt.net_income for stmt in income_statements),
        total_assets=final_balance.total_assets if final_balance else 0.0,
        total_liabilities=final_balance.total_liabilities if final_balance else 0.0,
        total_equity=final_balance.total_equity if final_balance else 0.0,
        cumulative_cash_flow=sum(stmt.net_cash_flow for stmt in cash_flow_statements),
    )


def generate_financial_reports(params: ProjectParameters) -> FinancialReports:
    """Generate all three statement series and their summary."""
    income_statements = generate_income_statements(params)
    balance_sheets = generate_balance_sheets(params)
    cash_flow_statements = generate_cash_flow_statements(params)

    summary = summarize_statements(income_statements, balance_sheets, cash_flow_statements)
    logger.debug(
        f"Reports for {params.project_timeline} years: "
        f"revenue={summary.total_revenue:.2f} net income={summary.total_net_income:.2f}"
    )

    return FinancialReports(
        income_statements=income_statements,
        balance_sheets=balance_sheets,
        cash_flow_statements=cash_flow_statements,
        summary=summary,
    )
