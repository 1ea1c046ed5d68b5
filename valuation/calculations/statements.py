"""
Pro Forma Financial Statements

Derives a simplified income statement, balance sheet and cash flow statement
for every project year from the raw project parameters.

The three series are generated independently using fixed allocation ratios.
They are not reconciled against each other: the balance sheet and cash flow
statement carry an operating net income (revenue - costs - depreciation)
that excludes the interest and tax shown on the income statement.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List

from valuation.calculations.errors import InvalidParameterError
from valuation.calculations.parameters import ProjectParameters

# Cost split
COGS_SHARE = 0.6
OPEX_SHARE = 0.4

# Interest charged every year on the initial investment
INTEREST_RATE_ON_INVESTMENT = 0.1

# Working capital as a share of revenue / operating costs
RECEIVABLES_TO_REVENUE = 0.15
INVENTORY_TO_COSTS = 0.20
PREPAID_TO_COSTS = 0.05
PAYABLES_TO_COSTS = 0.25
ACCRUED_TO_COSTS = 0.10

# Financing mix of the initial investment
DEBT_SHARE = 0.6
EQUITY_SHARE = 0.4

MAINTENANCE_CAPEX_SHARE = 0.05
DIVIDEND_PAYOUT_RATIO = 0.3


@dataclass(frozen=True)
class IncomeStatement:
    year: int
    revenue: float
    cost_of_goods_sold: float
    gross_profit: float
    operating_expenses: float
    ebitda: float
    depreciation: float
    ebit: float
    interest_expense: float
    ebt: float
    tax_expense: float
    net_income: float
    ebitda_margin: float
    net_profit_margin: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class BalanceSheet:
    year: int
    # Assets
    cash_and_equivalents: float
    accounts_receivable: float
    inventory: float
    prepaid_expenses: float
    total_current_assets: float
    property_plant_equipment: float
    accumulated_depreciation: float
    net_ppe: float
    total_assets: float
    # Liabilities
    accounts_payable: float
    accrued_expenses: float
    short_term_debt: float
    total_current_liabilities: float
    long_term_debt: float
    total_liabilities: float
    # Equity
    common_stock: float
    retained_earnings: float
    total_equity: float
    # Ratios
    current_ratio: float
    debt_to_equity_ratio: float
    return_on_equity: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class CashFlowStatement:
    year: int
    # Operating activities
    net_income: float
    depreciation: float
    changes_in_working_capital: float
    net_operating_cash_flow: float
    # Investing activities
    capital_expenditures: float
    net_investing_cash_flow: float
    # Financing activities
    debt_issuance: float
    debt_repayment: float
    dividends: float
    net_financing_cash_flow: float
    # Summary
    net_cash_flow: float
    beginning_cash_balance: float
    ending_cash_balance: float

    def to_dict(self) -> Dict:
        return asdict(self)


def _percent_of(value: float, base: float) -> float:
    return (value / base) * 100 if base > 0 else 0.0


def _operating_net_income(params: ProjectParameters, year: int) -> float:
    """Revenue less costs and depreciation, before interest and tax."""
    return params.revenue_for(year) - params.cost_for(year) - params.annual_depreciation


def generate_income_statements(params: ProjectParameters) -> List[IncomeStatement]:
    """
    Generate one income statement per project year.

    Operating costs split 60/40 into COGS and operating expenses. Interest
    is a flat 10% of the initial investment every year. Losses are untaxed.
    """
    statements = []
    depreciation = params.annual_depreciation
    interest_expense = params.initial_investment * INTEREST_RATE_ON_INVESTMENT

    for year in range(1, params.project_timeline + 1):
        revenue = params.revenue_for(year)
        operating_cost = params.cost_for(year)

        cost_of_goods_sold = operating_cost * COGS_SHARE
        operating_expenses = operating_cost * OPEX_SHARE

        gross_profit = revenue - cost_of_goods_sold
        ebitda = revenue - operating_cost
        ebit = ebitda - depreciation
        ebt = ebit - interest_expense
        tax_expense = ebt * params.tax_rate if ebt > 0 else 0.0
        net_income = ebt - tax_expense

        statements.append(
            IncomeStatement(
                year=year,
                revenue=revenue,
                cost_of_goods_sold=cost_of_goods_sold,
                gross_profit=gross_profit,
                operating_expenses=operating_expenses,
                ebitda=ebitda,
                depreciation=depreciation,
                ebit=ebit,
                interest_expense=interest_expense,
                ebt=ebt,
                tax_expense=tax_expense,
                net_income=net_income,
                ebitda_margin=_percent_of(ebitda, revenue),
                net_profit_margin=_percent_of(net_income, revenue),
            )
        )

    return statements


def generate_balance_sheets(params: ProjectParameters) -> List[BalanceSheet]:
    """
    Generate one year-end balance sheet per project year.

    Retained earnings, accumulated depreciation and cash are running totals
    for this call only. Cash starts at the working capital amount. Debt and
    common stock stay at their year-1 split of the initial investment.
    """
    balance_sheets = []
    retained_earnings = 0.0
    accumulated_depreciation = 0.0
    cash_balance = params.working_capital

    depreciation = params.annual_depreciation
    long_term_debt = params.initial_investment * DEBT_SHARE
    common_stock = params.initial_investment * EQUITY_SHARE

    for year in range(1, params.project_timeline + 1):
        revenue = params.revenue_for(year)
        operating_cost = params.cost_for(year)
        net_income = _operating_net_income(params, year)

        retained_earnings += net_income
        accumulated_depreciation += depreciation
        cash_balance += net_income + depreciation

        accounts_receivable = revenue * RECEIVABLES_TO_REVENUE
        inventory = operating_cost * INVENTORY_TO_COSTS
        prepaid_expenses = operating_cost * PREPAID_TO_COSTS
        accounts_payable = operating_cost * PAYABLES_TO_COSTS
        accrued_expenses = operating_cost * ACCRUED_TO_COSTS

        total_current_assets = (
            cash_balance + accounts_receivable + inventory + prepaid_expenses
        )
        net_ppe = params.initial_investment - accumulated_depreciation
        total_assets = total_current_assets + net_ppe

        total_current_liabilities = accounts_payable + accrued_expenses
        total_liabilities = total_current_liabilities + long_term_debt
        total_equity = common_stock + retained_earnings

        balance_sheets.append(
            BalanceSheet(
                year=year,
                cash_and_equivalents=cash_balance,
                accounts_receivable=accounts_receivable,
                inventory=inventory,
                prepaid_expenses=prepaid_expenses,
                total_current_assets=total_current_assets,
                property_plant_equipment=params.initial_investment,
                accumulated_depreciation=accumulated_depreciation,
                net_ppe=net_ppe,
                total_assets=total_assets,
                accounts_payable=accounts_payable,
                accrued_expenses=accrued_expenses,
                short_term_debt=0.0,
                total_current_liabilities=total_current_liabilities,
                long_term_debt=long_term_debt,
                total_liabilities=total_liabilities,
                common_stock=common_stock,
                retained_earnings=retained_earnings,
                total_equity=total_equity,
                current_ratio=(
                    total_current_assets / total_current_liabilities
                    if total_current_liabilities > 0
                    else 0.0
                ),
                debt_to_equity_ratio=(
                    total_liabilities / total_equity if total_equity > 0 else 0.0
                ),
                return_on_equity=_percent_of(net_income, total_equity),
            )
        )

    return balance_sheets


def calculate_debt_repayment(debt_issued: float, project_timeline: int) -> float:
    """
    Equal annual repayment of year-1 debt over the remaining project years.

    Raises:
        InvalidParameterError: If the project has no year after the first
    """
    if project_timeline <= 1:
        raise InvalidParameterError(
            "Debt repayment needs a project timeline longer than 1 year",
            field="project_timeline",
        )
    return debt_issued / (project_timeline - 1)


def generate_cash_flow_statements(params: ProjectParameters) -> List[CashFlowStatement]:
    """
    Generate one cash flow statement per project year.

    The working capital line is the level of AR + inventory - AP for the
    year, not the change from the prior year. Capex is the full investment
    in year 1 and 5% of it afterwards. Debt raised in year 1 is repaid in
    equal instalments from year 2.
    """
    statements = []
    beginning_cash_balance = params.working_capital
    depreciation = params.annual_depreciation
    debt_raised = params.initial_investment * DEBT_SHARE

    for year in range(1, params.project_timeline + 1):
        revenue = params.revenue_for(year)
        operating_cost = params.cost_for(year)
        net_income = _operating_net_income(params, year)

        accounts_receivable = revenue * RECEIVABLES_TO_REVENUE
        inventory = operating_cost * INVENTORY_TO_COSTS
        accounts_payable = operating_cost * PAYABLES_TO_COSTS
        changes_in_working_capital = accounts_receivable + inventory - accounts_payable

        net_operating_cash_flow = net_income + depreciation - changes_in_working_capital

        if year == 1:
            capital_expenditures = params.initial_investment
        else:
            capital_expenditures = params.initial_investment * MAINTENANCE_CAPEX_SHARE
        net_investing_cash_flow = -capital_expenditures

        debt_issuance = debt_raised if year == 1 else 0.0
        debt_repayment = (
            calculate_debt_repayment(debt_raised, params.project_timeline)
            if year > 1
            else 0.0
        )
        dividends = net_income * DIVIDEND_PAYOUT_RATIO if net_income > 0 else 0.0
        net_financing_cash_flow = debt_issuance - debt_repayment - dividends

        net_cash_flow = (
            net_operating_cash_flow + net_investing_cash_flow + net_financing_cash_flow
        )
        ending_cash_balance = beginning_cash_balance + net_cash_flow

        statements.append(
            CashFlowStatement(
                year=year,
                net_income=net_income,
                depreciation=depreciation,
                changes_in_working_capital=changes_in_working_capital,
                net_operating_cash_flow=net_operating_cash_flow,
                capital_expenditures=capital_expenditures,
                net_investing_cash_flow=net_investing_cash_flow,
                debt_issuance=debt_issuance,
                debt_repayment=debt_repayment,
                dividends=dividends,
                net_financing_cash_flow=net_financing_cash_flow,
                net_cash_flow=net_cash_flow,
                beginning_cash_balance=beginning_cash_balance,
                ending_cash_balance=ending_cash_balance,
            )
        )

        beginning_cash_balance = ending_cash_balance

    return statements
