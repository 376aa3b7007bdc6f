"""
Pure PE valuation math.

This module contains pure functions for the valuation calculation. No
pandas, no I/O, no logging, just numeric computations on already normalized
inputs. Every function is total: division by zero is guarded and degrades
to 0 instead of raising or returning nan.

Key functions:
  verify_quality: Profit realism, capital intensity and leverage checks
  project_earnings: Three years of compounded net income
  adjust_pe: Leverage haircut on the baseline PE multiple
  compute_buy_price: Margin-of-safety discounted value per share
  compute_sell_price: Lower of two multiple-based sell estimates
  compute_upside: Percentage distance from current price to buy price
"""

from typing import Tuple

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import FutureEarnings
from pe_valuation.domain.types import VerificationResult

PROJECTION_YEARS = 3


def verify_quality(
    facts: FinancialFacts,
    high_leverage_threshold: float,
    profit_realism_ratio: float = 0.8,
    capex_tolerance: float = 1.2,
) -> Tuple[VerificationResult, bool]:
  """
  Run the quality checks on a company's financial facts.

  The profit realism check multiplies instead of dividing, so it is safe
  for zero or negative net income.

  Args:
    facts: Normalized financial facts
    high_leverage_threshold: Leverage ratio treated as high leverage
    profit_realism_ratio: Minimum operating cash flow / net income
    capex_tolerance: Maximum capex / depreciation

  Returns:
    Tuple of (verification, is_high_leverage)
  """
  if facts.total_assets > 0:
    leverage_ratio = facts.interest_bearing_debt / facts.total_assets
  else:
    leverage_ratio = 0.0

  verification = VerificationResult(
      profit_is_real=(facts.operating_cash_flow >=
                      facts.net_income * profit_realism_ratio),
      profit_sustainable=facts.net_income > 0,
      low_capital_consumption=(facts.capex <=
                               facts.depreciation * capex_tolerance),
      leverage_ratio=leverage_ratio,
  )
  return verification, leverage_ratio >= high_leverage_threshold


def project_earnings(net_income: float, growth_rate: float) -> FutureEarnings:
  """
  Compound net income forward three years.

  A loss compounds with its sign: positive growth widens it.

  Args:
    net_income: Current annual net income
    growth_rate: Annual growth rate as a fraction

  Returns:
    FutureEarnings with year_n = net_income * (1 + growth_rate)^n
  """
  # Repeated multiplication overflows to inf where ** would raise.
  projected = []
  earnings = net_income
  for _ in range(PROJECTION_YEARS):
    earnings *= 1.0 + growth_rate
    projected.append(earnings)
  year1, year2, year3 = projected
  return FutureEarnings(year1=year1, year2=year2, year3=year3)


def adjust_pe(
    reasonable_pe: float,
    is_high_leverage: bool,
    haircut: float = 0.7,
) -> float:
  """Apply the leverage haircut to the baseline PE when highly levered."""
  if is_high_leverage:
    return reasonable_pe * haircut
  return reasonable_pe


def compute_buy_price(
    year3_earnings: float,
    adjusted_pe: float,
    safety_margin: float,
    total_shares: float,
) -> Tuple[float, float]:
  """
  Compute the buy price from the year-3 terminal value.

  Args:
    year3_earnings: Projected net income in year 3
    adjusted_pe: PE multiple after the leverage haircut
    safety_margin: Fraction of terminal value kept
    total_shares: Shares outstanding

  Returns:
    Tuple of (buy_price, future_value):
    - buy_price: future_value * safety_margin / total_shares, or 0 when
      there are no shares
    - future_value: year3_earnings * adjusted_pe
  """
  future_value = year3_earnings * adjusted_pe
  if total_shares <= 0:
    return 0.0, future_value
  return future_value * safety_margin / total_shares, future_value


def compute_sell_price(
    net_income: float,
    year3_earnings: float,
    total_shares: float,
    current_pe: float = 50.0,
    future_pe: float = 25.0,
    premium: float = 1.5,
) -> Tuple[float, float, float]:
  """
  Compute the conservative sell price.

  Two independent per-share ceilings are derived and the lower one is
  always chosen.

  Args:
    net_income: Current annual net income
    year3_earnings: Projected net income in year 3
    total_shares: Shares outstanding
    current_pe: Multiple on current earnings (option 1)
    future_pe: Multiple on year-3 earnings (option 2)
    premium: Premium on top of option 2

  Returns:
    Tuple of (sell_price, option1, option2); all 0 when there are no shares
  """
  if total_shares <= 0:
    return 0.0, 0.0, 0.0

  option1 = net_income * current_pe / total_shares
  option2 = year3_earnings * future_pe * premium / total_shares
  return min(option1, option2), option1, option2


def compute_upside(buy_price: float, current_price: float) -> float:
  """Percentage distance from current price to buy price (0 without price)."""
  if current_price <= 0:
    return 0.0
  return (buy_price - current_price) / current_price * 100.0
