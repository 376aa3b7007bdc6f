"""
Calculation audit trail.

AuditTrail numbers step records in the order they are recorded and hands
them out as an immutable tuple. The record_* functions build one step per
pipeline stage from values the engine already computed; they never compute
valuation numbers themselves, so the trail cannot disagree with the result.
"""

from typing import List, Mapping, Sequence, Tuple, Union

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import FutureEarnings
from pe_valuation.domain.types import Recommendation
from pe_valuation.domain.types import StepDetail
from pe_valuation.domain.types import StepInput
from pe_valuation.domain.types import StepRecord
from pe_valuation.domain.types import VerificationResult


def _num(value: float) -> str:
  return f'{value:,.2f}'


def _pct(value: float) -> str:
  return f'{value * 100:.1f}%'


def _check(passed: bool) -> str:
  return 'PASS' if passed else 'FAIL'


class AuditTrail:
  """Append-only, sequentially numbered list of step records."""

  def __init__(self):
    self._steps: List[StepRecord] = []

  def record(
      self,
      title: str,
      description: str,
      inputs: Mapping[str, StepInput],
      formula: Union[str, Sequence[str]],
      calculation: StepDetail,
      result: StepDetail,
  ) -> StepRecord:
    """Append a step and return it."""
    formulas = (formula,) if isinstance(formula, str) else tuple(formula)
    step = StepRecord(
        step=len(self._steps) + 1,
        title=title,
        description=description,
        inputs=inputs,
        formula=formulas,
        calculation=calculation,
        result=result,
    )
    self._steps.append(step)
    return step

  @property
  def steps(self) -> Tuple[StepRecord, ...]:
    return tuple(self._steps)

  def __len__(self) -> int:
    return len(self._steps)


def record_validation(trail: AuditTrail, facts: FinancialFacts) -> StepRecord:
  has_income = facts.net_income > 0
  has_shares = facts.total_shares > 0
  return trail.record(
      title='Input validation',
      description='Check that the key financial data is usable',
      inputs={
          'Net income': facts.net_income,
          'Total shares': facts.total_shares,
          'Operating cash flow': facts.operating_cash_flow,
          'Total assets': facts.total_assets,
          'Interest-bearing debt': facts.interest_bearing_debt,
          'Current price': facts.current_price,
      },
      formula='Data is valid when net income > 0 and total shares > 0',
      calculation={
          'Net income > 0':
              f'{_num(facts.net_income)} > 0: {"yes" if has_income else "no"}',
          'Total shares > 0':
              f'{_num(facts.total_shares)} > 0: '
              f'{"yes" if has_shares else "no"}',
      },
      result='Data valid' if has_income and has_shares else 'Missing key data',
  )


def record_quality(
    trail: AuditTrail,
    facts: FinancialFacts,
    verification: VerificationResult,
    is_high_leverage: bool,
    profit_realism_ratio: float,
    capex_tolerance: float,
) -> StepRecord:
  # The check itself multiplies; only the displayed ratio divides.
  if facts.net_income != 0:
    cash_ratio: StepInput = facts.operating_cash_flow / facts.net_income
    cash_ratio_text = f'{cash_ratio:.2f}'
  else:
    cash_ratio = 'n/a'
    cash_ratio_text = 'n/a (net income is 0)'

  if facts.total_assets > 0:
    leverage_text = (f'{_num(facts.interest_bearing_debt)} / '
                     f'{_num(facts.total_assets)} = '
                     f'{_pct(verification.leverage_ratio)}')
  else:
    leverage_text = ('Total assets is not positive, leverage ratio defaults '
                     'to 0.0%')

  return trail.record(
      title='Quality verification',
      description='Verify profit quality and balance sheet health',
      inputs={
          'Operating cash flow': facts.operating_cash_flow,
          'Net income': facts.net_income,
          'Cash flow / net income': cash_ratio,
          'Capital expenditure': facts.capex,
          'Depreciation': facts.depreciation,
          'Leverage ratio': verification.leverage_ratio,
      },
      formula=[
          f'Profit is real = operating cash flow >= net income x '
          f'{profit_realism_ratio}',
          'Profit sustainable = net income > 0',
          f'Low capital consumption = capex <= depreciation x '
          f'{capex_tolerance}',
          'Leverage ratio = interest-bearing debt / total assets',
      ],
      calculation={
          'Profit is real':
              f'{_num(facts.operating_cash_flow)} >= '
              f'{_num(facts.net_income * profit_realism_ratio)} '
              f'(cash flow / net income = {cash_ratio_text})',
          'Profit sustainable': f'{_num(facts.net_income)} > 0',
          'Low capital consumption':
              f'{_num(facts.capex)} <= '
              f'{_num(facts.depreciation * capex_tolerance)}',
          'Leverage ratio': leverage_text,
      },
      result={
          'Profit is real': _check(verification.profit_is_real),
          'Profit sustainable': _check(verification.profit_sustainable),
          'Low capital consumption':
              _check(verification.low_capital_consumption),
          'Leverage': 'HIGH' if is_high_leverage else 'NORMAL',
      },
  )


def record_projection(
    trail: AuditTrail,
    net_income: float,
    growth_rate: float,
    earnings: FutureEarnings,
) -> StepRecord:
  base = f'{_num(net_income)} x (1 + {growth_rate})'
  return trail.record(
      title='Earnings projection',
      description='Project net income three years ahead at the growth rate',
      inputs={
          'Current net income': net_income,
          'Annual growth rate': _pct(growth_rate),
      },
      formula='Future earnings = current net income x (1 + growth rate)^year',
      calculation={
          'Year 1': f'{base} = {_num(earnings.year1)}',
          'Year 2': f'{base}^2 = {_num(earnings.year2)}',
          'Year 3': f'{base}^3 = {_num(earnings.year3)}',
      },
      result={
          'Year 1': _num(earnings.year1),
          'Year 2': _num(earnings.year2),
          'Year 3': _num(earnings.year3),
      },
  )


def record_pe_adjustment(
    trail: AuditTrail,
    reasonable_pe: float,
    leverage_ratio: float,
    is_high_leverage: bool,
    adjusted_pe: float,
    haircut: float,
) -> StepRecord:
  if is_high_leverage:
    formula = f'Adjusted PE = baseline PE x {haircut} (high leverage discount)'
    calculation = f'{reasonable_pe} x {haircut} = {adjusted_pe:.1f}'
  else:
    formula = 'Adjusted PE = baseline PE (no adjustment)'
    calculation = f'{reasonable_pe} (no adjustment)'

  return trail.record(
      title='PE adjustment',
      description='Adjust the reasonable PE multiple for leverage',
      inputs={
          'Baseline PE': reasonable_pe,
          'Leverage ratio': _pct(leverage_ratio),
          'High leverage': 'yes' if is_high_leverage else 'no',
      },
      formula=formula,
      calculation=calculation,
      result=f'Adjusted PE: {adjusted_pe:.1f}x',
  )


def record_intrinsic_value(
    trail: AuditTrail,
    year3_earnings: float,
    adjusted_pe: float,
    safety_margin: float,
    total_shares: float,
    future_value: float,
    buy_price: float,
) -> StepRecord:
  safe_value = future_value * safety_margin
  if total_shares > 0:
    per_share = (f'{_num(safe_value)} / {_num(total_shares)} = '
                 f'{buy_price:.2f}')
  else:
    per_share = 'Total shares is not positive, buy price defaults to 0.00'

  return trail.record(
      title='Intrinsic value',
      description='Value the company on year-3 earnings and apply the '
      'margin of safety',
      inputs={
          'Year 3 net income': year3_earnings,
          'Adjusted PE': adjusted_pe,
          'Safety margin': f'{safety_margin * 100:.0f}%',
          'Total shares': total_shares,
      },
      formula=[
          'Year-3 market value = year-3 net income x adjusted PE',
          'Safe value = year-3 market value x safety margin',
          'Intrinsic value per share = safe value / total shares',
      ],
      calculation={
          'Year-3 market value':
              f'{_num(year3_earnings)} x {adjusted_pe:.1f} = '
              f'{_num(future_value)}',
          'Safe value':
              f'{_num(future_value)} x {safety_margin} = {_num(safe_value)}',
          'Intrinsic value per share': per_share,
      },
      result=f'Buy price: {buy_price:.2f}',
  )


def record_sell_price(
    trail: AuditTrail,
    net_income: float,
    year3_earnings: float,
    total_shares: float,
    option1: float,
    option2: float,
    sell_price: float,
    current_pe: float,
    future_pe: float,
    premium: float,
) -> StepRecord:
  if total_shares > 0:
    calculation = {
        'Option 1':
            f'{_num(net_income)} x {current_pe:g} / {_num(total_shares)} = '
            f'{option1:.2f}',
        'Option 2':
            f'{_num(year3_earnings)} x {future_pe:g} x {premium:g} / '
            f'{_num(total_shares)} = {option2:.2f}',
        'Selected': f'min({option1:.2f}, {option2:.2f}) = {sell_price:.2f}',
    }
  else:
    calculation = {
        'Option 1': 'Total shares is not positive, defaults to 0.00',
        'Option 2': 'Total shares is not positive, defaults to 0.00',
        'Selected': f'min(0.00, 0.00) = {sell_price:.2f}',
    }

  return trail.record(
      title='Sell price',
      description='Derive a conservative sell target',
      inputs={
          'Current net income': net_income,
          'Year 3 net income': year3_earnings,
          'Total shares': total_shares,
      },
      formula=[
          f'Option 1 = current net income x {current_pe:g} PE / total shares',
          f'Option 2 = year-3 net income x {future_pe:g} PE x {premium:g} / '
          'total shares',
          'Sell price = min(option 1, option 2)',
      ],
      calculation=calculation,
      result=f'Sell price: {sell_price:.2f}',
  )


def record_recommendation(
    trail: AuditTrail,
    current_price: float,
    buy_price: float,
    sell_price: float,
    recommendation: Recommendation,
    rules: Sequence[str],
) -> StepRecord:
  if current_price > 0:
    upside_text = (f'({buy_price:.2f} - {current_price:.2f}) / '
                   f'{current_price:.2f} x 100 = {recommendation.upside:.1f}%')
  else:
    upside_text = 'Current price is not positive, upside defaults to 0.0%'

  return trail.record(
      title='Recommendation',
      description='Compare the current price against the buy/sell band',
      inputs={
          'Current price': current_price,
          'Buy price': buy_price,
          'Sell price': sell_price,
      },
      formula=list(rules) +
      ['Upside = (buy price - current price) / current price x 100'],
      calculation={
          'Band': recommendation.reason,
          'Upside': upside_text,
      },
      result={
          'Recommendation': recommendation.signal.value,
          'Upside': f'{recommendation.upside:.1f}%',
      },
  )
