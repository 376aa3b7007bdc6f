'''
Domain types for the PE valuation engine.

These frozen dataclasses are the typed interfaces between the normalizer,
the pure engine functions, the policies and the audit trail. None of them
hold mutable state, so a single call never affects another.
'''

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar, Union

T = TypeVar('T')

# A step input is either a raw number or an already formatted label.
StepInput = Union[float, str]
# Calculation and result fields are either one line or a small table of lines.
StepDetail = Union[str, Mapping[str, str]]


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Every policy returns both a computed value and diagnostic information
  explaining how the value was computed.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FinancialFacts:
  '''
  Normalized financial facts for a single company.

  Every numeric field defaults to 0.0 so that a partially populated payload
  still produces a (degraded) valuation instead of an error.

  Attributes:
    net_income: Trailing annual net income (may be <= 0)
    total_shares: Shares outstanding, the per-share divisor
    operating_cash_flow: Trailing annual operating cash flow
    total_assets: Total assets from the latest balance sheet
    interest_bearing_debt: Short plus long term interest-bearing debt
    capex: Capital expenditure (non-negative)
    depreciation: Depreciation and amortization (non-negative)
    current_price: Current market price per share
    currency: Currency code echoed into the result
    symbol: Ticker symbol, if known
    company_name: Display name, if known
  '''
  net_income: float = 0.0
  total_shares: float = 0.0
  operating_cash_flow: float = 0.0
  total_assets: float = 0.0
  interest_bearing_debt: float = 0.0
  capex: float = 0.0
  depreciation: float = 0.0
  current_price: float = 0.0
  currency: str = 'USD'
  symbol: Optional[str] = None
  company_name: Optional[str] = None


@dataclass(frozen=True)
class ValuationParameters:
  '''
  Analyst-chosen valuation parameters.

  Attributes:
    growth_rate: Annual earnings growth as a fraction (0.10 = 10%)
    reasonable_pe: Baseline price-to-earnings multiple
    safety_margin: Fraction of terminal value kept for the buy price
    high_leverage_threshold: Leverage ratio at which the PE is discounted
  '''
  growth_rate: float = 0.10
  reasonable_pe: float = 20.0
  safety_margin: float = 0.5
  high_leverage_threshold: float = 0.7

  def to_dict(self) -> Dict[str, float]:
    return {
        'growthRate': self.growth_rate,
        'reasonablePE': self.reasonable_pe,
        'safetyMargin': self.safety_margin,
        'highLeverageThreshold': self.high_leverage_threshold,
    }


@dataclass(frozen=True)
class VerificationResult:
  '''
  Quality checks derived from the financial facts.

  Attributes:
    profit_is_real: Operating cash flow covers at least 80% of net income
    profit_sustainable: Net income is positive
    low_capital_consumption: Capex stays within 120% of depreciation
    leverage_ratio: Interest-bearing debt / total assets (0 without assets)
  '''
  profit_is_real: bool
  profit_sustainable: bool
  low_capital_consumption: bool
  leverage_ratio: float

  def to_dict(self) -> Dict[str, Any]:
    return {
        'profitIsReal': self.profit_is_real,
        'profitSustainable': self.profit_sustainable,
        'lowCapitalConsumption': self.low_capital_consumption,
        'leverageRatio': self.leverage_ratio,
    }


@dataclass(frozen=True)
class FutureEarnings:
  '''Net income compounded forward one, two and three years.'''
  year1: float
  year2: float
  year3: float

  def to_dict(self) -> Dict[str, float]:
    return {'year1': self.year1, 'year2': self.year2, 'year3': self.year3}


@dataclass(frozen=True)
class StepRecord:
  '''
  One entry of the calculation audit trail.

  A record is a self-contained snapshot meant for direct display: inputs
  keep their raw numbers (or a formatted label), while calculation and
  result are either a single line or a small table of labelled lines.

  Attributes:
    step: 1-based position in the trail
    title: Short stage name
    description: One-sentence explanation of the stage
    inputs: Values the stage consumed
    formula: One or more formulas, in presentation order
    calculation: Formulas with the actual numbers substituted
    result: Outcome of the stage
  '''
  step: int
  title: str
  description: str
  inputs: Mapping[str, StepInput]
  formula: Tuple[str, ...]
  calculation: StepDetail
  result: StepDetail

  def __post_init__(self):
    object.__setattr__(self, 'inputs', MappingProxyType(dict(self.inputs)))
    object.__setattr__(self, 'formula', tuple(self.formula))
    if not isinstance(self.calculation, str):
      object.__setattr__(self, 'calculation',
                         MappingProxyType(dict(self.calculation)))
    if not isinstance(self.result, str):
      object.__setattr__(self, 'result', MappingProxyType(dict(self.result)))

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to a JSON-serializable dictionary.'''
    formula: Union[str, list] = (self.formula[0] if len(self.formula) == 1
                                 else list(self.formula))
    return {
        'step': self.step,
        'title': self.title,
        'description': self.description,
        'inputs': dict(self.inputs),
        'formula': formula,
        'calculation': _detail_to_json(self.calculation),
        'result': _detail_to_json(self.result),
    }


def _detail_to_json(detail: StepDetail) -> Union[str, Dict[str, str]]:
  if isinstance(detail, str):
    return detail
  return dict(detail)


class Signal(str, Enum):
  '''Recommendation signal.'''
  BUY = 'BUY'
  HOLD = 'HOLD'
  SELL = 'SELL'


@dataclass(frozen=True)
class Recommendation:
  '''
  Recommendation derived from the current price and the buy/sell band.

  Attributes:
    signal: BUY, HOLD or SELL
    reason: Human-readable explanation
    color: Presentation tag ('green', 'yellow' or 'red')
    upside: Distance from current price to buy price, in percent
  '''
  signal: Signal
  reason: str
  color: str
  upside: float


@dataclass(frozen=True)
class RiskAssessment:
  '''
  Risk factors raised by failed quality checks.

  Attributes:
    factors: One message per failed check, in check order
    level: 'LOW', 'MEDIUM' or 'HIGH'
  '''
  factors: Tuple[str, ...]
  level: str


@dataclass(frozen=True)
class ValuationOutcome:
  '''
  Complete valuation result with its audit trail.

  Attributes:
    verification: Quality checks
    is_high_leverage: Leverage ratio reached the threshold
    future_earnings: Projected earnings for years 1-3
    adjusted_pe: PE multiple after the leverage haircut
    future_value: Year-3 earnings times the adjusted PE
    buy_price: Margin-of-safety discounted value per share
    sell_price: Lower of the two sell estimates
    sell_option1: Current-earnings sell estimate per share
    sell_option2: Projected-earnings sell estimate per share
    recommendation: Signal with reason, color and upside
    risk: Risk factors and level
    calculation_steps: Ordered audit trail
    parameters: Parameters the valuation used
    current_price: Market price compared against the band
    currency: Currency code echoed from the input
    calculation_time: ISO timestamp stamped by the caller, if any
  '''
  verification: VerificationResult
  is_high_leverage: bool
  future_earnings: FutureEarnings
  adjusted_pe: float
  future_value: float
  buy_price: float
  sell_price: float
  sell_option1: float
  sell_option2: float
  recommendation: Recommendation
  risk: RiskAssessment
  calculation_steps: Tuple[StepRecord, ...]
  parameters: ValuationParameters
  current_price: float
  currency: str = 'USD'
  calculation_time: Optional[str] = None

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to the JSON-serializable camelCase result shape.'''
    return {
        'verification': self.verification.to_dict(),
        'isHighLeverage': self.is_high_leverage,
        'futureEarnings': self.future_earnings.to_dict(),
        'adjustedPE': self.adjusted_pe,
        'futureValue': self.future_value,
        'buyPrice': self.buy_price,
        'sellPrice': self.sell_price,
        'sellOptions': {
            'option1': self.sell_option1,
            'option2': self.sell_option2,
        },
        'recommendation': self.recommendation.signal.value,
        'recommendationReason': self.recommendation.reason,
        'recommendationColor': self.recommendation.color,
        'upside': self.recommendation.upside,
        'riskFactors': list(self.risk.factors),
        'riskLevel': self.risk.level,
        'calculationSteps': [s.to_dict() for s in self.calculation_steps],
        'parameters': self.parameters.to_dict(),
        'currentPrice': self.current_price,
        'currency': self.currency,
        'calculationTime': self.calculation_time,
    }
