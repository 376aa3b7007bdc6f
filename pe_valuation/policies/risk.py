"""
Risk assessment policies.

These policies turn failed quality checks into human-readable risk factors
and an overall risk level.
"""

from abc import ABC
from abc import abstractmethod
from typing import List

from pe_valuation.domain.types import PolicyOutput
from pe_valuation.domain.types import RiskAssessment
from pe_valuation.domain.types import VerificationResult


class RiskPolicy(ABC):
  """
  Base class for risk policies.

  Subclasses implement compute() to return a RiskAssessment.
  """

  @abstractmethod
  def compute(
      self,
      verification: VerificationResult,
      is_high_leverage: bool,
      high_leverage_threshold: float,
  ) -> PolicyOutput[RiskAssessment]:
    """
    Compute risk assessment.

    Args:
      verification: Quality checks from the engine
      is_high_leverage: Leverage ratio reached the threshold
      high_leverage_threshold: Threshold used for the leverage check

    Returns:
      PolicyOutput with risk assessment and diagnostics
    """


class VerificationRisk(RiskPolicy):
  """
  One risk factor per failed quality check.

  Level is LOW with no factors, MEDIUM with one and HIGH with two or more.
  """

  def __init__(
      self,
      profit_realism_ratio: float = 0.8,
      capex_tolerance: float = 1.2,
  ):
    """
    Initialize verification risk policy.

    Args:
      profit_realism_ratio: Ratio used by the profit realism check
      capex_tolerance: Tolerance used by the capital consumption check
    """
    self.profit_realism_ratio = profit_realism_ratio
    self.capex_tolerance = capex_tolerance

  def compute(
      self,
      verification: VerificationResult,
      is_high_leverage: bool,
      high_leverage_threshold: float,
  ) -> PolicyOutput[RiskAssessment]:
    factors: List[str] = []

    if not verification.profit_is_real:
      factors.append('Operating cash flow is below '
                     f'{self.profit_realism_ratio:.0%} of net income; '
                     'reported profit may not be backed by cash')
    if not verification.profit_sustainable:
      factors.append('Net income is not positive; the company is not '
                     'currently profitable')
    if not verification.low_capital_consumption:
      factors.append('Capital expenditure exceeds '
                     f'{self.capex_tolerance:.0%} of depreciation; '
                     'the business consumes capital to grow')
    if is_high_leverage:
      factors.append(f'Leverage ratio {verification.leverage_ratio:.1%} '
                     f'is at or above the {high_leverage_threshold:.0%} '
                     'threshold; the PE multiple was discounted')

    if not factors:
      level = 'LOW'
    elif len(factors) == 1:
      level = 'MEDIUM'
    else:
      level = 'HIGH'

    return PolicyOutput(
        value=RiskAssessment(factors=tuple(factors), level=level),
        diag={
            'risk_method': 'verification_checks',
            'risk_factor_count': len(factors),
            'risk_level': level,
        },
    )
