"""
Policy registry for mapping string names to policy factories.

This enables configurations to name their policies with strings (JSON
friendly) while still instantiating the correct policy classes. Factories
receive the ValuationConfig so policies can share its constants.

To add a new policy:
1. Implement the policy class in the appropriate module
   (e.g., policies/recommendation.py)
2. Register a factory in the matching registry dictionary

Example:
  RECOMMENDATION_POLICIES['my_band'] = lambda config: MyBand(width=0.1)
"""

from collections.abc import Callable
from typing import Any, cast

from pe_valuation.policies.recommendation import PriceBandRecommendation
from pe_valuation.policies.recommendation import RecommendationPolicy
from pe_valuation.policies.risk import RiskPolicy
from pe_valuation.policies.risk import VerificationRisk
from pe_valuation.scenarios.config import ValuationConfig

RECOMMENDATION_POLICIES: dict[str, Callable[[ValuationConfig],
                                            RecommendationPolicy]] = {
    'price_band': lambda config: PriceBandRecommendation(),
}

RISK_POLICIES: dict[str, Callable[[ValuationConfig], RiskPolicy]] = {
    'verification_checks':
        lambda config: VerificationRisk(
            profit_realism_ratio=config.profit_realism_ratio,
            capex_tolerance=config.capex_tolerance),
}

POLICY_REGISTRY = {
    'recommendation': RECOMMENDATION_POLICIES,
    'risk': RISK_POLICIES,
}


def create_policies(config: ValuationConfig) -> dict[str, Any]:
  """
  Create policy instances from a valuation configuration.

  Args:
    config: ValuationConfig with policy names

  Returns:
    Dictionary with instantiated policy objects:
    - recommendation: RecommendationPolicy
    - risk: RiskPolicy

  Raises:
    KeyError: If a policy name is not found in the registry
  """
  try:
    recommendation_factory = RECOMMENDATION_POLICIES[config.recommendation]
  except KeyError as e:
    raise KeyError(
        f"Unknown recommendation policy: '{config.recommendation}'. "
        f'Available: {list(RECOMMENDATION_POLICIES.keys())}') from e

  try:
    risk_factory = RISK_POLICIES[config.risk]
  except KeyError as e:
    raise KeyError(f"Unknown risk policy: '{config.risk}'. "
                   f'Available: {list(RISK_POLICIES.keys())}') from e

  return {
      'recommendation': recommendation_factory(config),
      'risk': risk_factory(config),
  }


def list_policies() -> dict[str, list[str]]:
  """
  List all available policies by category.

  Returns:
    Dictionary mapping category names to list of policy names
  """
  result: dict[str, list[str]] = {}
  for category, policies_dict in POLICY_REGISTRY.items():
    policy_dict = cast(dict[str, object], policies_dict)
    result[category] = list(policy_dict.keys())
  return result
