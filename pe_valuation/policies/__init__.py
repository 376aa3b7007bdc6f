"""
Valuation policies for turning engine output into judgements.

Each policy computes one judgement (recommendation, risk level) and returns
both a value and diagnostic information.

To add a new policy:
1. Create a new class inheriting from the appropriate base
   (e.g., RecommendationPolicy)
2. Implement the compute() method returning PolicyOutput
3. Register in scenarios/registry.py

Example:
  class MyRecommendation(RecommendationPolicy):
    def compute(self, current_price, buy_price, sell_price):
      recommendation = ...  # your rule
      return PolicyOutput(value=recommendation, diag={'method': 'mine'})
"""

from pe_valuation.policies.recommendation import PriceBandRecommendation
from pe_valuation.policies.recommendation import RecommendationPolicy
from pe_valuation.policies.risk import RiskPolicy
from pe_valuation.policies.risk import VerificationRisk

__all__ = [
  'RecommendationPolicy', 'PriceBandRecommendation',
  'RiskPolicy', 'VerificationRisk',
]
