"""Valuation configuration and policy registry."""

from pe_valuation.scenarios.config import ValuationConfig
from pe_valuation.scenarios.registry import create_policies
from pe_valuation.scenarios.registry import list_policies
from pe_valuation.scenarios.registry import POLICY_REGISTRY

__all__ = [
  'ValuationConfig',
  'POLICY_REGISTRY',
  'create_policies',
  'list_policies',
]
