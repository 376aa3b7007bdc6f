"""
Valuation configuration.

ValuationConfig is a serializable (JSON-friendly) configuration class that
holds the fixed policy constants of the model and names the recommendation
and risk policies to use. Changing a constant here never requires touching
the calculation code.
"""

from dataclasses import asdict
from dataclasses import dataclass
import json
from typing import Any


@dataclass(frozen=True)
class ValuationConfig:
  """
  Policy constants and policy names for a valuation run.

  Attributes:
    name: Human-readable configuration name
    leverage_haircut: PE multiplier applied to highly levered companies
    sell_current_pe: Multiple applied to current earnings (sell option 1)
    sell_future_pe: Multiple applied to year-3 earnings (sell option 2)
    sell_premium: Premium applied on top of sell option 2
    profit_realism_ratio: Minimum operating cash flow / net income
    capex_tolerance: Maximum capex / depreciation
    recommendation: Recommendation policy name (see registry)
    risk: Risk policy name (see registry)
  """
  name: str = 'default'
  leverage_haircut: float = 0.7
  sell_current_pe: float = 50.0
  sell_future_pe: float = 25.0
  sell_premium: float = 1.5
  profit_realism_ratio: float = 0.8
  capex_tolerance: float = 1.2
  recommendation: str = 'price_band'
  risk: str = 'verification_checks'

  @classmethod
  def default(cls) -> 'ValuationConfig':
    """
    Create default configuration.

    Uses:
      - 30% PE haircut for highly levered balance sheets
      - Sell at min(50x current earnings, 25x * 1.5 year-3 earnings)
      - Cash flow must cover 80% of net income
      - Capex may exceed depreciation by up to 20%
      - Price band recommendation, verification-based risk level
    """
    return cls()

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'ValuationConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'ValuationConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
