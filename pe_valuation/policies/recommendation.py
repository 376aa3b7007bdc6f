"""
Recommendation policies.

These policies map the current market price against the buy/sell band
produced by the engine to a BUY, HOLD or SELL signal.
"""

from abc import ABC
from abc import abstractmethod
from typing import Tuple

from pe_valuation.domain.types import PolicyOutput
from pe_valuation.domain.types import Recommendation
from pe_valuation.domain.types import Signal
from pe_valuation.engine.valuation import compute_upside

SIGNAL_COLORS = {
    Signal.BUY: 'green',
    Signal.HOLD: 'yellow',
    Signal.SELL: 'red',
}


class RecommendationPolicy(ABC):
  """
  Base class for recommendation policies.

  Subclasses implement compute() to return a Recommendation.
  """

  @abstractmethod
  def compute(
      self,
      current_price: float,
      buy_price: float,
      sell_price: float,
  ) -> PolicyOutput[Recommendation]:
    """
    Compute recommendation.

    Args:
      current_price: Current market price per share
      buy_price: Buy price per share
      sell_price: Sell price per share

    Returns:
      PolicyOutput with recommendation and diagnostics
    """

  @abstractmethod
  def describe(self) -> Tuple[str, ...]:
    """Return the decision rules, one line each, for the audit trail."""


class PriceBandRecommendation(RecommendationPolicy):
  """
  Price band recommendation.

  Checks run in order:
  1. No price, or a zero band: HOLD (nothing to compare against)
  2. Price at or below the buy price: BUY
  3. Price at or above the sell price: SELL
  4. Otherwise: HOLD

  The buy check runs first, so a band whose buy price exceeds its sell
  price resolves to BUY for prices under the buy price.
  """

  RULES = (
      'BUY if current price <= buy price',
      'SELL if current price >= sell price',
      'HOLD otherwise, or when price or band is missing',
  )

  def describe(self) -> Tuple[str, ...]:
    return self.RULES

  def compute(
      self,
      current_price: float,
      buy_price: float,
      sell_price: float,
  ) -> PolicyOutput[Recommendation]:
    upside = compute_upside(buy_price, current_price)

    if current_price <= 0 or (buy_price == 0 and sell_price == 0):
      signal = Signal.HOLD
      reason = ('Insufficient data to compare the current price against '
                'the valuation band')
      band = 'undefined'
    elif current_price <= buy_price:
      signal = Signal.BUY
      reason = (f'Current price {current_price:,.2f} is at or below the '
                f'buy price {buy_price:,.2f}')
      band = 'below_buy'
    elif current_price >= sell_price:
      signal = Signal.SELL
      reason = (f'Current price {current_price:,.2f} is at or above the '
                f'sell price {sell_price:,.2f}')
      band = 'above_sell'
    else:
      signal = Signal.HOLD
      reason = (f'Current price {current_price:,.2f} is between the buy '
                f'price {buy_price:,.2f} and the sell price '
                f'{sell_price:,.2f}')
      band = 'inside_band'

    return PolicyOutput(
        value=Recommendation(
            signal=signal,
            reason=reason,
            color=SIGNAL_COLORS[signal],
            upside=upside,
        ),
        diag={
            'recommendation_method': 'price_band',
            'band': band,
            'upside': upside,
        },
    )
