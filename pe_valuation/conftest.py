import pytest

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import ValuationParameters


def _make_facts(
    net_income: float = 100.0,
    total_shares: float = 10.0,
    operating_cash_flow: float = 90.0,
    total_assets: float = 50.0,
    interest_bearing_debt: float = 30.0,
    capex: float = 10.0,
    depreciation: float = 10.0,
    current_price: float = 100.0,
) -> FinancialFacts:
  """Helper to create FinancialFacts with the reference scenario defaults."""
  return FinancialFacts(
      net_income=net_income,
      total_shares=total_shares,
      operating_cash_flow=operating_cash_flow,
      total_assets=total_assets,
      interest_bearing_debt=interest_bearing_debt,
      capex=capex,
      depreciation=depreciation,
      current_price=current_price,
      symbol='TEST',
  )


@pytest.fixture
def reference_facts() -> FinancialFacts:
  """Healthy company, leverage 30/50 = 0.6 (below the 0.7 threshold)."""
  return _make_facts()


@pytest.fixture
def levered_facts() -> FinancialFacts:
  """Same company with debt 40, leverage 40/50 = 0.8 (high leverage)."""
  return _make_facts(interest_bearing_debt=40.0)


@pytest.fixture
def zero_share_facts() -> FinancialFacts:
  """Company with no share count."""
  return _make_facts(total_shares=0.0)


@pytest.fixture
def loss_facts() -> FinancialFacts:
  """Loss-making company burning cash and capital."""
  return _make_facts(net_income=-50.0,
                     operating_cash_flow=-80.0,
                     capex=30.0,
                     depreciation=10.0,
                     current_price=5.0)


@pytest.fixture
def reference_parameters() -> ValuationParameters:
  """growth 10%, PE 20, safety margin 50%, leverage threshold 70%."""
  return ValuationParameters(growth_rate=0.10,
                             reasonable_pe=20.0,
                             safety_margin=0.5,
                             high_leverage_threshold=0.7)
