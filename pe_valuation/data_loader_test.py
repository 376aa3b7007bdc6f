import json
from pathlib import Path

import pytest

from pe_valuation.data_loader import check_required_fields
from pe_valuation.data_loader import load_valuation_request
from pe_valuation.data_loader import normalize_financial_data
from pe_valuation.data_loader import normalize_parameters
from pe_valuation.data_loader import to_number
from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import ValuationParameters


class TestToNumber:
  """Tests for to_number coercion."""

  @pytest.mark.parametrize('value,expected', [
      (12, 12.0),
      (3.5, 3.5),
      ('42', 42.0),
      (' 1,250.5 ', 1250.5),
      (-7, -7.0),
  ])
  def test_numeric_values(self, value, expected):
    assert to_number(value) == expected

  @pytest.mark.parametrize('value', [
      None, '', '   ', 'abc', float('nan'), float('inf'), True, [1], {}
  ])
  def test_unusable_values(self, value):
    assert to_number(value) is None


class TestNormalizeFinancialData:
  """Tests for normalize_financial_data function."""

  def test_flat_payload(self):
    payload = {
        'symbol': 'AAPL',
        'companyName': 'Apple',
        'currency': 'USD',
        'netIncome': 100,
        'totalShares': 10,
        'operatingCashFlow': 90,
        'totalAssets': 50,
        'interestBearingDebt': 30,
        'capex': 10,
        'depreciation': 10,
        'currentPrice': 100,
    }

    facts = normalize_financial_data(payload)

    assert facts == FinancialFacts(
        net_income=100.0,
        total_shares=10.0,
        operating_cash_flow=90.0,
        total_assets=50.0,
        interest_bearing_debt=30.0,
        capex=10.0,
        depreciation=10.0,
        current_price=100.0,
        currency='USD',
        symbol='AAPL',
        company_name='Apple',
    )

  def test_empty_payload_defaults_to_zero(self):
    facts = normalize_financial_data({})

    assert facts == FinancialFacts()
    assert facts.currency == 'USD'

  def test_shares_outstanding_alias(self):
    facts = normalize_financial_data({'sharesOutstanding': 1500})

    assert facts.total_shares == 1500.0

  def test_zero_falls_through_to_alias(self):
    """A zero totalShares falls back to sharesOutstanding."""
    facts = normalize_financial_data({
        'totalShares': 0,
        'sharesOutstanding': 1500
    })

    assert facts.total_shares == 1500.0

  def test_nested_payload(self):
    """Nested fetch-layer sections; capex sign is dropped."""
    payload = {
        'currentPrice': 180.5,
        'currency': 'HKD',
        'financials': {
            'netIncome': 2.0e9
        },
        'balanceSheet': {
            'totalAssets': 1.0e10,
            'shortLongTermDebt': 3.0e9
        },
        'cashFlow': {
            'totalCashFromOperatingActivities': 2.4e9,
            'capitalExpenditures': -5.0e8,
        },
        'shares': {
            'sharesOutstanding': 1.0e8
        },
    }

    facts = normalize_financial_data(payload)

    assert facts.net_income == 2.0e9
    assert facts.total_assets == 1.0e10
    assert facts.interest_bearing_debt == 3.0e9
    assert facts.operating_cash_flow == 2.4e9
    assert facts.capex == 5.0e8
    assert facts.total_shares == 1.0e8
    assert facts.current_price == 180.5
    assert facts.currency == 'HKD'

  def test_flat_wins_over_nested(self):
    payload = {'netIncome': 10, 'financials': {'netIncome': 99}}

    assert normalize_financial_data(payload).net_income == 10.0

  def test_garbage_values_default_to_zero(self):
    payload = {
        'netIncome': None,
        'totalShares': 'n/a',
        'totalAssets': float('nan'),
        'financials': 'not a mapping',
    }

    facts = normalize_financial_data(payload)

    assert facts.net_income == 0.0
    assert facts.total_shares == 0.0
    assert facts.total_assets == 0.0

  def test_negative_depreciation_made_positive(self):
    facts = normalize_financial_data({'depreciation': -40})

    assert facts.depreciation == 40.0


class TestNormalizeParameters:
  """Tests for normalize_parameters function."""

  def test_defaults(self):
    assert normalize_parameters(None) == ValuationParameters(
        growth_rate=0.1,
        reasonable_pe=20.0,
        safety_margin=0.5,
        high_leverage_threshold=0.7,
    )

  def test_explicit_values(self):
    params = normalize_parameters({
        'growthRate': 0.08,
        'reasonablePE': 15,
        'safetyMargin': 0.6,
        'highLeverageThreshold': 0.5,
    })

    assert params == ValuationParameters(0.08, 15.0, 0.6, 0.5)

  def test_explicit_zero_kept(self):
    """Only absent values take the default; 0 is a real choice."""
    params = normalize_parameters({'growthRate': 0})

    assert params.growth_rate == 0.0
    assert params.reasonable_pe == 20.0

  def test_unusable_value_takes_default(self):
    params = normalize_parameters({'reasonablePE': 'twenty'})

    assert params.reasonable_pe == 20.0


class TestCheckRequiredFields:
  """Tests for check_required_fields function."""

  def test_complete_payload(self):
    check_required_fields({
        'netIncome': 1,
        'totalShares': 1,
        'operatingCashFlow': 1,
        'totalAssets': 1,
        'currentPrice': 1,
    })

  def test_missing_fields_listed(self):
    with pytest.raises(ValueError,
                       match='Missing required data: totalShares, '
                       'currentPrice'):
      check_required_fields({
          'netIncome': 1,
          'totalShares': '  ',
          'operatingCashFlow': 1,
          'totalAssets': 1,
      })

  def test_zero_is_present(self):
    """A zero is a value, not a missing field."""
    check_required_fields({
        'netIncome': 0,
        'totalShares': 0,
        'operatingCashFlow': 0,
        'totalAssets': 0,
        'currentPrice': 0,
    })


class TestLoadValuationRequest:
  """Tests for load_valuation_request function."""

  def test_load(self, tmp_path: Path):
    path = tmp_path / 'request.json'
    path.write_text(json.dumps({
        'financialData': {
            'netIncome': 100,
            'totalShares': 10
        },
        'parameters': {
            'reasonablePE': 15
        },
    }))

    facts, params = load_valuation_request(path)

    assert facts.net_income == 100.0
    assert facts.total_shares == 10.0
    assert params.reasonable_pe == 15.0
    assert params.growth_rate == 0.1

  def test_missing_file(self, tmp_path: Path):
    with pytest.raises(FileNotFoundError, match='Valuation request not found'):
      load_valuation_request(tmp_path / 'nope.json')

  def test_missing_financial_data(self, tmp_path: Path):
    path = tmp_path / 'request.json'
    path.write_text(json.dumps({'parameters': {}}))

    with pytest.raises(ValueError, match='no financialData'):
      load_valuation_request(path)

  def test_not_an_object(self, tmp_path: Path):
    path = tmp_path / 'request.json'
    path.write_text('[1, 2, 3]')

    with pytest.raises(ValueError, match='not a JSON object'):
      load_valuation_request(path)

  def test_require_manual_fields(self, tmp_path: Path):
    path = tmp_path / 'request.json'
    path.write_text(json.dumps({'financialData': {'netIncome': 100}}))

    with pytest.raises(ValueError, match='Missing required data'):
      load_valuation_request(path, require_manual_fields=True)
