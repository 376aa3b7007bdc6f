import dataclasses
import json

import pytest

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import StepRecord
from pe_valuation.domain.types import ValuationParameters
from pe_valuation.domain.types import VerificationResult


class TestFinancialFacts:
  """Tests for FinancialFacts dataclass."""

  def test_defaults(self):
    facts = FinancialFacts()

    assert facts.net_income == 0.0
    assert facts.total_shares == 0.0
    assert facts.current_price == 0.0
    assert facts.currency == 'USD'
    assert facts.symbol is None

  def test_frozen(self):
    facts = FinancialFacts(net_income=1.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
      facts.net_income = 2.0  # type: ignore[misc]


class TestValuationParameters:
  """Tests for ValuationParameters dataclass."""

  def test_to_dict_camel_case(self):
    params = ValuationParameters()

    assert params.to_dict() == {
        'growthRate': 0.1,
        'reasonablePE': 20.0,
        'safetyMargin': 0.5,
        'highLeverageThreshold': 0.7,
    }


class TestVerificationResult:
  """Tests for VerificationResult dataclass."""

  def test_to_dict(self):
    verification = VerificationResult(True, False, True, 0.25)

    assert verification.to_dict() == {
        'profitIsReal': True,
        'profitSustainable': False,
        'lowCapitalConsumption': True,
        'leverageRatio': 0.25,
    }


class TestStepRecord:
  """Tests for StepRecord dataclass."""

  def test_single_formula_serializes_as_string(self):
    step = StepRecord(step=1,
                      title='PE adjustment',
                      description='d',
                      inputs={'Baseline PE': 20.0},
                      formula=('Adjusted PE = baseline PE',),
                      calculation='20.0 (no adjustment)',
                      result='Adjusted PE: 20.0x')

    data = step.to_dict()

    assert data['formula'] == 'Adjusted PE = baseline PE'
    assert data['calculation'] == '20.0 (no adjustment)'
    assert data['inputs'] == {'Baseline PE': 20.0}

  def test_table_fields_serialize_as_dicts(self):
    step = StepRecord(step=2,
                      title='t',
                      description='d',
                      inputs={},
                      formula=('a', 'b'),
                      calculation={'Option 1': '1'},
                      result={'Year 1': '110.00'})

    data = step.to_dict()

    assert data['formula'] == ['a', 'b']
    assert data['calculation'] == {'Option 1': '1'}
    assert data['result'] == {'Year 1': '110.00'}
    json.dumps(data)

  def test_inputs_copied(self):
    """Mutating the source dict does not change the record."""
    inputs = {'x': 1.0}
    step = StepRecord(1, 't', 'd', inputs, ('f',), 'c', 'r')
    inputs['x'] = 2.0

    assert step.inputs['x'] == 1.0
