"""
Input normalizer for valuation requests.

Turns a loosely typed request payload into FinancialFacts and
ValuationParameters. Missing, None, non-finite or unparsable numbers become
0 for facts and the documented default for parameters, so the engine never
sees anything but finite floats.

Accepted payload shapes:
  # Flat (manual entry)
  {'netIncome': 100, 'totalShares': 10, 'currentPrice': 12.5, ...}

  # Nested (market-data fetch layer)
  {'currentPrice': 12.5,
   'financials': {'netIncome': 100},
   'balanceSheet': {'totalAssets': 500, 'shortLongTermDebt': 120},
   'cashFlow': {'totalCashFromOperatingActivities': 90,
                'capitalExpenditures': -30},
   'shares': {'sharesOutstanding': 10}}

Flat keys win over nested ones; within each, the first non-zero alias wins.

Usage:
  facts, parameters = load_valuation_request(Path('request.json'))
"""

import json
from math import isfinite
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import ValuationParameters

# Field -> candidate key paths, in priority order.
FACT_SOURCES: Dict[str, Sequence[Tuple[str, ...]]] = {
    'net_income': [('netIncome',), ('financials', 'netIncome')],
    'total_shares': [
        ('totalShares',),
        ('sharesOutstanding',),
        ('shares', 'sharesOutstanding'),
    ],
    'operating_cash_flow': [
        ('operatingCashFlow',),
        ('cashFlow', 'totalCashFromOperatingActivities'),
    ],
    'total_assets': [('totalAssets',), ('balanceSheet', 'totalAssets')],
    'interest_bearing_debt': [
        ('interestBearingDebt',),
        ('balanceSheet', 'shortLongTermDebt'),
    ],
    'capex': [('capex',), ('cashFlow', 'capitalExpenditures')],
    'depreciation': [('depreciation',), ('cashFlow', 'depreciation')],
    'current_price': [('currentPrice',)],
}

# Reported with either sign depending on the data source.
ABSOLUTE_FACTS = ('capex', 'depreciation')

PARAMETER_KEYS = {
    'growth_rate': 'growthRate',
    'reasonable_pe': 'reasonablePE',
    'safety_margin': 'safetyMargin',
    'high_leverage_threshold': 'highLeverageThreshold',
}

REQUIRED_MANUAL_FIELDS = (
    'netIncome',
    'totalShares',
    'operatingCashFlow',
    'totalAssets',
    'currentPrice',
)


def to_number(value: Any) -> Optional[float]:
  """
  Coerce a payload value to a finite float.

  Returns:
    The float, or None when the value is missing, boolean, non-numeric or
    not finite
  """
  if value is None or isinstance(value, bool):
    return None
  if isinstance(value, str):
    value = value.strip().replace(',', '')
    if not value:
      return None
  try:
    number = float(value)
  except (TypeError, ValueError):
    return None
  if not isfinite(number):
    return None
  return number


def _lookup(payload: Mapping[str, Any], path: Tuple[str, ...]) -> Any:
  node: Any = payload
  for key in path:
    if not isinstance(node, Mapping) or key not in node:
      return None
    node = node[key]
  return node


def _first_nonzero(payload: Mapping[str, Any],
                   paths: Iterable[Tuple[str, ...]]) -> float:
  for path in paths:
    number = to_number(_lookup(payload, path))
    if number:
      return number
  return 0.0


def normalize_financial_data(payload: Mapping[str, Any]) -> FinancialFacts:
  """
  Build FinancialFacts from a flat or nested financial data payload.

  Args:
    payload: financialData mapping (camelCase keys)

  Returns:
    FinancialFacts with every missing number defaulted to 0.0
  """
  values = {
      name: _first_nonzero(payload, paths)
      for name, paths in FACT_SOURCES.items()
  }
  for name in ABSOLUTE_FACTS:
    values[name] = abs(values[name])

  currency = payload.get('currency') or 'USD'
  symbol = payload.get('symbol')
  company_name = payload.get('companyName')

  return FinancialFacts(
      currency=str(currency),
      symbol=str(symbol) if symbol is not None else None,
      company_name=str(company_name) if company_name is not None else None,
      **values,
  )


def normalize_parameters(
    payload: Optional[Mapping[str, Any]]) -> ValuationParameters:
  """
  Build ValuationParameters, falling back to defaults for absent values.

  An explicit 0 is kept; only missing or unusable values take the default.
  Ranges are not enforced.
  """
  defaults = ValuationParameters()
  payload = payload or {}

  values: Dict[str, float] = {}
  for name, key in PARAMETER_KEYS.items():
    number = to_number(payload.get(key))
    values[name] = number if number is not None else getattr(defaults, name)

  return ValuationParameters(**values)


def check_required_fields(
    payload: Mapping[str, Any],
    fields: Sequence[str] = REQUIRED_MANUAL_FIELDS,
) -> None:
  """
  Validate a manual-entry payload before it reaches the engine.

  Raises:
    ValueError: If any required field is missing or blank
  """
  missing = [
      key for key in fields
      if payload.get(key) is None or str(payload.get(key)).strip() == ''
  ]
  if missing:
    raise ValueError(f'Missing required data: {", ".join(missing)}')


def load_valuation_request(
    path: Path,
    require_manual_fields: bool = False,
) -> Tuple[FinancialFacts, ValuationParameters]:
  """
  Load a {financialData, parameters} request from a JSON file.

  Args:
    path: Path to the JSON request
    require_manual_fields: Validate manual-entry required fields first

  Returns:
    Tuple of (facts, parameters)

  Raises:
    FileNotFoundError: If the request file does not exist
    ValueError: If the file lacks financialData or required fields
  """
  if not path.exists():
    raise FileNotFoundError(f'Valuation request not found: {path}')

  with open(path, 'r', encoding='utf-8') as f:
    request = json.load(f)

  if not isinstance(request, Mapping):
    raise ValueError(f'Request {path} is not a JSON object')

  financial_data = request.get('financialData')
  if not isinstance(financial_data, Mapping):
    raise ValueError(f'Request {path} has no financialData object')

  if require_manual_fields:
    check_required_fields(financial_data)

  return (normalize_financial_data(financial_data),
          normalize_parameters(request.get('parameters')))
