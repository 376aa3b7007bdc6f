'''
Single-company valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Runs the quality checks on normalized financial facts
2. Projects earnings and adjusts the PE multiple for leverage
3. Derives buy and sell prices
4. Applies the recommendation and risk policies from the configuration
5. Returns ValuationOutcome with the full calculation audit trail

Usage:
  from pe_valuation.data_loader import normalize_financial_data
  from pe_valuation.domain.types import ValuationParameters
  from pe_valuation.run import calculate_stock_valuation

  facts = normalize_financial_data({'netIncome': 100, 'totalShares': 10})
  outcome = calculate_stock_valuation(facts, ValuationParameters())
  print(f'Buy: {outcome.buy_price:.2f}, Sell: {outcome.sell_price:.2f}')

Usage (CLI):
  python -m pe_valuation.run --input request.json --output result.json
'''

import argparse
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Optional

from pe_valuation.data_loader import load_valuation_request
from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import ValuationOutcome
from pe_valuation.domain.types import ValuationParameters
from pe_valuation.engine import steps
from pe_valuation.engine.valuation import adjust_pe
from pe_valuation.engine.valuation import compute_buy_price
from pe_valuation.engine.valuation import compute_sell_price
from pe_valuation.engine.valuation import project_earnings
from pe_valuation.engine.valuation import verify_quality
from pe_valuation.scenarios.config import ValuationConfig
from pe_valuation.scenarios.registry import create_policies

logger = logging.getLogger(__name__)


def calculate_stock_valuation(
    facts: FinancialFacts,
    parameters: ValuationParameters,
    config: Optional[ValuationConfig] = None,
    calculation_time: Optional[str] = None,
) -> ValuationOutcome:
  '''
  Value one company.

  This function never raises for any combination of finite facts and
  parameters: zero shares, non-positive assets or zero income produce a
  defined (possibly zero) result, and overflowing growth gives infinite
  prices. Every outcome carries a complete audit trail. The same inputs
  always give the same outcome; the only non-derived field is calculation_time,
  which is copied from the argument.

  Args:
    facts: Normalized financial facts
    parameters: Valuation parameters
    config: ValuationConfig (default: ValuationConfig.default())
    calculation_time: Timestamp to stamp on the outcome, if any

  Returns:
    ValuationOutcome with prices, recommendation, risk and audit trail

  Raises:
    KeyError: If the configuration names an unknown policy
  '''
  if config is None:
    config = ValuationConfig.default()

  policies = create_policies(config)
  label = facts.symbol or 'company'
  trail = steps.AuditTrail()

  steps.record_validation(trail, facts)
  if facts.total_shares <= 0:
    logger.warning('%s: total shares is not positive, per-share prices '
                   'default to 0', label)

  verification, is_high_leverage = verify_quality(
      facts,
      parameters.high_leverage_threshold,
      profit_realism_ratio=config.profit_realism_ratio,
      capex_tolerance=config.capex_tolerance,
  )
  steps.record_quality(trail, facts, verification, is_high_leverage,
                       config.profit_realism_ratio, config.capex_tolerance)

  future_earnings = project_earnings(facts.net_income, parameters.growth_rate)
  steps.record_projection(trail, facts.net_income, parameters.growth_rate,
                          future_earnings)

  adjusted_pe = adjust_pe(parameters.reasonable_pe, is_high_leverage,
                          haircut=config.leverage_haircut)
  if is_high_leverage:
    logger.debug('%s: leverage %.3f >= %.3f, PE %.1f -> %.1f', label,
                 verification.leverage_ratio,
                 parameters.high_leverage_threshold, parameters.reasonable_pe,
                 adjusted_pe)
  steps.record_pe_adjustment(trail, parameters.reasonable_pe,
                             verification.leverage_ratio, is_high_leverage,
                             adjusted_pe, config.leverage_haircut)

  buy_price, future_value = compute_buy_price(future_earnings.year3,
                                              adjusted_pe,
                                              parameters.safety_margin,
                                              facts.total_shares)
  steps.record_intrinsic_value(trail, future_earnings.year3, adjusted_pe,
                               parameters.safety_margin, facts.total_shares,
                               future_value, buy_price)

  sell_price, option1, option2 = compute_sell_price(
      facts.net_income,
      future_earnings.year3,
      facts.total_shares,
      current_pe=config.sell_current_pe,
      future_pe=config.sell_future_pe,
      premium=config.sell_premium,
  )
  logger.debug('%s: sell options %.2f / %.2f, using %.2f', label, option1,
               option2, sell_price)
  steps.record_sell_price(trail, facts.net_income, future_earnings.year3,
                          facts.total_shares, option1, option2, sell_price,
                          config.sell_current_pe, config.sell_future_pe,
                          config.sell_premium)

  recommendation_result = policies['recommendation'].compute(
      facts.current_price, buy_price, sell_price)
  steps.record_recommendation(trail, facts.current_price, buy_price,
                              sell_price, recommendation_result.value,
                              policies['recommendation'].describe())

  risk_result = policies['risk'].compute(verification, is_high_leverage,
                                         parameters.high_leverage_threshold)
  logger.debug('%s: %s (%s), risk %s', label,
               recommendation_result.value.signal.value,
               recommendation_result.diag.get('band'),
               risk_result.value.level)

  return ValuationOutcome(
      verification=verification,
      is_high_leverage=is_high_leverage,
      future_earnings=future_earnings,
      adjusted_pe=adjusted_pe,
      future_value=future_value,
      buy_price=buy_price,
      sell_price=sell_price,
      sell_option1=option1,
      sell_option2=option2,
      recommendation=recommendation_result.value,
      risk=risk_result.value,
      calculation_steps=trail.steps,
      parameters=parameters,
      current_price=facts.current_price,
      currency=facts.currency,
      calculation_time=calculation_time,
  )


def load_config(scenario: str, config_path: Optional[Path]) -> ValuationConfig:
  '''Resolve the configuration from a JSON file or a named preset.'''
  if config_path is not None:
    if not config_path.exists():
      raise FileNotFoundError(f'Config not found: {config_path}')
    return ValuationConfig.from_json(config_path.read_text(encoding='utf-8'))

  scenario_map = {
      'default': ValuationConfig.default,
  }
  if scenario not in scenario_map:
    available = ', '.join(scenario_map.keys())
    raise ValueError(f'Unknown scenario: {scenario}. Available: {available}')
  return scenario_map[scenario]()


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run PE valuation')
  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='JSON request with financialData and parameters')
  parser.add_argument('--scenario',
                      type=str,
                      default='default',
                      help='Configuration preset (default: default)')
  parser.add_argument('--config',
                      type=Path,
                      default=None,
                      help='JSON ValuationConfig (overrides --scenario)')
  parser.add_argument('--require-manual-fields',
                      action='store_true',
                      help='Reject requests missing manual-entry fields')
  parser.add_argument('--output',
                      type=Path,
                      default=None,
                      help='Write the JSON result to this path')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose output')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(message)s',
  )

  config = load_config(args.scenario, args.config)
  facts, parameters = load_valuation_request(
      args.input, require_manual_fields=args.require_manual_fields)

  outcome = calculate_stock_valuation(
      facts,
      parameters,
      config=config,
      calculation_time=datetime.now(timezone.utc).isoformat(),
  )

  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('PE Valuation - %s', facts.company_name or facts.symbol or
              args.input.name)
  logger.info('Config: %s', config.name)
  logger.info(separator)

  for step in outcome.calculation_steps:
    result = (step.result if isinstance(step.result, str) else ', '.join(
        f'{k}: {v}' for k, v in step.result.items()))
    logger.info('  %d. %s: %s', step.step, step.title, result)

  logger.info('\nValuation Result:')
  logger.info('  Current Price: %.2f %s', outcome.current_price,
              outcome.currency)
  logger.info('  Buy Price: %.2f', outcome.buy_price)
  logger.info('  Sell Price: %.2f', outcome.sell_price)
  logger.info('  Upside to Buy: %.1f%%', outcome.recommendation.upside)
  logger.info('  Recommendation: %s (%s)',
              outcome.recommendation.signal.value,
              outcome.recommendation.reason)
  logger.info('  Risk Level: %s', outcome.risk.level)
  for factor in outcome.risk.factors:
    logger.info('    - %s', factor)
  logger.info('%s\n', separator)

  if args.output:
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(outcome.to_dict(),
                                      indent=2,
                                      ensure_ascii=False),
                           encoding='utf-8')
    logger.info('Saved result to %s', args.output)


if __name__ == '__main__':
  main()
