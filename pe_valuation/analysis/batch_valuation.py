'''
Batch valuation for many companies with the same parameters.

This module provides tools to:
1. Value every company in a table of financial facts
2. Compare buy/sell bands and recommendations across companies
3. Export results to CSV for further analysis

The input table has one row per company and the same camelCase columns as
a financialData payload (symbol, netIncome, totalShares, operatingCashFlow,
totalAssets, interestBearingDebt, capex, depreciation, currentPrice,
currency). Missing columns and empty cells are treated as 0.

Usage (CLI):
  python -m pe_valuation.analysis.batch_valuation \
    --input data/facts.csv \
    --output results/valuation.csv \
    --growth-rate 0.08 \
    --reasonable-pe 18 \
    -v

Usage (Python API):
  from pe_valuation.analysis.batch_valuation import batch_valuation
  from pe_valuation.domain.types import ValuationParameters

  df = batch_valuation(facts_df, ValuationParameters())
  df.to_csv('results.csv', index=False)
'''

import argparse
import logging
import traceback
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from pe_valuation.data_loader import normalize_financial_data
from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import ValuationOutcome
from pe_valuation.domain.types import ValuationParameters
from pe_valuation.run import calculate_stock_valuation
from pe_valuation.scenarios.config import ValuationConfig

logger = logging.getLogger(__name__)


def _outcome_to_dict(
    facts: FinancialFacts,
    config_name: str,
    outcome: ValuationOutcome,
) -> Dict[str, Any]:
  '''Convert ValuationOutcome to flat dictionary for DataFrame row.'''
  return {
      'symbol': facts.symbol,
      'config': config_name,
      'currency': outcome.currency,
      'current_price': outcome.current_price,
      'buy_price': outcome.buy_price,
      'sell_price': outcome.sell_price,
      'sell_option1': outcome.sell_option1,
      'sell_option2': outcome.sell_option2,
      'adjusted_pe': outcome.adjusted_pe,
      'year3_earnings': outcome.future_earnings.year3,
      'leverage_ratio': outcome.verification.leverage_ratio,
      'is_high_leverage': outcome.is_high_leverage,
      'profit_is_real': outcome.verification.profit_is_real,
      'profit_sustainable': outcome.verification.profit_sustainable,
      'low_capital_consumption':
          outcome.verification.low_capital_consumption,
      'recommendation': outcome.recommendation.signal.value,
      'upside': outcome.recommendation.upside,
      'risk_level': outcome.risk.level,
      'risk_factors': '; '.join(outcome.risk.factors),
  }


def batch_valuation(
    facts_df: pd.DataFrame,
    parameters: ValuationParameters,
    config: Optional[ValuationConfig] = None,
    verbose: bool = False,
) -> pd.DataFrame:
  '''
  Value every company in a facts table.

  Args:
    facts_df: One row per company with financialData columns
    parameters: Valuation parameters applied to every company
    config: ValuationConfig (default: ValuationConfig.default())
    verbose: Enable verbose logging

  Returns:
    DataFrame with one row per valued company:
    - symbol, config, currency, current_price
    - buy_price, sell_price, sell_option1, sell_option2
    - adjusted_pe, year3_earnings, leverage_ratio and quality checks
    - recommendation, upside, risk_level, risk_factors

  Raises:
    ValueError: If no company could be valued
  '''
  if config is None:
    config = ValuationConfig.default()

  records = facts_df.astype(object).where(facts_df.notna(), None)
  results = []

  for i, (_, row) in enumerate(records.iterrows(), 1):
    payload = row.to_dict()
    symbol = payload.get('symbol') or f'row {i}'
    if verbose:
      logger.info('[%d/%d] Processing %s...', i, len(records), symbol)

    try:
      facts = normalize_financial_data(payload)
      outcome = calculate_stock_valuation(facts, parameters, config=config)
      results.append(_outcome_to_dict(facts, config.name, outcome))

      if verbose:
        logger.info('  Buy: %.2f, Sell: %.2f, Price: %.2f -> %s',
                    outcome.buy_price, outcome.sell_price,
                    outcome.current_price,
                    outcome.recommendation.signal.value)

    except Exception as e:  # pylint: disable=broad-except
      logger.warning('Failed to process %s: %s', symbol, str(e))
      if verbose:
        logger.debug('%s', traceback.format_exc())

  if not results:
    raise ValueError(f'No successful results for any of {len(records)} rows')

  return pd.DataFrame(results)


def _print_summary(df: pd.DataFrame) -> None:
  '''Print summary statistics for batch valuation results.'''
  total = len(df)
  priced_df = df[df['current_price'] > 0]

  logger.info('')
  logger.info('=' * 70)
  logger.info('Summary Statistics')
  logger.info('=' * 70)
  logger.info('Total companies: %d', total)
  logger.info('With market price: %d', len(priced_df))
  logger.info('')

  counts = df['recommendation'].value_counts()
  for signal in ('BUY', 'HOLD', 'SELL'):
    logger.info('  %s: %d', signal, int(counts.get(signal, 0)))
  logger.info('')

  risk_counts = df['risk_level'].value_counts()
  logger.info('Risk levels:')
  for level in ('LOW', 'MEDIUM', 'HIGH'):
    logger.info('  %s: %d', level, int(risk_counts.get(level, 0)))
  logger.info('')

  if len(priced_df) > 0:
    logger.info('Upside to buy price:')
    logger.info('  Mean:   %.1f%%', priced_df['upside'].mean())
    logger.info('  Median: %.1f%%', priced_df['upside'].median())
    logger.info('')

    logger.info('Top 5 by upside:')
    top5 = priced_df.nlargest(5, 'upside')
    for _, row in top5.iterrows():
      logger.info('  %s: Buy=%.2f, Sell=%.2f, Price=%.2f, Upside=%.1f%%',
                  row['symbol'], row['buy_price'], row['sell_price'],
                  row['current_price'], row['upside'])

  logger.info('=' * 70)


def main() -> None:
  '''CLI entrypoint for batch valuation.'''
  parser = argparse.ArgumentParser(
      description='Batch PE valuation for a table of companies',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog=__doc__,
  )
  defaults = ValuationParameters()

  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='CSV file with one company per row')
  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV file path')
  parser.add_argument('--growth-rate',
                      type=float,
                      default=defaults.growth_rate,
                      help='Annual growth rate (default: 0.10)')
  parser.add_argument('--reasonable-pe',
                      type=float,
                      default=defaults.reasonable_pe,
                      help='Baseline PE multiple (default: 20)')
  parser.add_argument('--safety-margin',
                      type=float,
                      default=defaults.safety_margin,
                      help='Safety margin fraction (default: 0.5)')
  parser.add_argument('--high-leverage-threshold',
                      type=float,
                      default=defaults.high_leverage_threshold,
                      help='High leverage threshold (default: 0.7)')
  parser.add_argument('--config',
                      type=Path,
                      default=None,
                      help='JSON ValuationConfig (default: built-in)')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose output')

  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  if not args.input.exists():
    raise FileNotFoundError(f'Input CSV not found: {args.input}')

  facts_df = pd.read_csv(args.input, dtype={'symbol': str})
  logger.info('Loaded %d companies from %s', len(facts_df), args.input)

  config = ValuationConfig.default()
  if args.config is not None:
    config = ValuationConfig.from_json(args.config.read_text(encoding='utf-8'))
  logger.info('Using config: %s', config.name)

  parameters = ValuationParameters(
      growth_rate=args.growth_rate,
      reasonable_pe=args.reasonable_pe,
      safety_margin=args.safety_margin,
      high_leverage_threshold=args.high_leverage_threshold,
  )

  results = batch_valuation(facts_df,
                            parameters,
                            config=config,
                            verbose=args.verbose)

  args.output.parent.mkdir(parents=True, exist_ok=True)
  results.to_csv(args.output, index=False)

  logger.info('')
  logger.info('Saved %d results to %s', len(results), args.output)

  _print_summary(results)


if __name__ == '__main__':
  main()
