'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from pe_valuation.analysis.batch_valuation import batch_valuation
'''
