'''
PE-multiple stock valuation with a transparent calculation trail.

Given normalized financial facts and four analyst parameters (growth rate,
reasonable PE, safety margin, high leverage threshold), the engine checks
profit quality and leverage, projects earnings three years ahead, discounts
the PE for levered balance sheets and derives a buy price, a conservative
sell price, a BUY/HOLD/SELL recommendation and a step-by-step audit trail.

Usage:
  from pe_valuation.data_loader import normalize_financial_data
  from pe_valuation.data_loader import normalize_parameters
  from pe_valuation.run import calculate_stock_valuation

  facts = normalize_financial_data(request['financialData'])
  parameters = normalize_parameters(request['parameters'])
  outcome = calculate_stock_valuation(facts, parameters)
  payload = outcome.to_dict()
'''
