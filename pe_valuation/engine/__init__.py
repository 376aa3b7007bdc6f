'''PE valuation engine: pure math functions and the calculation audit trail.'''

from pe_valuation.engine.steps import AuditTrail
from pe_valuation.engine.valuation import (
    adjust_pe,
    compute_buy_price,
    compute_sell_price,
    compute_upside,
    project_earnings,
    verify_quality,
)

__all__ = [
    'AuditTrail',
    'adjust_pe',
    'compute_buy_price',
    'compute_sell_price',
    'compute_upside',
    'project_earnings',
    'verify_quality',
]
