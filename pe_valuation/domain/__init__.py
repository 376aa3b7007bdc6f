"""Domain types for the PE valuation engine."""

from pe_valuation.domain.types import FinancialFacts
from pe_valuation.domain.types import FutureEarnings
from pe_valuation.domain.types import PolicyOutput
from pe_valuation.domain.types import Recommendation
from pe_valuation.domain.types import RiskAssessment
from pe_valuation.domain.types import Signal
from pe_valuation.domain.types import StepRecord
from pe_valuation.domain.types import ValuationOutcome
from pe_valuation.domain.types import ValuationParameters
from pe_valuation.domain.types import VerificationResult

__all__ = [
    'FinancialFacts',
    'FutureEarnings',
    'PolicyOutput',
    'Recommendation',
    'RiskAssessment',
    'Signal',
    'StepRecord',
    'ValuationOutcome',
    'ValuationParameters',
    'VerificationResult',
]
