"""
Services package - Business logic and external integrations
"""

from . import ledger
from .advisor_service import advisor_service, AdvisorService
from .finance_session import FinanceSession, initial_transactions

__all__ = [
    'ledger',
    'advisor_service',
    'AdvisorService',
    'FinanceSession',
    'initial_transactions'
]
