"""
Models package - Pydantic schemas and data models
"""

from .schemas import (
    Transaction,
    TransactionDraft,
    TransactionType,
    Category,
    UserProfile,
    Plan,
    ChatMessage,
    ChatRole,
    DashboardMetrics,
    DailyBucket,
    DailySeries,
    CategoryTotal,
    DashboardView,
)

__all__ = [
    'Transaction',
    'TransactionDraft',
    'TransactionType',
    'Category',
    'UserProfile',
    'Plan',
    'ChatMessage',
    'ChatRole',
    'DashboardMetrics',
    'DailyBucket',
    'DailySeries',
    'CategoryTotal',
    'DashboardView',
]
