"""
Cálculos do painel financeiro a partir das transações e do perfil

Todas as funções são puras: recebem os dados por argumento, não guardam
estado e nunca alteram a coleção recebida.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from models.schemas import (
    Category,
    DailyBucket,
    DailySeries,
    DashboardMetrics,
    Transaction,
    TransactionType,
    UserProfile,
)
from utils.helpers import ZERO, coerce_amount, day_key


HUNDRED = Decimal("100")


def total_by_type(transactions: Iterable[Transaction], transaction_type: TransactionType) -> Decimal:
    """Somar valores de um tipo; valor ausente ou inválido conta como zero"""
    return sum(
        (coerce_amount(t.amount) for t in transactions if t.type == transaction_type),
        ZERO,
    )


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return total_by_type(transactions, TransactionType.INCOME)


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    return total_by_type(transactions, TransactionType.EXPENSE)


def balance(income: Decimal, expense: Decimal) -> Decimal:
    """Saldo real; pode ser negativo"""
    return income - expense


def current_savings(balance_value: Decimal) -> Decimal:
    return max(ZERO, balance_value)


def expense_ratio(expense: Decimal, monthly_income: Decimal) -> Decimal:
    """Percentual da renda mensal comprometido com despesas"""
    if monthly_income <= 0:
        return ZERO
    return expense / monthly_income * HUNDRED


def goal_progress(savings: Decimal, savings_goal: Decimal) -> Decimal:
    """Progresso da meta em percentual, limitado a 100"""
    if savings_goal <= 0:
        return ZERO
    return min(HUNDRED, savings / savings_goal * HUNDRED)


def remaining_to_goal(savings: Decimal, savings_goal: Decimal) -> Decimal:
    return max(ZERO, savings_goal - savings)


def available_to_spend(monthly_income: Decimal, expense: Decimal) -> Decimal:
    """Quanto da renda mensal ainda está livre"""
    return max(ZERO, monthly_income - expense)


def expenses_by_category(transactions: Iterable[Transaction]) -> Dict[Category, Decimal]:
    """Total de despesas por categoria conhecida, sem categorias zeradas.

    A ordem do resultado segue a ordem do enum. Categorias personalizadas
    (texto livre) não entram no agrupamento.
    """
    totals: Dict[Category, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        if t.type == TransactionType.EXPENSE and not t.is_custom_category:
            totals[t.category] += coerce_amount(t.amount)

    return {
        category: totals[category]
        for category in Category
        if totals.get(category, ZERO) > 0
    }


def daily_series(transactions: Iterable[Transaction], window: Optional[int] = None) -> DailySeries:
    """Agrupar entradas e saídas por dia do calendário, em ordem crescente.

    Transações com data inválida são descartadas da série e listadas em
    ``skipped``; as demais continuam sendo processadas. ``window`` mantém
    apenas os N dias mais recentes com movimento.
    """
    days: Dict = defaultdict(lambda: {"income": ZERO, "expense": ZERO})
    skipped: List[str] = []

    for t in transactions:
        key = day_key(t.date)
        if key is None:
            logger.warning(f"⚠️ Data inválida '{t.date}' na transação {t.id}, ignorada na série diária")
            skipped.append(t.id)
            continue

        bucket = days[key]
        if t.type == TransactionType.INCOME:
            bucket["income"] += coerce_amount(t.amount)
        else:
            bucket["expense"] += coerce_amount(t.amount)

    buckets = [
        DailyBucket(day=key, income=days[key]["income"], expense=days[key]["expense"])
        for key in sorted(days)
    ]

    if window is not None:
        buckets = buckets[-window:] if window > 0 else []

    return DailySeries(buckets=buckets, skipped=skipped)


def recent_transactions(transactions: Sequence[Transaction], limit: int = 5) -> List[Transaction]:
    """Transações mais recentes primeiro, pela ordem de inclusão"""
    if limit <= 0:
        return []
    return list(reversed(transactions))[:limit]


def compute_dashboard(transactions: Iterable[Transaction], profile: UserProfile) -> DashboardMetrics:
    """Calcular todos os indicadores do painel"""
    items = list(transactions)

    income = total_income(items)
    expense = total_expense(items)
    balance_value = balance(income, expense)
    savings = current_savings(balance_value)

    return DashboardMetrics(
        total_income=income,
        total_expense=expense,
        balance=balance_value,
        current_savings=savings,
        expense_ratio=expense_ratio(expense, profile.monthly_income),
        goal_progress=goal_progress(savings, profile.savings_goal),
        remaining_to_goal=remaining_to_goal(savings, profile.savings_goal),
        available_to_spend=available_to_spend(profile.monthly_income, expense),
    )
