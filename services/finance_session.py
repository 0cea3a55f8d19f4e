"""
Estado em memória de uma sessão do painel: transações, perfil e chat
"""

from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from loguru import logger

from models.schemas import (
    Category,
    CategoryTotal,
    ChatMessage,
    ChatRole,
    DashboardView,
    Plan,
    Transaction,
    TransactionDraft,
    TransactionType,
    UserProfile,
)
from services import ledger
from utils.helpers import coerce_amount, today_iso


ADVISOR_WELCOME_MESSAGE = (
    "Olá! Sou seu consultor financeiro pessoal. Posso analisar seus gastos, "
    "sugerir cortes ou explicar conceitos financeiros. Como posso ajudar hoje?"
)


def initial_transactions(today: Optional[date] = None) -> List[Transaction]:
    """Transações de exemplo exibidas no primeiro acesso"""
    today = today or date.today()

    def at(day: date) -> str:
        return datetime.combine(day, time(12, 0)).isoformat()

    return [
        Transaction(title="Salário", amount=5000, type=TransactionType.INCOME,
                    category=Category.SALARY, date=at(today.replace(day=1))),
        Transaction(title="Aluguel", amount=1800, type=TransactionType.EXPENSE,
                    category=Category.HOUSING, date=at(today.replace(day=5))),
        Transaction(title="Supermercado Semanal", amount="450.50", type=TransactionType.EXPENSE,
                    category=Category.FOOD, date=at(today - timedelta(days=2))),
        Transaction(title="Uber - Trabalho", amount="24.90", type=TransactionType.EXPENSE,
                    category=Category.TRANSPORT, date=at(today - timedelta(days=1))),
        Transaction(title="Cinema e Pipoca", amount=85, type=TransactionType.EXPENSE,
                    category=Category.LEISURE, date=at(today)),
    ]


class FinanceSession:
    """Dono único do estado mutável de uma sessão"""

    def __init__(self, transactions: Optional[List[Transaction]] = None):
        self.transactions: List[Transaction] = list(transactions or [])
        self.profile = UserProfile()
        self.messages: List[ChatMessage] = [
            ChatMessage(role=ChatRole.MODEL, text=ADVISOR_WELCOME_MESSAGE)
        ]
        self.logged_in = False

    @classmethod
    def with_seed_data(cls, today: Optional[date] = None) -> "FinanceSession":
        return cls(initial_transactions(today))

    def login(self, name: Any, monthly_income: Any, savings_goal: Any) -> UserProfile:
        """Cadastro inicial do perfil"""
        self.profile = UserProfile.from_form(name, monthly_income, savings_goal)
        self.logged_in = True
        logger.info(f"👤 Sessão iniciada para {self.profile.name}")
        return self.profile

    def update_profile(self, profile: UserProfile) -> UserProfile:
        self.profile = profile
        return self.profile

    def update_savings_goal(self, savings_goal: Any) -> UserProfile:
        return self.update_profile(
            self.profile.model_copy(update={"savings_goal": coerce_amount(savings_goal)})
        )

    def upgrade_plan(self) -> UserProfile:
        return self.update_profile(self.profile.model_copy(update={"plan": Plan.PREMIUM}))

    def add_transaction(self, transaction: Transaction) -> Transaction:
        self.transactions.append(transaction)
        logger.info(f"💰 Transação adicionada: {transaction.title} ({transaction.amount})")
        return transaction

    def add_manual_transaction(
        self,
        title: Optional[str],
        amount: Any,
        transaction_type: Any = TransactionType.EXPENSE,
        category: Any = Category.FOOD,
        transaction_date: Optional[str] = None,
    ) -> Transaction:
        """Incluir transação do formulário manual; valor inválido vira zero"""
        return self.add_transaction(
            Transaction(
                title=title or "",
                amount=amount,
                type=transaction_type,
                category=category if category is not None else Category.FOOD,
                date=transaction_date or today_iso(),
            )
        )

    def add_from_draft(self, draft: TransactionDraft) -> Transaction:
        return self.add_transaction(draft.to_transaction())

    def add_message(self, role: ChatRole, text: str) -> ChatMessage:
        message = ChatMessage(role=role, text=text)
        self.messages.append(message)
        return message

    def dashboard(self, window: Optional[int] = None, recent_limit: int = 5) -> DashboardView:
        """Montar os dados do painel a partir do estado atual"""
        by_category = ledger.expenses_by_category(self.transactions)

        return DashboardView(
            profile=self.profile,
            metrics=ledger.compute_dashboard(self.transactions, self.profile),
            expenses_by_category=[
                CategoryTotal(category=category, total=total)
                for category, total in by_category.items()
            ],
            daily_series=ledger.daily_series(self.transactions, window),
            recent_transactions=ledger.recent_transactions(self.transactions, recent_limit),
        )
