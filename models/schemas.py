"""
Schemas Pydantic para validação de dados
"""

from datetime import datetime, date
from typing import Optional, Any, List, Union
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum

from utils.helpers import ZERO, coerce_amount, new_id, today_iso


DEFAULT_TRANSACTION_TITLE = "Despesa"
DEFAULT_USER_NAME = "Usuário"

_INCOME_ALIASES = {"income", "receita", "entrada"}


class TransactionType(str, Enum):
    """Tipo da transação"""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def parse(cls, value: Any) -> "TransactionType":
        """Interpretar tipo de forma tolerante; desconhecido vira despesa"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().casefold() in _INCOME_ALIASES:
            return cls.INCOME
        return cls.EXPENSE


class Category(str, Enum):
    """Categorias conhecidas de transação"""
    FOOD = "Alimentação"
    TRANSPORT = "Transporte"
    HOUSING = "Moradia"
    HEALTH = "Saúde"
    LEISURE = "Lazer"
    EDUCATION = "Educação"
    INVESTMENT = "Investimentos"
    SALARY = "Salário"
    OTHER = "Outros"
    SHOPPING = "Compras"
    BILLS = "Contas"

    @classmethod
    def match(cls, value: Any) -> Optional["Category"]:
        """Buscar categoria pelo rótulo ou pelo nome, sem diferenciar maiúsculas"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        key = value.strip().casefold()
        for category in cls:
            if key in (category.value.casefold(), category.name.casefold()):
                return category
        return None


def normalize_category(value: Any) -> Union[Category, str]:
    """Categoria conhecida vira enum, texto livre é preservado, vazio vira Outros"""
    known = Category.match(value)
    if known is not None:
        return known
    if isinstance(value, str) and value.strip():
        return value.strip()
    return Category.OTHER


def category_label(category: Union[Category, str]) -> str:
    """Rótulo de exibição de uma categoria"""
    if isinstance(category, Category):
        return category.value
    return category


class Plan(str, Enum):
    """Plano de assinatura"""
    FREE = "free"
    PREMIUM = "premium"


class ChatRole(str, Enum):
    """Autor de uma mensagem do consultor"""
    USER = "user"
    MODEL = "model"


class TransactionFields(BaseModel):
    """Campos comuns a transações e rascunhos"""
    title: str = Field(default="", description="Título curto da transação")
    amount: Decimal = Field(default=ZERO, ge=0, description="Valor absoluto")
    type: TransactionType = Field(default=TransactionType.EXPENSE)
    category: Union[Category, str] = Field(
        default=Category.OTHER,
        union_mode="left_to_right",
        description="Categoria conhecida ou texto livre",
    )
    date: str = Field(default_factory=today_iso, description="Data ISO-8601")

    @field_validator('title', mode='before')
    def validate_title(cls, v):
        # o texto é mantido como digitado
        if v is None:
            return ""
        return str(v)

    @field_validator('amount', mode='before')
    def validate_amount(cls, v):
        return coerce_amount(v)

    @field_validator('type', mode='before')
    def validate_type(cls, v):
        return TransactionType.parse(v)

    @field_validator('category', mode='before')
    def validate_category(cls, v):
        return normalize_category(v)

    @field_validator('date', mode='before')
    def validate_date(cls, v):
        # datas inválidas são mantidas; o agregador descarta o registro
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        if v is None:
            return today_iso()
        return str(v)

    @property
    def is_custom_category(self) -> bool:
        return not isinstance(self.category, Category)


class Transaction(TransactionFields):
    """Transação financeira, imutável após criada"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Identificador único")
    description: Optional[str] = None


class TransactionDraft(TransactionFields):
    """Rascunho de transação extraído de texto livre"""

    def to_transaction(self) -> Transaction:
        """Criar a transação definitiva com novo identificador"""
        return Transaction(
            title=self.title.strip() or DEFAULT_TRANSACTION_TITLE,
            amount=self.amount,
            type=self.type,
            category=self.category,
            date=self.date,
        )


class UserProfile(BaseModel):
    """Perfil financeiro do usuário"""
    name: str = Field(default="")
    monthly_income: Decimal = Field(default=ZERO, ge=0, description="Renda mensal declarada")
    savings_goal: Decimal = Field(default=ZERO, ge=0, description="Meta de economia")
    plan: Plan = Field(default=Plan.FREE)

    @field_validator('monthly_income', 'savings_goal', mode='before')
    def validate_money(cls, v):
        return coerce_amount(v)

    @classmethod
    def from_form(cls, name: Any, monthly_income: Any, savings_goal: Any) -> "UserProfile":
        """Criar perfil a partir do formulário de cadastro"""
        clean_name = str(name).strip() if name else ""
        return cls(
            name=clean_name or DEFAULT_USER_NAME,
            monthly_income=monthly_income,
            savings_goal=savings_goal,
            plan=Plan.FREE,
        )


class ChatMessage(BaseModel):
    """Mensagem do chat com o consultor"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    role: ChatRole
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)


class DashboardMetrics(BaseModel):
    """Indicadores do painel"""
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    current_savings: Decimal = ZERO
    expense_ratio: Decimal = ZERO
    goal_progress: Decimal = ZERO
    remaining_to_goal: Decimal = ZERO
    available_to_spend: Decimal = ZERO


class DailyBucket(BaseModel):
    """Entradas e saídas de um dia do calendário"""
    day: date
    income: Decimal = ZERO
    expense: Decimal = ZERO


class DailySeries(BaseModel):
    """Série diária ordenada e registros descartados por data inválida"""
    buckets: List[DailyBucket] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)


class CategoryTotal(BaseModel):
    category: Category
    total: Decimal


class DashboardView(BaseModel):
    """Dados completos para a tela do painel"""
    profile: UserProfile
    metrics: DashboardMetrics
    expenses_by_category: List[CategoryTotal] = Field(default_factory=list)
    daily_series: DailySeries
    recent_transactions: List[Transaction] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Formulário de cadastro"""
    name: Optional[str] = None
    monthly_income: Any = None
    savings_goal: Any = None


class ProfileUpdate(BaseModel):
    """Formulário de configurações"""
    name: Optional[str] = None
    monthly_income: Any = None
    savings_goal: Any = None
    plan: Optional[Plan] = None


class GoalUpdate(BaseModel):
    savings_goal: Any = None


class ManualTransactionInput(BaseModel):
    """Formulário de transação manual"""
    title: Optional[str] = None
    amount: Any = None
    type: Any = None
    category: Any = None
    date: Optional[str] = None


class TransactionTextInput(BaseModel):
    """Texto livre para classificação automática"""
    text: str = Field(..., min_length=1, description="Descrição em linguagem natural")


class AdvisorQuestion(BaseModel):
    """Pergunta ao consultor"""
    message: str = Field(..., min_length=1, description="Texto da pergunta")
