"""
Testes básicos da aplicação
"""

import json
import logging
import pytest
from decimal import Decimal
from datetime import date

from pydantic import ValidationError

from config.settings import Settings
from config.logging_config import resolve_log_level, setup_logging
from models.schemas import (
    Category,
    ChatMessage,
    ChatRole,
    Plan,
    Transaction,
    TransactionDraft,
    TransactionType,
    UserProfile,
    category_label,
)
from utils.helpers import (
    CustomJSONEncoder,
    coerce_amount,
    day_key,
    format_currency,
    normalize_date_text,
)


class TestSchemas:
    """Testes dos schemas Pydantic"""

    def test_transaction_creation(self):
        """Testar criação de transação"""
        transaction = Transaction(
            title="Supermercado",
            amount=Decimal("25.50"),
            type=TransactionType.EXPENSE,
            category=Category.FOOD,
            date="2026-10-19"
        )

        assert transaction.title == "Supermercado"
        assert transaction.amount == Decimal("25.50")
        assert transaction.category == Category.FOOD
        assert transaction.id

    def test_amount_validation(self):
        """Testar conversão de valores digitados"""
        assert Transaction(title="Teste", amount="25,50").amount == Decimal("25.50")
        assert Transaction(title="Teste", amount="R$ 1.234,56").amount == Decimal("1234.56")
        assert Transaction(title="Teste", amount="abc").amount == Decimal("0")
        assert Transaction(title="Teste", amount=None).amount == Decimal("0")
        assert Transaction(title="Teste", amount=-45).amount == Decimal("45")

    def test_category_matching(self):
        """Testar categorias conhecidas e personalizadas"""
        assert Transaction(title="a", category="food").category == Category.FOOD
        assert Transaction(title="a", category="Alimentação").category == Category.FOOD
        assert Transaction(title="a", category="").category == Category.OTHER
        assert Transaction(title="a", category=42).category == Category.OTHER

        custom = Transaction(title="a", category="Pets")
        assert custom.category == "Pets"
        assert not isinstance(custom.category, Category)
        assert custom.is_custom_category
        assert category_label(custom.category) == "Pets"

    def test_type_parsing(self):
        """Testar tipo tolerante"""
        assert Transaction(title="a", type="income").type == TransactionType.INCOME
        assert Transaction(title="a", type="receita").type == TransactionType.INCOME
        assert Transaction(title="a", type="xyz").type == TransactionType.EXPENSE
        assert Transaction(title="a", type=None).type == TransactionType.EXPENSE

    def test_transaction_is_immutable(self):
        """Transações não podem ser alteradas depois de criadas"""
        transaction = Transaction(title="Aluguel", amount=1800)

        with pytest.raises(ValidationError):
            transaction.amount = Decimal("10")

    def test_transaction_ids_are_unique(self):
        ids = {Transaction(title="x").id for _ in range(50)}
        assert len(ids) == 50

    def test_invalid_date_is_kept(self):
        """Data inválida não impede a criação da transação"""
        transaction = Transaction(title="x", date="ontem à noite")
        assert transaction.date == "ontem à noite"

    def test_date_objects_become_iso(self):
        assert Transaction(title="x", date=date(2026, 10, 19)).date == "2026-10-19"

    def test_draft_to_transaction_default_title(self):
        draft = TransactionDraft(title="  ", amount=10)
        transaction = draft.to_transaction()

        assert transaction.title == "Despesa"
        assert transaction.amount == Decimal("10")
        assert transaction.category == Category.OTHER

    def test_title_kept_as_typed(self):
        draft = TransactionDraft(title="  almoço 45  ")

        assert draft.title == "  almoço 45  "
        assert draft.to_transaction().title == "almoço 45"

    def test_profile_from_form(self):
        """Testar cadastro com entradas inválidas"""
        profile = UserProfile.from_form("", "abc", "1000")

        assert profile.name == "Usuário"
        assert profile.monthly_income == Decimal("0")
        assert profile.savings_goal == Decimal("1000")
        assert profile.plan == Plan.FREE

    def test_chat_message(self):
        message = ChatMessage(role=ChatRole.USER, text="Posso gastar mais?")

        assert message.role == ChatRole.USER
        assert message.id
        assert message.timestamp is not None


class TestUtils:
    """Testes das funções utilitárias"""

    def test_coerce_amount(self):
        assert coerce_amount(Decimal("12.30")) == Decimal("12.30")
        assert coerce_amount(12.5) == Decimal("12.5")
        assert coerce_amount("1,234.56") == Decimal("1234.56")
        assert coerce_amount(float("nan")) == Decimal("0")
        assert coerce_amount(float("inf")) == Decimal("0")
        assert coerce_amount(True) == Decimal("0")
        assert coerce_amount([1, 2]) == Decimal("0")

    def test_coerce_amount_scientific_notation(self):
        assert coerce_amount("1e3") == Decimal("1000")
        assert coerce_amount(" 1E-3 ") == Decimal("0.001")
        assert coerce_amount("-2.5e2") == Decimal("250")
        assert coerce_amount("R$ 1e3") == Decimal("0")
        assert coerce_amount("R$ 45,90") == Decimal("45.90")

    def test_coerce_amount_out_of_range(self):
        """Valores absurdos viram zero em vez de quebrar os cálculos"""
        assert coerce_amount(10 ** 30) == Decimal("0")
        assert coerce_amount("1" + "0" * 30) == Decimal("0")
        assert coerce_amount("0." + "0" * 1000 + "1") == Decimal("0")
        assert coerce_amount(Decimal("1E+16")) == Decimal("0")
        assert coerce_amount(Decimal("1E-16")) == Decimal("0")
        assert coerce_amount(Decimal("1E+15")) == Decimal("1E+15")
        assert coerce_amount("0.01") == Decimal("0.01")

    def test_day_key(self):
        assert day_key("2026-10-19") == date(2026, 10, 19)
        assert day_key("2026-10-19T23:30:00.000Z") == date(2026, 10, 19)
        assert day_key("2026-10-19T23:30:00-03:00") == date(2026, 10, 19)
        assert day_key("19/10/2026") is None
        assert day_key("") is None
        assert day_key(None) is None

    def test_normalize_date_text(self):
        assert normalize_date_text("2026-10-19") == "2026-10-19"
        assert normalize_date_text("19/10/2026") == "2026-10-19"
        assert normalize_date_text("amanhã") is None
        assert normalize_date_text(20261019) is None

    def test_format_currency(self):
        """Testar formatação de moeda"""
        assert format_currency(25.50) == "R$ 25.50"
        assert format_currency(Decimal("1800"), "USD") == "1800.00"

    def test_json_encoder(self):
        payload = {"amount": Decimal("45.90"), "day": date(2026, 10, 19), "category": Category.FOOD}
        encoded = json.loads(json.dumps(payload, cls=CustomJSONEncoder))

        assert encoded == {"amount": 45.9, "day": "2026-10-19", "category": "Alimentação"}


class TestConfig:
    """Testes de configuração e logging"""

    def test_settings_defaults(self):
        settings = Settings(openai_api_key="", _env_file=None)

        assert settings.advisor_history_limit == 10
        assert settings.trend_window_days == 10
        assert settings.currency == "BRL"

    def test_setup_logging_creates_log_dir(self, tmp_path):
        settings = Settings(log_dir=str(tmp_path / "logs"), _env_file=None)

        log_dir = setup_logging(settings)

        assert log_dir.is_dir()

    def test_log_level_follows_debug_flag(self):
        assert resolve_log_level(Settings(debug=True, log_level="ERROR", _env_file=None)) == "DEBUG"
        assert resolve_log_level(Settings(debug=False, log_level="warning", _env_file=None)) == "WARNING"
        assert resolve_log_level(Settings(log_level="verboso", _env_file=None)) == "INFO"

    def test_setup_logging_quiets_libraries_outside_debug(self, tmp_path):
        setup_logging(Settings(log_dir=str(tmp_path / "logs"), _env_file=None))
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging(Settings(log_dir=str(tmp_path / "logs"), debug=True, _env_file=None))
        assert logging.getLogger("httpx").level == logging.DEBUG
