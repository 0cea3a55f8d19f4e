"""
Serviço de integração com OpenAI: classificação de transações, consultor e relatórios

Nenhuma operação deste serviço propaga erro para quem chama. Sem chave
configurada, ou em qualquer falha da IA, cada operação devolve um valor
padrão fixo.
"""

import json
import re
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from loguru import logger
from openai import AsyncOpenAI

from config.settings import Settings, get_settings
from models.schemas import (
    Category,
    Transaction,
    TransactionDraft,
    TransactionType,
    UserProfile,
    category_label,
    normalize_category,
)
from services import ledger
from utils.helpers import CustomJSONEncoder, coerce_amount, format_currency, normalize_date_text


ADVICE_UNCONFIGURED_MESSAGE = "Por favor, configure sua chave de API para receber conselhos."
ADVICE_FAILURE_MESSAGE = "Ocorreu um erro ao consultar o assistente inteligente."
REPORT_UNCONFIGURED_MESSAGE = "API Key necessária para gerar relatórios."
REPORT_FAILURE_MESSAGE = "Erro ao gerar análise."

ADVISOR_SYSTEM_PROMPT = (
    "Seja um consultor financeiro brasileiro. Use Reais (R$). "
    "Seja motivador mas realista."
)

TRANSACTION_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "transaction_draft",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "amount": {"type": "number"},
                "type": {"type": "string", "enum": ["INCOME", "EXPENSE"]},
                "category": {"type": "string"},
                "date": {"type": "string"},
            },
            "required": ["title", "amount", "type", "category", "date"],
            "additionalProperties": False,
        },
    },
}


FENCE_OPEN_PATTERN = re.compile(r"^```[\w-]*[ \t]*\n?")
FENCE_CLOSE_PATTERN = re.compile(r"\n?[ \t]*```$")


class AIResponseError(ValueError):
    """Resposta da IA vazia ou fora do formato esperado"""


class AdvisorService:
    """Serviço para processamento de IA"""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self.model = self.settings.openai_model
        self._client = client

    @property
    def is_configured(self) -> bool:
        api_key = self.settings.openai_api_key
        return bool(api_key and api_key.strip())

    @property
    def client(self) -> AsyncOpenAI:
        """Cliente OpenAI, criado apenas no primeiro uso"""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    @staticmethod
    def fallback_draft(text: str, today: Optional[date] = None) -> TransactionDraft:
        """Rascunho padrão usado em qualquer falha de interpretação"""
        today = today or date.today()
        return TransactionDraft(
            title=text,
            amount=0,
            type=TransactionType.EXPENSE,
            category=Category.OTHER,
            date=today.isoformat(),
        )

    async def parse_transaction_input(self, text: str, today: Optional[date] = None) -> TransactionDraft:
        """Interpretar descrição em linguagem natural como rascunho de transação"""
        today = today or date.today()

        if not text or not text.strip():
            return self.fallback_draft(text or "", today)

        if not self.is_configured:
            logger.warning("⚠️ Chave da API ausente, usando transação padrão")
            return self.fallback_draft(text, today)

        try:
            logger.info(f"🧠 Classificando transação com {self.model}")
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": "Você interpreta mensagens sobre finanças pessoais em português brasileiro. Sempre retorne JSON válido."
                    },
                    {
                        "role": "user",
                        "content": self._create_transaction_prompt(text, today)
                    }
                ],
                response_format=TRANSACTION_RESPONSE_FORMAT,
                temperature=0.1,
                max_tokens=200
            )

            ai_response = self._response_text(response)
            logger.info(f"Resposta da IA recebida: {len(ai_response)} caracteres")

            return self._parse_ai_response(ai_response, today)

        except AIResponseError as e:
            logger.warning(f"🚨 Resposta da IA fora do formato, usando transação padrão: {e}")
        except Exception as e:
            logger.error(f"❌ Erro ao classificar transação: {e}")

        return self.fallback_draft(text, today)

    def _create_transaction_prompt(self, text: str, today: date) -> str:
        """Criar prompt de classificação de transação"""
        categories = ", ".join(category.value for category in Category)
        yesterday = (today - timedelta(days=1)).isoformat()

        prompt = f"""
Analise o seguinte texto de entrada financeira e extraia os dados em JSON.
Entrada: "{text}"
Hoje é: {today.isoformat()}

Regras:
1. Identifique se é RECEITA (INCOME) ou DESPESA (EXPENSE).
2. Categorize usando uma destas: {categories}.
3. Extraia o valor numérico. Se não houver, tente estimar ou coloque 0.
4. Extraia uma data ISO (AAAA-MM-DD). Se for 'ontem', use {yesterday}. Se não mencionar, use hoje.
5. Crie um título curto e claro.

Exemplo:
Input: "almoço no restaurante 45 hoje"
Output: {{"title": "Almoço restaurante", "amount": 45.0, "type": "EXPENSE", "category": "Alimentação", "date": "{today.isoformat()}"}}

Retorne APENAS o JSON, sem texto adicional:
"""
        return prompt

    def _parse_ai_response(self, ai_response: str, today: date) -> TransactionDraft:
        """Parsear resposta da IA em rascunho de transação"""
        cleaned = FENCE_OPEN_PATTERN.sub("", ai_response.strip())
        cleaned = FENCE_CLOSE_PATTERN.sub("", cleaned)

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise AIResponseError(f"JSON inválido: {e}") from e

        if not isinstance(data, dict):
            raise AIResponseError("Resposta não é um objeto JSON")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise AIResponseError("Campo 'title' ausente")

        category = normalize_category(data.get("category"))
        if not isinstance(category, Category):
            logger.info(f"Categoria personalizada '{category}' mantida")

        return TransactionDraft(
            title=title.strip(),
            amount=coerce_amount(data.get("amount")),
            type=TransactionType.parse(data.get("type")),
            category=category,
            date=normalize_date_text(data.get("date")) or today.isoformat(),
        )

    async def get_financial_advice(
        self,
        history: Sequence[Transaction],
        profile: UserProfile,
        message: str,
    ) -> str:
        """Responder pergunta do usuário com base no histórico financeiro"""
        if not self.is_configured:
            return ADVICE_UNCONFIGURED_MESSAGE

        try:
            context = self._create_advice_context(history, profile)

            logger.info(f"🧠 Consultando assistente com {self.model}")
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": ADVISOR_SYSTEM_PROMPT
                    },
                    {
                        "role": "user",
                        "content": f"{context}\n\nPergunta do usuário: {message}"
                    }
                ],
                temperature=0.5
            )

            answer = self._response_text(response)
            if not answer:
                raise AIResponseError("Resposta vazia do consultor")

            logger.info(f"✅ Resposta do consultor: {len(answer)} caracteres")
            return answer

        except AIResponseError as e:
            logger.warning(f"🚨 {e}")
        except Exception as e:
            logger.error(f"❌ Erro ao consultar assistente: {e}")

        return ADVICE_FAILURE_MESSAGE

    def _create_advice_context(self, history: Sequence[Transaction], profile: UserProfile) -> str:
        """Resumir dados do usuário para o consultor"""
        currency = self.settings.currency
        income = ledger.total_income(history)
        expense = ledger.total_expense(history)

        limit = self.settings.advisor_history_limit
        recent = list(history)[-limit:] if limit > 0 else []
        recent_lines = "\n".join(
            f"{t.date}: {t.title} ({format_currency(t.amount, currency)}, {category_label(t.category)}, {t.type.value})"
            for t in recent
        ) or "Nenhuma transação registrada."

        context = f"""
Você é o FinAI, um assistente financeiro pessoal empático, inteligente e organizado.
Dados do Usuário:
- Renda Mensal Declarada: {format_currency(profile.monthly_income, currency)}
- Meta de Economia: {format_currency(profile.savings_goal, currency)}
- Receitas Totais (Histórico): {format_currency(income, currency)}
- Despesas Totais (Histórico): {format_currency(expense, currency)}
- Saldo Atual: {format_currency(ledger.balance(income, expense), currency)}

Transações Recentes:
{recent_lines}

Responda à pergunta do usuário de forma clara, prática e amigável. Use formatação Markdown (negrito, listas) para facilitar a leitura.
Se o usuário perguntar sobre cortes, analise os gastos. Se perguntar conceitos, explique de forma simples.
"""
        return context

    async def generate_report(self, transactions: Sequence[Transaction]) -> str:
        """Gerar relatório financeiro em Markdown"""
        if not self.is_configured:
            return REPORT_UNCONFIGURED_MESSAGE

        try:
            tx_data = self._serialize_transactions(transactions)

            logger.info(f"🧠 Gerando relatório para {len(transactions)} transações")
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": self._create_report_prompt(tx_data)
                    }
                ],
                temperature=0.3
            )

            report = self._response_text(response)
            if not report:
                raise AIResponseError("Relatório vazio")

            logger.info(f"✅ Relatório gerado: {len(report)} caracteres")
            return report

        except AIResponseError as e:
            logger.warning(f"🚨 {e}")
        except Exception as e:
            logger.error(f"❌ Erro ao gerar relatório: {e}")

        return REPORT_FAILURE_MESSAGE

    def _create_report_prompt(self, tx_data: str) -> str:
        """Criar prompt do relatório"""
        prompt = f"""
Gere um relatório financeiro detalhado em Markdown com base nestas transações JSON: {tx_data}.

O relatório deve conter:
1. **Resumo do Período**: Total gasto vs ganho.
2. **Análise de Categorias**: Onde o usuário gastou mais.
3. **Padrões Identificados**: Gastos recorrentes ou supérfluos.
4. **Dicas de Otimização**: 3 sugestões concretas para economizar.
5. **Conclusão**: Uma frase motivadora sobre a saúde financeira.

Use ícones/emojis para deixar visualmente agradável.
"""
        return prompt

    @staticmethod
    def _serialize_transactions(transactions: Sequence[Transaction]) -> str:
        return json.dumps(
            [t.model_dump() for t in transactions],
            cls=CustomJSONEncoder,
            ensure_ascii=False,
        )

    @staticmethod
    def _response_text(response: Any) -> str:
        content = response.choices[0].message.content
        if not isinstance(content, str):
            return ""
        return content.strip()


advisor_service = AdvisorService()
