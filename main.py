"""
Painel de finanças pessoais com IA: API da camada de visualização
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
import uvicorn

from config.settings import get_settings
from config.logging_config import setup_logging
from models.schemas import (
    AdvisorQuestion,
    ChatMessage,
    ChatRole,
    DashboardView,
    GoalUpdate,
    LoginRequest,
    ManualTransactionInput,
    ProfileUpdate,
    Transaction,
    TransactionTextInput,
    UserProfile,
)
from services import ledger
from services.advisor_service import advisor_service
from services.finance_session import FinanceSession


setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerenciar lifecycle da aplicação"""
    logger.info("🔄 Iniciando FinAI Dashboard...")

    app.state.session = FinanceSession.with_seed_data()
    if not advisor_service.is_configured:
        logger.warning("⚠️ OPENAI_API_KEY não configurada, recursos de IA usarão respostas padrão")

    yield

    logger.info("👋🏻 Aplicação finalizada")


app = FastAPI(
    title=settings.app_name,
    description="Painel de finanças pessoais com consultor de IA",
    version="1.0.0",
    lifespan=lifespan
)


def get_session(request: Request) -> FinanceSession:
    return request.app.state.session


def require_login(session: FinanceSession = Depends(get_session)) -> FinanceSession:
    """Bloquear telas internas antes do cadastro"""
    if not session.logged_in:
        raise HTTPException(status_code=403, detail="Faça login para continuar")
    return session


@app.get("/")
async def root():
    """Endpoint de health check"""
    return {
        "message": "FinAI Dashboard está funcionando!",
        "version": "1.0.0",
        "status": "healthy"
    }


@app.get("/health")
async def health_check(session: FinanceSession = Depends(get_session)):
    """Health check detalhado"""
    return {
        "status": "healthy",
        "ai_status": "configured" if advisor_service.is_configured else "unconfigured",
        "transactions": len(session.transactions)
    }


@app.post("/login", response_model=UserProfile)
async def login(body: LoginRequest, session: FinanceSession = Depends(get_session)):
    return session.login(body.name, body.monthly_income, body.savings_goal)


@app.get("/profile", response_model=UserProfile)
async def get_profile(session: FinanceSession = Depends(require_login)):
    return session.profile


@app.put("/profile", response_model=UserProfile)
async def update_profile(body: ProfileUpdate, session: FinanceSession = Depends(require_login)):
    """Substituir o perfil; campos omitidos mantêm o valor atual"""
    current = session.profile
    profile = UserProfile(
        name=body.name if body.name is not None else current.name,
        monthly_income=body.monthly_income if body.monthly_income is not None else current.monthly_income,
        savings_goal=body.savings_goal if body.savings_goal is not None else current.savings_goal,
        plan=body.plan or current.plan,
    )
    return session.update_profile(profile)


@app.put("/profile/goal", response_model=UserProfile)
async def update_goal(body: GoalUpdate, session: FinanceSession = Depends(require_login)):
    return session.update_savings_goal(body.savings_goal)


@app.post("/profile/upgrade", response_model=UserProfile)
async def upgrade_plan(session: FinanceSession = Depends(require_login)):
    return session.upgrade_plan()


@app.get("/transactions", response_model=List[Transaction])
async def list_transactions(
    limit: Optional[int] = Query(default=None, ge=0),
    session: FinanceSession = Depends(require_login),
):
    """Transações mais recentes primeiro"""
    if limit is None:
        limit = len(session.transactions)
    return ledger.recent_transactions(session.transactions, limit)


@app.post("/transactions", response_model=Transaction, status_code=201)
async def add_transaction(body: ManualTransactionInput, session: FinanceSession = Depends(require_login)):
    return session.add_manual_transaction(
        title=body.title,
        amount=body.amount,
        transaction_type=body.type,
        category=body.category,
        transaction_date=body.date,
    )


@app.post("/transactions/ai", response_model=Transaction, status_code=201)
async def add_transaction_from_text(body: TransactionTextInput, session: FinanceSession = Depends(require_login)):
    """Classificar texto livre com IA e incluir a transação"""
    draft = await advisor_service.parse_transaction_input(body.text)
    return session.add_from_draft(draft)


@app.get("/dashboard", response_model=DashboardView)
async def dashboard(
    window: Optional[int] = Query(default=None, ge=0),
    session: FinanceSession = Depends(require_login),
):
    if window is None:
        window = settings.trend_window_days
    return session.dashboard(window=window, recent_limit=settings.recent_transactions_limit)


@app.get("/advisor/messages", response_model=List[ChatMessage])
async def advisor_messages(session: FinanceSession = Depends(require_login)):
    return session.messages


@app.post("/advisor", response_model=ChatMessage)
async def ask_advisor(body: AdvisorQuestion, session: FinanceSession = Depends(require_login)):
    """Enviar pergunta ao consultor e registrar as duas mensagens"""
    session.add_message(ChatRole.USER, body.message)
    answer = await advisor_service.get_financial_advice(session.transactions, session.profile, body.message)
    return session.add_message(ChatRole.MODEL, answer)


@app.post("/report")
async def generate_report(session: FinanceSession = Depends(require_login)):
    report = await advisor_service.generate_report(session.transactions)
    return {"report": report}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
