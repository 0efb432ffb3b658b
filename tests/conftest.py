"""
Shared fixtures: the app runs against an in-memory SQLite database built from
the ORM models, with get_db overridden to hand out sessions bound to it.
"""

import os

# Must be set before the app modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest-unused.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEBUG_ROUTES_ENABLED"] = "true"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.security_utils import create_session_token, hash_password_bcrypt  # noqa: E402

TEST_PASSWORD = "segredo123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def lenient_client(db_session):
    """Client that returns 500 responses instead of re-raising server errors"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def usuario(db_session):
    user = models.Usuario(
        login="recepcao",
        senha=hash_password_bcrypt(TEST_PASSWORD),
        nome="Maria Recepção",
        email="recepcao@clinica.com.br",
        status=models.STATUS_ACTIVE,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def auth_headers(usuario):
    token = create_session_token(usuario.login, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def clinic(db_session):
    """
    One allocation, one plan (20% discount) on billing table 1, one procedure
    priced 100.00 for NSOCIO clients and one NSOCIO client linked to the plan.
    """
    unidade = models.Unidade(id=1, nome="Unidade Centro")
    especialidade = models.Especialidade(id=1, nome="Cardiologia")
    prestador = models.Prestador(id=1, nome="Dr. João")
    tabela = models.TabelaFaturamento(id=1, nome="Tabela Padrão")
    db_session.add_all([unidade, especialidade, prestador, tabela])
    db_session.flush()

    alocacao = models.Alocacao(id=1, unidade_id=1, especialidade_id=1, prestador_id=1)
    convenio = models.Convenio(id=1, nome="Plano Ouro", desconto=Decimal("20.00"), tabela_faturamento_id=1)
    procedimento = models.Procedimento(id=1, nome="Consulta Cardiológica", codigo="10101012")
    db_session.add_all([alocacao, convenio, procedimento])
    db_session.flush()

    db_session.add_all(
        [
            models.ValorProcedimento(
                procedimento_id=1, tipo="NSOCIO", tabela_faturamento_id=1, valor=Decimal("100.00")
            ),
            models.ValorProcedimento(
                procedimento_id=1, tipo="SOCIO", tabela_faturamento_id=1, valor=Decimal("60.00")
            ),
            models.Cliente(
                id=1,
                nome="Ana Paciente",
                email="ana@example.com",
                cpf="12345678901",
                tipo="NSOCIO",
                status=models.STATUS_ACTIVE,
            ),
            models.Caixa(id=1, nome="Caixa Recepção", status=models.STATUS_ACTIVE),
            models.PlanoConta(id=7, nome="Receita de Consultas", status=models.STATUS_ACTIVE),
        ]
    )
    db_session.flush()
    db_session.add(models.ConvenioCliente(convenio_id=1, cliente_id=1, desconto=Decimal("5.00")))
    db_session.commit()
    return {"alocacao_id": 1, "convenio_id": 1, "procedimento_id": 1, "cliente_id": 1}
