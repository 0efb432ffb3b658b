"""
SQLAlchemy models for the legacy clinic schema.

Table and column names match the MySQL database shared with the PHP
application, so nothing here is created or migrated by this service.
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

STATUS_ACTIVE = "Ativo"


class Usuario(Base):
    __tablename__ = "usuarios"

    login = Column(String(100), primary_key=True)
    senha = Column(String(255), nullable=False)  # bcrypt, $2y$ when written by PHP
    nome = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)


class UsuarioGrupo(Base):
    __tablename__ = "usuariogrupo"

    id = Column(Integer, primary_key=True)
    usuario_login = Column(String(100), ForeignKey("usuarios.login"), index=True, nullable=False)
    grupo_id = Column(Integer, nullable=False)


class UsuarioSistema(Base):
    __tablename__ = "usuario_sistema"

    id = Column(Integer, primary_key=True)
    usuarios_login = Column(String(100), ForeignKey("usuarios.login"), index=True, nullable=False)
    sistemas_id = Column(Integer, nullable=False)
    nivel = Column(String(50), nullable=True)


class Cliente(Base):
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    dtnascimento = Column(Date, nullable=True)
    sexo = Column(String(20), nullable=True)
    tipo = Column(String(20), nullable=True)  # SOCIO, NSOCIO, ... drives procedure pricing
    cpf = Column(String(14), nullable=True, index=True)
    cep = Column(String(9), nullable=True)
    logradouro = Column(String(255), nullable=True)
    numero = Column(String(20), nullable=True)
    bairro = Column(String(100), nullable=True)
    cidade = Column(String(100), nullable=True)
    uf = Column(String(2), nullable=True)
    telefone1 = Column(String(20), nullable=True)
    telefone2 = Column(String(20), nullable=True)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)

    convenios = relationship(
        "ConvenioCliente", back_populates="cliente", cascade="all, delete-orphan"
    )


class TabelaFaturamento(Base):
    __tablename__ = "tabela_faturamentos"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=False)


class Convenio(Base):
    """Insurance plan, linked to at most one billing table"""

    __tablename__ = "convenios"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(255), nullable=False)
    desconto = Column(Numeric(5, 2), nullable=True)  # percent, 0-100
    tabela_faturamento_id = Column(Integer, ForeignKey("tabela_faturamentos.id"), nullable=True)

    tabela_faturamento = relationship("TabelaFaturamento")


class ConvenioCliente(Base):
    __tablename__ = "convenios_clientes"

    id = Column(Integer, primary_key=True)
    convenio_id = Column(Integer, ForeignKey("convenios.id"), nullable=False)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), index=True, nullable=False)
    desconto = Column(Numeric(5, 2), nullable=True)

    cliente = relationship("Cliente", back_populates="convenios")
    convenio = relationship("Convenio")


class Procedimento(Base):
    __tablename__ = "procedimentos"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(255), nullable=False)
    codigo = Column(String(50), nullable=True)


class ValorProcedimento(Base):
    """Base price of a procedure for a client type inside one billing table"""

    __tablename__ = "valor_procedimentos"

    id = Column(Integer, primary_key=True)
    procedimento_id = Column(Integer, ForeignKey("procedimentos.id"), index=True, nullable=False)
    tipo = Column(String(20), nullable=False)
    tabela_faturamento_id = Column(Integer, ForeignKey("tabela_faturamentos.id"), nullable=False)
    valor = Column(Numeric(10, 2), nullable=False)

    procedimento = relationship("Procedimento")


class Unidade(Base):
    __tablename__ = "unidades"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=False)


class Especialidade(Base):
    __tablename__ = "especialidades"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=False)


class Prestador(Base):
    __tablename__ = "prestadores"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=False)


class Alocacao(Base):
    """Binds a provider to a unit and a specialty"""

    __tablename__ = "alocacoes"

    id = Column(Integer, primary_key=True)
    unidade_id = Column(Integer, ForeignKey("unidades.id"), nullable=False)
    especialidade_id = Column(Integer, ForeignKey("especialidades.id"), nullable=False)
    prestador_id = Column(Integer, ForeignKey("prestadores.id"), nullable=False)

    unidade = relationship("Unidade")
    especialidade = relationship("Especialidade")
    prestador = relationship("Prestador")


class Expediente(Base):
    """Provider shift; appointment slots are generated from it"""

    __tablename__ = "expedientes"

    id = Column(Integer, primary_key=True, index=True)
    dtinicio = Column(Date, nullable=False)
    dtfinal = Column(Date, nullable=False)
    hinicio = Column(String(8), nullable=False)  # HH:MM
    hfinal = Column(String(8), nullable=False)
    intervalo = Column(Integer, nullable=False)  # minutes
    semana = Column(String(20), nullable=False)  # weekday label, e.g. "Segunda"
    alocacao_id = Column(Integer, ForeignKey("alocacoes.id"), nullable=False)
    createdAt = Column(DateTime, server_default=func.now())
    updatedAt = Column(DateTime, server_default=func.now(), onupdate=func.now())

    alocacao = relationship("Alocacao")


class Agenda(Base):
    """Appointment slot; provider/unit/specialty are copied from the allocation"""

    __tablename__ = "agendas"

    id = Column(Integer, primary_key=True, index=True)
    dtagenda = Column(DateTime, nullable=False, index=True)
    situacao = Column(String(30), nullable=False)  # LIVRE, AGENDADO, ...
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=True)
    convenio_id = Column(Integer, ForeignKey("convenios.id"), nullable=True)
    procedimento_id = Column(Integer, ForeignKey("procedimentos.id"), nullable=True)
    expediente_id = Column(Integer, ForeignKey("expedientes.id"), nullable=True, index=True)
    prestador_id = Column(Integer, ForeignKey("prestadores.id"), nullable=True)
    unidade_id = Column(Integer, ForeignKey("unidades.id"), nullable=True)
    especialidade_id = Column(Integer, ForeignKey("especialidades.id"), nullable=True)
    tipo = Column(String(30), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Caixa(Base):
    __tablename__ = "caixas"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=True)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)


class PlanoConta(Base):
    __tablename__ = "plano_contas"

    id = Column(Integer, primary_key=True)
    nome = Column(String(255), nullable=True)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)


class Lancamento(Base):
    """Billing line item"""

    __tablename__ = "lancamentos"

    id = Column(Integer, primary_key=True, index=True)
    valor = Column(Numeric(10, 2), nullable=True)
    descricao = Column(Text, nullable=True)
    data_lancamento = Column(DateTime, nullable=False)
    tipo = Column(String(20), nullable=False)  # ENTRADA, SAIDA
    forma_pagamento = Column(String(50), nullable=True)
    status_pagamento = Column(String(20), nullable=True)  # PENDENTE, PAGO
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=True)
    plano_conta_id = Column(Integer, ForeignKey("plano_contas.id"), nullable=True)
    caixa_id = Column(Integer, ForeignKey("caixas.id"), nullable=True)
    agenda_id = Column(Integer, ForeignKey("agendas.id"), nullable=True, index=True)
    usuario_id = Column(String(100), nullable=True)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=True)
