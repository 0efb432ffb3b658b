"""Scheduling domain schemas - shifts (expedientes) and appointments (agendas)"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.pagination import Pagination
from ...shared.validators import validate_time_of_day
from .slots import WEEKDAYS, time_to_minutes


class ExpedienteBase(BaseModel):
    dtinicio: date
    dtfinal: date
    hinicio: str
    hfinal: str
    intervalo: int = Field(gt=0, description="Minutes between slots")
    semana: str
    alocacao_id: int

    @field_validator("hinicio", "hfinal")
    @classmethod
    def check_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("semana")
    @classmethod
    def check_semana(cls, v):
        if v not in WEEKDAYS:
            raise ValueError(f"Dia da semana inválido: {v}")
        return v

    @model_validator(mode="after")
    def check_ranges(self):
        if self.dtfinal < self.dtinicio:
            raise ValueError("A data final deve ser igual ou posterior à data inicial")
        if time_to_minutes(self.hfinal) <= time_to_minutes(self.hinicio):
            raise ValueError("O horário final deve ser posterior ao horário inicial")
        return self


class ExpedienteCreate(ExpedienteBase):
    """Schema for creating a shift and its appointment slots"""


class ExpedienteUpdate(ExpedienteBase):
    """Schema for updating a shift; existing slots are left untouched"""


class ExpedienteResponse(BaseModel):
    id: int
    dtinicio: date
    dtfinal: date
    hinicio: str
    hfinal: str
    intervalo: int
    semana: str
    alocacao_id: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    unidade_id: Optional[int] = None
    especialidade_id: Optional[int] = None
    prestador_id: Optional[int] = None
    unidade_nome: Optional[str] = None
    especialidade_nome: Optional[str] = None
    prestador_nome: Optional[str] = None


class ExpedienteListResponse(BaseModel):
    data: list[ExpedienteResponse]
    pagination: Pagination


class ExpedienteCreated(BaseModel):
    success: bool = True
    expedienteId: int
    agendamentosCriados: int
    message: str


class AgendaResponse(BaseModel):
    id: int
    dtagenda: datetime
    situacao: str
    cliente_id: Optional[int] = None
    convenio_id: Optional[int] = None
    procedimento_id: Optional[int] = None
    expediente_id: Optional[int] = None
    prestador_id: Optional[int] = None
    unidade_id: Optional[int] = None
    especialidade_id: Optional[int] = None
    tipo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AgendaStatusUpdate(BaseModel):
    situacao: str = Field(min_length=1)


class AgendaUpdate(BaseModel):
    """Full update of an appointment"""

    dtagenda: datetime
    situacao: str = Field(min_length=1)
    cliente_id: Optional[int] = None
    convenio_id: Optional[int] = None
    procedimento_id: Optional[int] = None
    expediente_id: Optional[int] = None
    prestador_id: Optional[int] = None
    unidade_id: Optional[int] = None
    especialidade_id: Optional[int] = None
    tipo: Optional[str] = None


class AgendaStatusChanged(BaseModel):
    success: bool = True
    message: str
    oldSituacao: str
    newSituacao: str
    lancamentoCriado: bool
