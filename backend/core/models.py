# backend/core/models.py
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Union, Dict

from pydantic import BaseModel, Field, field_validator

from core.exceptions import InvalidConfiguration

ALL_TECHNICIANS = "all"


# --- Configuração da Grade ---
class GridConfig(BaseModel):
    start_hour: int = Field(8, ge=0, le=23, description="Primeira hora do eixo (inclusiva).")
    end_hour: int = Field(20, ge=0, le=24, description="Última hora do eixo (inclusiva).")
    interval_minutes: int = Field(10, description="Tamanho de cada slot em minutos.")
    slot_height_px: float = Field(25.0, gt=0, description="Altura em pixels de um slot.")
    default_duration_minutes: int = Field(60, gt=0, description="Duração usada quando o agendamento não informa o fim.")
    timezone: str = "America/Sao_Paulo"

    class Config:
        frozen = True

    def ensure_valid(self) -> "GridConfig":
        if self.interval_minutes <= 0 or 60 % self.interval_minutes != 0:
            raise InvalidConfiguration(
                f"Intervalo de {self.interval_minutes} min não divide 60 igualmente."
            )
        if self.end_hour < self.start_hour:
            raise InvalidConfiguration(
                f"Hora final ({self.end_hour}) anterior à hora inicial ({self.start_hour})."
            )
        return self

    @property
    def slots_per_day(self) -> int:
        return ((self.end_hour - self.start_hour) * 60 // self.interval_minutes) + 1


class TimeSlot(BaseModel):
    index: int
    time: datetime
    label: str # HH:MM
    is_full_hour: bool # Linha mais forte na grade

    class Config:
        frozen = True


# --- Entidades da Agenda ---
class Technician(BaseModel):
    id: str
    name: str
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
    color: Optional[str] = None

    class Config:
        populate_by_name = True


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class Appointment(BaseModel):
    id: str
    appointment_start: datetime = Field(..., alias="appointmentStart")
    appointment_end: Optional[datetime] = Field(None, alias="appointmentEnd")
    duration_minutes: Optional[int] = Field(None, alias="durationMinutes", description="Duração do serviço, usada quando não há fim explícito.")
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    technician_id: str = Field(..., alias="technicianId")
    technician_name: Optional[str] = Field(None, alias="technicianName")
    client_name: str = Field("N/A", alias="clientName")
    service_name: str = Field("N/A", alias="serviceName")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    order_number: Optional[str] = Field(None, alias="orderNumber")
    is_favorite: bool = Field(False, alias="isFavorite")

    class Config:
        populate_by_name = True

    def resolved_end(self, default_minutes: int) -> datetime:
        """Fim do agendamento: explícito, senão início + duração do serviço, senão início + padrão."""
        if self.appointment_end is not None:
            return self.appointment_end
        minutes = self.duration_minutes if self.duration_minutes else default_minutes
        return self.appointment_start + timedelta(minutes=minutes)


class BlockedTime(BaseModel):
    id: str
    technician_id: str = Field(..., alias="technicianId")
    start_time: datetime = Field(..., alias="startTime")
    end_time: datetime = Field(..., alias="endTime")
    reason: Optional[str] = None
    is_recurring: bool = Field(False, alias="isRecurring")

    class Config:
        populate_by_name = True


# --- Filtros de Exibição ---
class GridFilters(BaseModel):
    selected_date: date = Field(..., alias="selectedDate")
    technician_scope: str = Field(ALL_TECHNICIANS, alias="technicianScope", description="'all' ou o ID de um profissional.")
    hide_blocked_times: bool = Field(False, alias="hideBlockedTimes")

    class Config:
        populate_by_name = True

    @field_validator('technician_scope', mode='after')
    @classmethod
    def scope_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("technician_scope não pode ser vazio (use 'all').")
        return value


# --- Layout ---
class LayoutKind(str, Enum):
    APPOINTMENT = "appointment"
    BLOCKED = "blocked"


class SlotPosition(BaseModel):
    offset_slots: float
    height_slots: float

    class Config:
        frozen = True


class LayoutEntry(BaseModel):
    kind: LayoutKind
    entity: Union[Appointment, BlockedTime]
    offset_slots: float
    height_slots: float

    @property
    def position(self) -> SlotPosition:
        return SlotPosition(offset_slots=self.offset_slots, height_slots=self.height_slots)


class SkippedEntity(BaseModel):
    kind: LayoutKind
    entity_id: str
    reason: str


class ColumnOccupancy(BaseModel):
    booked_minutes: float
    available_minutes: float
    blocked_minutes: float
    rate: float # Percentual (0-100)
    band: str # 'low' | 'medium' | 'high'


class ColumnLayout(BaseModel):
    technician: Technician
    entries: List[LayoutEntry] = []
    skipped: List[SkippedEntity] = []
    occupancy: Optional[ColumnOccupancy] = None


# --- Modelos de Resposta da API ---
class EntryStyle(BaseModel):
    background: str
    border: str
    label: str


class TimeSlotOut(BaseModel):
    index: int
    label: str
    is_full_hour: bool
    top_px: float


class PositionedEntry(BaseModel):
    kind: LayoutKind
    id: str
    offset_slots: float
    height_slots: float
    top_px: float
    height_px: float
    start_label: str
    end_label: str
    style: EntryStyle
    details: Dict[str, Optional[Union[str, bool]]] = {}


class ColumnOut(BaseModel):
    technician: Technician
    entries: List[PositionedEntry]
    skipped: List[SkippedEntity]
    occupancy: Optional[ColumnOccupancy] = None


class GridResponse(BaseModel):
    selected_date: date
    previous_date: date
    next_date: date
    technician_scope: str
    hide_blocked_times: bool
    slot_height_px: float
    time_axis: List[TimeSlotOut]
    columns: List[ColumnOut]


class LayoutRequest(BaseModel):
    """Corpo do POST /layout: tudo que a grade precisa, sem consultar o banco."""
    technicians: List[Technician]
    appointments: List[Appointment] = []
    blocked_times: List[BlockedTime] = Field([], alias="blockedTimes")
    filters: GridFilters

    class Config:
        populate_by_name = True
