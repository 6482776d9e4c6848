# backend/services/agenda_filters.py
from datetime import date, datetime
from typing import Iterable, List

from core.models import ALL_TECHNICIANS, Appointment, BlockedTime, Technician
from services.intervals import to_local


def is_same_day(moment: datetime, day: date, tz) -> bool:
    """Compara a data LOCAL (fuso do salão) com o dia selecionado."""
    return to_local(moment, tz).date() == day


def matches_scope(technician_id: str, technician_scope: str) -> bool:
    # Sempre pelo ID: nome de profissional repete e muda.
    if technician_scope == ALL_TECHNICIANS:
        return True
    return technician_id == technician_scope


def select_technicians(technicians: Iterable[Technician], technician_scope: str) -> List[Technician]:
    return [tech for tech in technicians if matches_scope(tech.id, technician_scope)]


def select_appointments(
    appointments: Iterable[Appointment],
    selected_date: date,
    technician_scope: str,
    tz=None,
) -> List[Appointment]:
    """Agendamentos do dia selecionado e do(s) profissional(is) do filtro, na ordem de entrada."""
    return [
        app for app in appointments
        if is_same_day(app.appointment_start, selected_date, tz)
        and matches_scope(app.technician_id, technician_scope)
    ]


def select_blocked_times(
    blocked_times: Iterable[BlockedTime],
    selected_date: date,
    technician_scope: str,
    hide_blocked: bool,
    tz=None,
) -> List[BlockedTime]:
    """Mesmo filtro dos agendamentos; com 'ocultar bloqueios' ligado não sobra nada."""
    if hide_blocked:
        return []
    return [
        block for block in blocked_times
        if is_same_day(block.start_time, selected_date, tz)
        and matches_scope(block.technician_id, technician_scope)
    ]
