# backend/routers/agenda_routes.py
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, Query, status

from core.auth import get_current_salon_id, get_current_user
from core.config import load_grid_config
from core.db import get_appointments_for_day, get_blocked_times_for_day, get_technicians_from_db
from core.models import (
    ALL_TECHNICIANS, ColumnLayout, ColumnOut, EntryStyle, GridConfig, GridFilters,
    GridResponse, LayoutEntry, LayoutKind, LayoutRequest, PositionedEntry, TimeSlotOut
)
from services import grid_layout, status_styles
from services.intervals import slots_to_pixels, wall_clock
from services.time_axis import generate_time_axis, shift_day

# Carregada uma vez no startup; config inválida derruba a API aqui mesmo
GRID_CONFIG = load_grid_config()

router = APIRouter(
    prefix="/admin/agenda",
    tags=["Agenda"],
    dependencies=[Depends(get_current_user)]
)


def get_grid_config() -> GridConfig:
    return GRID_CONFIG


def _parse_date(date_str: Optional[str], config: GridConfig) -> date:
    if not date_str:
        return datetime.now(pytz.timezone(config.timezone)).date()
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Data inválida. Use o formato YYYY-MM-DD.")


# --- Montagem da Resposta ---
def _time_axis_out(day: date, config: GridConfig) -> List[TimeSlotOut]:
    return [
        TimeSlotOut(
            index=slot.index,
            label=slot.label,
            is_full_hour=slot.is_full_hour,
            top_px=slot.index * config.slot_height_px,
        )
        for slot in generate_time_axis(day, config)
    ]


def _positioned_entry(entry: LayoutEntry, config: GridConfig) -> PositionedEntry:
    tz = pytz.timezone(config.timezone)
    entity = entry.entity
    if entry.kind == LayoutKind.APPOINTMENT:
        start, end = entity.appointment_start, entity.resolved_end(config.default_duration_minutes)
        style = status_styles.style_for_status(entity.status)
        details = {
            "clientName": entity.client_name,
            "serviceName": entity.service_name,
            "phoneNumber": entity.phone_number,
            "orderNumber": entity.order_number,
            "technicianName": entity.technician_name,
            "status": entity.status.value,
            "isFavorite": entity.is_favorite,
        }
    else:
        start, end = entity.start_time, entity.end_time
        style = status_styles.style_for_blocked(entity.is_recurring)
        details = {
            "reason": entity.reason or status_styles.DEFAULT_BLOCK_REASON,
            "isRecurring": entity.is_recurring,
        }

    top_px, height_px = slots_to_pixels(entry.position, config.slot_height_px)
    return PositionedEntry(
        kind=entry.kind,
        id=entity.id,
        offset_slots=entry.offset_slots,
        height_slots=entry.height_slots,
        top_px=top_px,
        height_px=height_px,
        start_label=wall_clock(start, tz).strftime('%H:%M'),
        end_label=wall_clock(end, tz).strftime('%H:%M'),
        style=style,
        details=details,
    )


def _column_out(column: ColumnLayout, config: GridConfig) -> ColumnOut:
    return ColumnOut(
        technician=column.technician,
        entries=[_positioned_entry(entry, config) for entry in column.entries],
        skipped=column.skipped,
        occupancy=column.occupancy,
    )


def build_grid_response(columns: List[ColumnLayout], filters: GridFilters, config: GridConfig) -> GridResponse:
    day = filters.selected_date
    return GridResponse(
        selected_date=day,
        previous_date=shift_day(day, -1),
        next_date=shift_day(day, 1),
        technician_scope=filters.technician_scope,
        hide_blocked_times=filters.hide_blocked_times,
        slot_height_px=config.slot_height_px,
        time_axis=_time_axis_out(day, config),
        columns=[_column_out(column, config) for column in columns],
    )


# --- Rotas ---
@router.get("/eixo", response_model=List[TimeSlotOut])
def get_time_axis(
    date: Optional[str] = Query(None, description="Dia no formato YYYY-MM-DD (padrão: hoje)"),
    config: GridConfig = Depends(get_grid_config),
):
    """Eixo de horários do dia (08:00 ... 20:00 de 10 em 10 min, por padrão)."""
    day = _parse_date(date, config)
    return _time_axis_out(day, config)


@router.get("/grade", response_model=GridResponse)
def get_schedule_grid(
    date: Optional[str] = Query(None, description="Dia no formato YYYY-MM-DD (padrão: hoje)"),
    profissional: str = Query(ALL_TECHNICIANS, description="'all' ou o ID do profissional"),
    ocultar_bloqueios: bool = Query(False),
    salao_id: str = Depends(get_current_salon_id),
    config: GridConfig = Depends(get_grid_config),
):
    """
    Grade do dia: busca profissionais, agendamentos e bloqueios do salão e
    devolve cada coluna já posicionada (offset/altura em slots e em pixels).
    """
    day = _parse_date(date, config)
    filters = GridFilters(
        selected_date=day,
        technician_scope=profissional or ALL_TECHNICIANS,
        hide_blocked_times=ocultar_bloqueios,
    )
    logging.info(f"Montando grade do salão {salao_id} para {day.isoformat()} (profissional={filters.technician_scope})")

    try:
        technicians = get_technicians_from_db(salao_id)
        appointments = get_appointments_for_day(salao_id, day)
        blocked_times = [] if filters.hide_blocked_times else get_blocked_times_for_day(salao_id, day)
    except Exception:
        logging.exception(f"Erro ao buscar dados da agenda para {salao_id}:")
        raise HTTPException(status_code=500, detail="Erro interno ao buscar dados da agenda.")

    if filters.technician_scope != ALL_TECHNICIANS and not any(t.id == filters.technician_scope for t in technicians):
        raise HTTPException(status_code=404, detail="Profissional não encontrado")

    columns = grid_layout.layout_grid(technicians, appointments, blocked_times, filters, config)
    return build_grid_response(columns, filters, config)


@router.post("/layout", response_model=GridResponse)
def compute_layout(
    body: LayoutRequest,
    config: GridConfig = Depends(get_grid_config),
):
    """Mesma grade do GET /grade, mas com os dados vindos no corpo (sem consultar o banco)."""
    columns = grid_layout.layout_grid(
        body.technicians, body.appointments, body.blocked_times, body.filters, config
    )
    return build_grid_response(columns, body.filters, config)


@router.get("/status-estilos", response_model=Dict[str, EntryStyle])
def get_status_styles():
    return status_styles.STATUS_STYLES
