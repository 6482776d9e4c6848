# backend/services/grid_layout.py
import logging
from typing import Iterable, List, Optional, Tuple

from core.exceptions import InvalidInterval
from core.models import (
    Appointment, BlockedTime, ColumnLayout, GridConfig, GridFilters,
    LayoutEntry, LayoutKind, SkippedEntity, Technician
)
from services import agenda_filters
from services.intervals import interval_to_offset
from services.occupancy import column_occupancy
from services.time_axis import day_start, get_timezone


def _compose_column(
    technician_id: str,
    appointments: Iterable[Appointment],
    blocked_times: Iterable[BlockedTime],
    filters: GridFilters,
    config: GridConfig,
) -> Tuple[List[LayoutEntry], List[SkippedEntity]]:
    config.ensure_valid()
    tz = get_timezone(config)
    axis_start = day_start(filters.selected_date, config)

    # Filtro do dia/escopo, depois só o que é desta coluna
    apps = [
        app for app in agenda_filters.select_appointments(
            appointments, filters.selected_date, filters.technician_scope, tz
        )
        if app.technician_id == technician_id
    ]
    blocks = [
        block for block in agenda_filters.select_blocked_times(
            blocked_times, filters.selected_date, filters.technician_scope, filters.hide_blocked_times, tz
        )
        if block.technician_id == technician_id
    ]

    entries: List[LayoutEntry] = []
    skipped: List[SkippedEntity] = []

    candidates = [
        (LayoutKind.APPOINTMENT, app, app.appointment_start, app.resolved_end(config.default_duration_minutes))
        for app in apps
    ] + [
        (LayoutKind.BLOCKED, block, block.start_time, block.end_time)
        for block in blocks
    ]

    for kind, entity, start, end in candidates:
        try:
            position = interval_to_offset(
                start, end, axis_start, config.interval_minutes, entity_id=entity.id, tz=tz
            )
        except InvalidInterval as e:
            logging.warning(f"Grade: {kind.value} {entity.id} ignorado na coluna {technician_id}: {e.reason}")
            skipped.append(SkippedEntity(kind=kind, entity_id=entity.id, reason=e.reason))
            continue
        entries.append(LayoutEntry(
            kind=kind,
            entity=entity,
            offset_slots=position.offset_slots,
            height_slots=position.height_slots,
        ))

    return entries, skipped


def layout_column(
    technician_id: str,
    appointments: Iterable[Appointment],
    blocked_times: Iterable[BlockedTime],
    filters: GridFilters,
    config: Optional[GridConfig] = None,
) -> List[LayoutEntry]:
    """
    Monta a coluna de um profissional: agendamentos e bloqueios do dia já
    posicionados (offset/altura em slots). Agendamentos primeiro, depois
    bloqueios, cada grupo na ordem de entrada.

    Não resolve sobreposição: dois itens no mesmo horário saem com o mesmo
    offset e quem desenha decide o que fazer. Itens com intervalo inválido
    ficam de fora (ver build_column para a lista dos ignorados).
    """
    entries, _ = _compose_column(technician_id, appointments, blocked_times, filters, config or GridConfig())
    return entries


def build_column(
    technician: Technician,
    appointments: Iterable[Appointment],
    blocked_times: Iterable[BlockedTime],
    filters: GridFilters,
    config: Optional[GridConfig] = None,
) -> ColumnLayout:
    config = config or GridConfig()
    entries, skipped = _compose_column(technician.id, appointments, blocked_times, filters, config)
    return ColumnLayout(
        technician=technician,
        entries=entries,
        skipped=skipped,
        occupancy=column_occupancy(entries, config, consider_blocked=not filters.hide_blocked_times),
    )


def layout_grid(
    technicians: Iterable[Technician],
    appointments: Iterable[Appointment],
    blocked_times: Iterable[BlockedTime],
    filters: GridFilters,
    config: Optional[GridConfig] = None,
) -> List[ColumnLayout]:
    """Uma ColumnLayout por profissional visível no filtro ('all' = todos)."""
    config = config or GridConfig()
    appointments = list(appointments)
    blocked_times = list(blocked_times)
    return [
        build_column(tech, appointments, blocked_times, filters, config)
        for tech in agenda_filters.select_technicians(technicians, filters.technician_scope)
    ]
