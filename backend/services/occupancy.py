# backend/services/occupancy.py
from typing import Iterable, List, Tuple

from core.models import AppointmentStatus, ColumnOccupancy, GridConfig, LayoutEntry, LayoutKind

LOW_BAND_LIMIT = 50.0
MEDIUM_BAND_LIMIT = 75.0


def occupancy_band(rate: float) -> str:
    if rate < LOW_BAND_LIMIT:
        return 'low'
    if rate < MEDIUM_BAND_LIMIT:
        return 'medium'
    return 'high'


def _clip(offset: float, height: float, window: float) -> Tuple[float, float]:
    return max(0.0, offset), min(window, offset + height)


def _merged_length(spans: List[Tuple[float, float]]) -> float:
    total = 0.0
    current_start = current_end = None
    for start, end in sorted(spans):
        if end <= start:
            continue
        if current_end is None or start > current_end:
            if current_end is not None:
                total += current_end - current_start
            current_start, current_end = start, end
        else:
            current_end = max(current_end, end)
    if current_end is not None:
        total += current_end - current_start
    return total


def column_occupancy(entries: Iterable[LayoutEntry], config: GridConfig, consider_blocked: bool = True) -> ColumnOccupancy:
    """
    Taxa de ocupação de uma coluna no expediente do eixo (H0 até H1).

    Ocupado = agendamentos não cancelados (sobreposições contam uma vez só).
    Disponível = expediente menos os bloqueios, quando eles entram no cálculo.
    """
    window = float(config.slots_per_day - 1)
    booked_spans = []
    blocked_spans = []
    for entry in entries:
        span = _clip(entry.offset_slots, entry.height_slots, window)
        if entry.kind == LayoutKind.BLOCKED:
            blocked_spans.append(span)
        elif entry.entity.status != AppointmentStatus.CANCELLED:
            booked_spans.append(span)

    minutes = config.interval_minutes
    booked = _merged_length(booked_spans) * minutes
    blocked = _merged_length(blocked_spans) * minutes
    available = window * minutes
    if consider_blocked:
        available = max(0.0, available - blocked)

    rate = min(100.0, booked / available * 100) if available > 0 else 0.0
    return ColumnOccupancy(
        booked_minutes=booked,
        available_minutes=available,
        blocked_minutes=blocked,
        rate=round(rate, 2),
        band=occupancy_band(rate),
    )
