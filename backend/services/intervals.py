# backend/services/intervals.py
"""
Conversão de intervalos (início, fim) em posição vertical na coluna do profissional.

A projeção no dia usa o "horário de parede" do salão; offset e altura são
medidos em tempo absoluto a partir do início do eixo, igual aos passos do
eixo, então as entradas continuam alinhadas em dia de troca de horário. O
resultado é em unidades de slot (float, sem arredondar); quem desenha
multiplica pela altura do slot em pixels.

Pré-condição: intervalos de um único dia, sem atravessar a meia-noite (um fim
às 00:00 do dia seguinte vale como 24:00). Só a hora do dia é usada; a data
gravada no banco é descartada e o intervalo é projetado no dia exibido.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from core.exceptions import InvalidInterval
from core.models import SlotPosition


def _localize(tz, naive: datetime) -> datetime:
    if hasattr(tz, 'localize'): # pytz
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def _zone_of(moment: datetime):
    """Recupera o fuso 'de verdade' de um datetime localizado com pytz."""
    tzinfo = moment.tzinfo
    if tzinfo is None:
        return None
    zone = getattr(tzinfo, 'zone', None)
    if zone:
        return pytz.timezone(zone)
    return tzinfo


def to_local(moment: datetime, tz) -> datetime:
    """Datetime com fuso -> convertido para o fuso do salão. Sem fuso -> assume hora local."""
    if tz is None:
        return moment.replace(tzinfo=None) if moment.tzinfo else moment
    if moment.tzinfo is None:
        return _localize(tz, moment)
    return moment.astimezone(tz)


def wall_clock(moment: datetime, tz) -> datetime:
    """Hora local 'de parede', sem fuso (base da projeção no dia)."""
    return to_local(moment, tz).replace(tzinfo=None)


def normalize_to_day(moment: datetime, day: date, tz) -> datetime:
    """Mantém só a hora do dia de `moment` e a projeta em `day`."""
    local = wall_clock(moment, tz)
    naive = datetime.combine(day, local.time())
    if tz is None:
        return naive
    return _localize(tz, naive)


def _ends_at_next_midnight(start: datetime, end: datetime, tz) -> bool:
    wall_start, wall_end = wall_clock(start, tz), wall_clock(end, tz)
    return wall_end.time() == time(0) and wall_end.date() == wall_start.date() + timedelta(days=1)


def interval_to_offset(
    start: datetime,
    end: datetime,
    day_start: datetime,
    interval_minutes: int,
    entity_id: Optional[str] = None,
    tz=None,
) -> SlotPosition:
    """
    offset = (início projetado - início do eixo) / M
    altura = (fim projetado - início projetado) / M

    Levanta InvalidInterval se fim <= início, antes ou depois da projeção no
    dia (ex.: intervalo que atravessa a meia-noite).
    """
    if tz is None:
        tz = _zone_of(day_start)

    if wall_clock(end, tz) <= wall_clock(start, tz):
        raise InvalidInterval(
            f"fim ({end.isoformat()}) não é posterior ao início ({start.isoformat()})",
            entity_id=entity_id,
        )

    axis_start = to_local(day_start, tz)
    day = wall_clock(day_start, tz).date()
    norm_start = normalize_to_day(start, day, tz)
    norm_end = normalize_to_day(end, day, tz)
    if _ends_at_next_midnight(start, end, tz):
        norm_end = normalize_to_day(end, day + timedelta(days=1), tz)

    if norm_end <= norm_start:
        raise InvalidInterval(
            f"intervalo atravessa a meia-noite ({start.isoformat()} -> {end.isoformat()})",
            entity_id=entity_id,
        )

    slot_seconds = interval_minutes * 60
    offset_slots = (norm_start - axis_start).total_seconds() / slot_seconds
    height_slots = (norm_end - norm_start).total_seconds() / slot_seconds
    return SlotPosition(offset_slots=offset_slots, height_slots=height_slots)


def offset_to_time(offset_slots: float, day_start: datetime, interval_minutes: int) -> datetime:
    """Inverso de interval_to_offset: posição em slots -> horário no dia do eixo."""
    tz = _zone_of(day_start)
    moment = day_start + timedelta(minutes=offset_slots * interval_minutes)
    if hasattr(tz, 'normalize'): # pytz
        return tz.normalize(moment)
    return moment


def slots_to_pixels(position: SlotPosition, slot_height_px: float) -> Tuple[float, float]:
    """(top, height) em pixels."""
    return position.offset_slots * slot_height_px, position.height_slots * slot_height_px
