# backend/services/time_axis.py
from datetime import date, datetime, timedelta
from typing import Iterator, List, Union

import pytz

from core.models import GridConfig, TimeSlot


def get_timezone(config: GridConfig):
    return pytz.timezone(config.timezone)


def day_start(day: date, config: GridConfig) -> datetime:
    """O início do eixo (D às H0:00) já com o fuso do salão."""
    tz = get_timezone(config)
    return tz.normalize(tz.localize(datetime(day.year, day.month, day.day, config.start_hour, 0)))


def shift_day(day: date, days: int) -> date:
    """Navegação do calendário: dia anterior (-1) / próximo dia (+1)."""
    return day + timedelta(days=days)


class TimeAxis:
    """Sequência de slots de um dia: D H0:00, D H0:M, ..., D H1:00.

    Os slots não ficam guardados; cada iteração recalcula a partir de
    (dia, config), então dá pra percorrer quantas vezes quiser.

    Os passos de M minutos são em tempo absoluto: em dia de troca de horário
    os horários continuam estritamente crescentes, mas o rótulo pode pular
    (01:50 -> 03:00) ou repetir (23:30 -> 23:00).
    """

    def __init__(self, day: date, config: GridConfig):
        self.day = day
        self.config = config.ensure_valid()
        self._start = day_start(day, self.config)
        self._tz = get_timezone(self.config)

    def __len__(self) -> int:
        return self.config.slots_per_day

    def __iter__(self) -> Iterator[TimeSlot]:
        for index in range(len(self)):
            yield self._slot(index)

    def __getitem__(self, index: Union[int, slice]) -> Union[TimeSlot, List[TimeSlot]]:
        if isinstance(index, slice):
            return [self._slot(i) for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("slot fora do eixo")
        return self._slot(index)

    def _slot(self, index: int) -> TimeSlot:
        moment = self._tz.normalize(self._start + timedelta(minutes=index * self.config.interval_minutes))
        return TimeSlot(
            index=index,
            time=moment,
            label=moment.strftime('%H:%M'),
            is_full_hour=moment.minute == 0,
        )

    @property
    def start(self) -> datetime:
        return self._start

    def __repr__(self) -> str:
        return f"TimeAxis({self.day.isoformat()}, {len(self)} slots)"


def generate_time_axis(day: date, config: GridConfig) -> TimeAxis:
    """Gera o eixo de horários do dia. Levanta InvalidConfiguration se a config não fechar."""
    return TimeAxis(day, config)
