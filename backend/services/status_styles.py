# backend/services/status_styles.py
from typing import Dict, Optional, Union

from core.models import AppointmentStatus, EntryStyle

# Cores dos cartões da agenda (mesma paleta do painel: blue/green/red/yellow 600/700)
STATUS_STYLES: Dict[str, EntryStyle] = {
    AppointmentStatus.SCHEDULED.value: EntryStyle(background="#2563eb", border="#1d4ed8", label="Agendado"),
    AppointmentStatus.PENDING.value: EntryStyle(background="#2563eb", border="#1d4ed8", label="Pendente"),
    AppointmentStatus.COMPLETED.value: EntryStyle(background="#16a34a", border="#15803d", label="Concluído"),
    AppointmentStatus.CANCELLED.value: EntryStyle(background="#dc2626", border="#b91c1c", label="Cancelado"),
    AppointmentStatus.NO_SHOW.value: EntryStyle(background="#ca8a04", border="#a16207", label="Não compareceu"),
}

UNKNOWN_STATUS_STYLE = EntryStyle(background="#4b5563", border="#374151", label="Sem status")

BLOCKED_LABEL = "Horário Bloqueado"
RECURRING_SUFFIX = "(Bloqueio Recorrente)"
DEFAULT_BLOCK_REASON = "Motivo não especificado"


def style_for_status(status: Optional[Union[AppointmentStatus, str]]) -> EntryStyle:
    if isinstance(status, AppointmentStatus):
        status = status.value
    return STATUS_STYLES.get(status or "", UNKNOWN_STATUS_STYLE)


def style_for_blocked(is_recurring: bool = False) -> EntryStyle:
    label = f"{BLOCKED_LABEL} {RECURRING_SUFFIX}" if is_recurring else BLOCKED_LABEL
    return EntryStyle(background="#374151", border="#4b5563", label=label)
