# backend/core/exceptions.py
from typing import Optional


class AgendaError(Exception):
    """Erro base da grade de agendamentos."""


class InvalidConfiguration(AgendaError, ValueError):
    """Configuração da grade inválida (intervalo que não divide 60, horário final antes do inicial...)."""


class InvalidInterval(AgendaError, ValueError):
    """Agendamento ou bloqueio com fim <= início (depois de projetado no dia)."""

    def __init__(self, reason: str, entity_id: Optional[str] = None):
        self.reason = reason
        self.entity_id = entity_id
        prefix = f"[{entity_id}] " if entity_id else ""
        super().__init__(f"{prefix}{reason}")
