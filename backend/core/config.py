# backend/core/config.py
import logging
import os
from typing import List

import pytz
from dotenv import load_dotenv
from pydantic import ValidationError

from core.exceptions import InvalidConfiguration
from core.models import GridConfig

# Único ponto que carrega o .env (no Render as variáveis já vêm do ambiente)
load_dotenv()

# --- Valores padrão da grade (mesmos da tela de agendamentos) ---
DEFAULT_START_HOUR = 8
DEFAULT_END_HOUR = 20
DEFAULT_INTERVAL_MINUTES = 10
DEFAULT_SLOT_HEIGHT_PX = 25.0
DEFAULT_DURATION_MINUTES = 60
LOCAL_TIMEZONE = os.environ.get("LOCAL_TIMEZONE", "America/Sao_Paulo")

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173", # Admin Frontend (local)
    "http://localhost:5174", # Cliente Frontend (local)
]


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise InvalidConfiguration(f"Valor inválido para {name}: '{raw}'")


def get_cors_origins() -> List[str]:
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_grid_config() -> GridConfig:
    """Monta a GridConfig a partir das variáveis de ambiente (AGENDA_*).

    Levanta InvalidConfiguration se algum valor não fizer sentido; isso é
    fatal no startup, não adianta tentar de novo.
    """
    try:
        config = GridConfig(
            start_hour=_env_number("AGENDA_START_HOUR", DEFAULT_START_HOUR, int),
            end_hour=_env_number("AGENDA_END_HOUR", DEFAULT_END_HOUR, int),
            interval_minutes=_env_number("AGENDA_INTERVAL_MINUTES", DEFAULT_INTERVAL_MINUTES, int),
            slot_height_px=_env_number("AGENDA_SLOT_HEIGHT_PX", DEFAULT_SLOT_HEIGHT_PX, float),
            default_duration_minutes=_env_number("AGENDA_DEFAULT_DURATION_MINUTES", DEFAULT_DURATION_MINUTES, int),
            timezone=os.environ.get("LOCAL_TIMEZONE", LOCAL_TIMEZONE),
        )
    except ValidationError as e:
        raise InvalidConfiguration(f"Configuração da agenda inválida: {e}")

    try:
        pytz.timezone(config.timezone)
    except pytz.UnknownTimeZoneError:
        raise InvalidConfiguration(f"Fuso horário desconhecido: '{config.timezone}'")

    config.ensure_valid()
    logging.info(
        f"Grade da agenda: {config.start_hour}h-{config.end_hour}h, "
        f"slots de {config.interval_minutes} min, fuso {config.timezone}"
    )
    return config
