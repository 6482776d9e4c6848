# backend/core/db.py
import logging
import os
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import firebase_admin
import pytz
from firebase_admin import credentials, firestore
from google.cloud.firestore import FieldFilter
from pydantic import ValidationError

from core.config import LOCAL_TIMEZONE
from core.models import Appointment, BlockedTime, Technician

SALOES_COLLECTION = 'cabeleireiros'

try:
    if not firebase_admin._apps:
        # Tenta encontrar a credencial
        cred_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "credentials.json")

        # Verificação do caminho (baseado no Root Directory do Render ser 'backend')
        if not os.path.exists(cred_path):
            logging.warning(f"Credencial não encontrada em '{cred_path}', tentando 'backend/credentials.json'")
            cred_path_backend = "backend/credentials.json"
            if os.path.exists(cred_path_backend):
                cred_path = cred_path_backend

        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)
        logging.info(f"Firebase Admin SDK inicializado (a partir do db.py) com: {cred_path}")

    db = firestore.client()
except Exception as e:
    logging.error(f"Falha CRÍTICA ao inicializar Firebase no db.py: {e}")
    db = None # Define db como None se a inicialização falhar


# --- Conversão de Documentos ---
def _first(data: Dict[str, Any], *keys, default=None):
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def technician_from_doc(doc_id: str, data: Dict[str, Any]) -> Technician:
    return Technician(
        id=doc_id,
        name=_first(data, 'nome', 'name', default='Profissional'),
        avatar_url=_first(data, 'foto_url', 'avatarUrl', 'avatar_url'),
        color=_first(data, 'cor', 'color'),
    )


def appointment_from_doc(doc_id: str, data: Dict[str, Any]) -> Appointment:
    return Appointment(
        id=doc_id,
        appointment_start=data.get('startTime'),
        appointment_end=data.get('endTime'),
        duration_minutes=data.get('durationMinutes'),
        status=data.get('status') or 'scheduled',
        technician_id=_first(data, 'profissional_id', 'technicianId'),
        technician_name=_first(data, 'profissional_nome', 'technicianName'),
        client_name=_first(data, 'customerName', default='N/A'),
        service_name=_first(data, 'serviceName', default='N/A'),
        phone_number=data.get('customerPhone'),
        order_number=_first(data, 'numero_comanda', 'orderNumber'),
        is_favorite=bool(data.get('isFavorite', False)),
    )


def blocked_time_from_doc(doc_id: str, data: Dict[str, Any]) -> BlockedTime:
    return BlockedTime(
        id=doc_id,
        technician_id=_first(data, 'profissional_id', 'technicianId'),
        start_time=data.get('startTime'),
        end_time=data.get('endTime'),
        reason=_first(data, 'motivo', 'reason'),
        is_recurring=bool(_first(data, 'recorrente', 'isRecurring', default=False)),
    )


def local_day_window(day: date):
    """[00:00, 24:00) do dia no fuso do salão, para as queries por startTime."""
    tz = pytz.timezone(LOCAL_TIMEZONE)
    start = tz.localize(datetime(day.year, day.month, day.day))
    end = tz.localize(datetime.combine(day + timedelta(days=1), datetime.min.time()))
    return start, end


# --- Funções DB ---
def get_salon_id_for_owner(uid: str) -> Optional[str]:
    """Encontra o salão do dono logado (ownerUID)."""
    if db is None:
        logging.error("Firestore DB não está inicializado. get_salon_id_for_owner falhou.")
        return None
    query = db.collection(SALOES_COLLECTION).where(filter=FieldFilter('ownerUID', '==', uid)).limit(1)
    docs = list(query.stream())
    if not docs:
        logging.warning(f"Usuário {uid} sem documento de salão.")
        return None
    return docs[0].id


def get_technicians_from_db(salao_id: str) -> List[Technician]:
    if db is None:
        logging.error("Firestore DB não está inicializado. get_technicians_from_db falhou.")
        return []
    pros_ref = db.collection(SALOES_COLLECTION).document(salao_id).collection('profissionais')
    technicians = []
    for doc in pros_ref.stream():
        try:
            technicians.append(technician_from_doc(doc.id, doc.to_dict()))
        except ValidationError as e:
            logging.warning(f"Profissional {doc.id} ignorado (dados inválidos): {e}")
    return technicians


def _stream_day(salao_id: str, collection: str, day: date):
    start, end = local_day_window(day)
    ref = db.collection(SALOES_COLLECTION).document(salao_id).collection(collection)
    query = ref.where(filter=FieldFilter("startTime", ">=", start)).where(filter=FieldFilter("startTime", "<", end))
    return query.stream()


def get_appointments_for_day(salao_id: str, day: date) -> List[Appointment]:
    if db is None:
        logging.error("Firestore DB não está inicializado. get_appointments_for_day falhou.")
        return []
    appointments = []
    for doc in _stream_day(salao_id, 'agendamentos', day):
        try:
            appointments.append(appointment_from_doc(doc.id, doc.to_dict()))
        except ValidationError as e:
            logging.warning(f"Agendamento {doc.id} ignorado (dados inválidos): {e}")
    return appointments


def get_blocked_times_for_day(salao_id: str, day: date) -> List[BlockedTime]:
    if db is None:
        logging.error("Firestore DB não está inicializado. get_blocked_times_for_day falhou.")
        return []
    blocked = []
    for doc in _stream_day(salao_id, 'bloqueios', day):
        try:
            blocked.append(blocked_time_from_doc(doc.id, doc.to_dict()))
        except ValidationError as e:
            logging.warning(f"Bloqueio {doc.id} ignorado (dados inválidos): {e}")
    return blocked
