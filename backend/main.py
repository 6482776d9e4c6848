# backend/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configuração do logging
logging.basicConfig(level=logging.INFO)

from core.config import get_cors_origins
from routers import agenda_routes

# Cria a instância principal do FastAPI
app = FastAPI(
    title="API Agenda do Salão",
    description="Grade de agendamentos e bloqueios por profissional",
    version="1.0.0"
)

# --- CONFIGURAÇÃO DO CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# --- FIM DO CORS ---


# --- INCLUSÃO DOS ROTEADORES ---
# Rotas Protegidas do Admin (grade, eixo, layout, estilos de status)
app.include_router(agenda_routes.router, prefix="/api/v1")
# --- FIM DA INCLUSÃO ---


# --- Rota Raiz Principal ---
@app.get("/", tags=["Root"])
def read_root():
    """Endpoint raiz para verificar o estado da API."""
    return {"status": "API da Agenda está online e operacional!"}
