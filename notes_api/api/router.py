"""Agregador de routers de la API."""
from fastapi import APIRouter
from notes_api.api.routers import auth, health, notes, oauth

# Bajo el prefijo configurado (/api)
api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(notes.router)

# En la raíz: el redirect URI registrado en Google no lleva prefijo
oauth_router = oauth.router
