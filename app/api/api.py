from fastapi import APIRouter
from app.api.routes.rescuers import router as rescuers_router
from app.api.routes.tickets import router as tickets_router
from app.api.routes.chat import router as chat_router

api_router = APIRouter(prefix="/api")
api_router.include_router(rescuers_router)
api_router.include_router(tickets_router)
api_router.include_router(chat_router)
