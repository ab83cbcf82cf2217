import logging

from fastapi import FastAPI

from premium_service.api.exception_handlers import register_exception_handlers
from premium_service.api.v1.router import api_router
from premium_service.core.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Guild Premium Service")

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
