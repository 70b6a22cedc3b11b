import logging

from fastapi import FastAPI

from giteahook.api.webhook_routes import router as webhook_router
from giteahook.core.config import settings

logging.basicConfig(level=logging.INFO)

app = FastAPI(title=settings.PROJECT_NAME)

app.include_router(webhook_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
