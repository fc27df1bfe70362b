from fastapi import FastAPI
from datetime import datetime
import logging

from nutrilog.api.routes import meals, statistics
from nutrilog.api.api_ai import router as ai_router
from nutrilog.utilities.config import DEBUG, DATA_DIR

# Logging
logger = logging.getLogger("nutrilog_app")

# Initialize FastAPI app
app = FastAPI(title="Nutrilog Meal & Statistics API", debug=DEBUG)

# Include routers
app.include_router(meals.router)
app.include_router(statistics.router)
app.include_router(ai_router)


@app.on_event("startup")
def _log_startup():
    logger.info("Nutrilog API started (data dir: %s, debug: %s)", DATA_DIR, DEBUG)


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "storage": "json-file",
    }
