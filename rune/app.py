"""
Rune Intake Assistant — Application Factory
"""

import time
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rune import settings

# ── 1. Configure logging ──
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("rune-server")

_startup_time = time.time()
logger.info("Server initialization started...")

# ── 2. Create FastAPI app ──
app = FastAPI(title="Rune Intake Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── 3. Register routers ──
from rune.routers import health, intake

app.include_router(health.router)
app.include_router(intake.router)


# ── 4. Startup event ──
@app.on_event("startup")
async def startup_event():
    """Log startup information and warm the session store"""
    logger.info("=" * 60)
    logger.info("Rune Intake Assistant Starting")
    logger.info(f"Listening on port: {settings.PORT}")
    logger.info(f"Numeric date order: {settings.DATE_ORDER}")
    logger.info(f"Total init time: {time.time() - _startup_time:.2f}s")
    logger.info("=" * 60)

    from rune.dependencies import get_session_store
    get_session_store()
