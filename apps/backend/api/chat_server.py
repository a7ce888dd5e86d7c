import os
import sys
import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Set up logging first
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from setup_logging_optimized import setup_logging, get_logger

load_dotenv(override=True)
setup_logging()

# Sentry is only initialised when a DSN is configured
if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[
            FastApiIntegration(transaction_style='endpoint'),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=0.1,
        environment=os.getenv("ENV", "development"),
        send_default_pii=False,
    )

from api.middleware import RequestLoggingMiddleware, validation_error_response
from api.requests.api_ai import router as ai_router
from api.requests.api_presentations import router as presentations_router
from api.requests.api_trends import router as trends_router

logger = get_logger(__name__)

app = FastAPI(title="Deck Generator API")
app.add_exception_handler(RequestValidationError, validation_error_response)

ENVIRONMENT = (
    os.getenv("ENVIRONMENT")
    or os.getenv("ENV")
    or "development"
).lower()

allowed_origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
if ENVIRONMENT != "production":
    allowed_origins += [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time", "Content-Disposition"],
    max_age=3600,
)

app.include_router(ai_router)
app.include_router(presentations_router)
app.include_router(trends_router)


@app.get("/")
def read_root():
    return {"message": "Deck Generator API is running"}


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "9090"))

    logger.info(f"Starting Deck Generator API on http://{host}:{port}")
    uvicorn.run("api.chat_server:app", host=host, port=port, reload=ENVIRONMENT != "production", workers=1)
