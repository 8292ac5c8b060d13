from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv
import os
import sys
import logging
from middleware.jwt_auth import is_jwt_auth_configured
from routers import content, history, transcription
from services.content_service import ContentService
from services.database import close_engine, create_tables, is_database_configured
from services.history_service import HistoryService
from services.llm_client import LLMClient, create_openai_client
from services.summary_service import SummaryService
from services.transcription_service import TranscriptionService
from utils.context_utils import is_anonymous_auth_allowed

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Validate required environment variables
REQUIRED_ENV_VARS = ["OPENAI_API_KEY"]

def validate_environment():
    """Validate that all required environment variables are set."""
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        logger.error(f"Missing required environment variables: {missing}")
        sys.exit(1)
    logger.info("Environment validation passed")

def log_auth_configuration():
    """
    Log which authentication modes are active.

    Without a JWT secret and without ALLOW_ANONYMOUS_AUTH every protected
    endpoint answers 401.
    """
    if is_jwt_auth_configured():
        logger.info("JWT authentication ENABLED")
    else:
        logger.warning("JWT authentication DISABLED (JWT_SECRET missing or shorter than 32 chars)")

    if is_anonymous_auth_allowed():
        logger.warning("Anonymous authentication ENABLED - do not use in production")

# Call validation at startup
validate_environment()
log_auth_configuration()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the provider clients once and share them through app.state."""
    openai_client = create_openai_client()
    llm_client = LLMClient(openai_client)

    app.state.content_service = ContentService(llm_client)
    app.state.transcription_service = TranscriptionService(openai_client)
    app.state.summary_service = SummaryService()

    if is_database_configured():
        await create_tables()
        app.state.history_service = HistoryService()
        logger.info("Transcription history ENABLED")
    else:
        app.state.history_service = None
        logger.warning("Transcription history DISABLED (DATABASE_URL not set)")

    yield

    await openai_client.close()
    if is_database_configured():
        await close_engine()
    logger.info("Shutdown complete")


app = FastAPI(title="MumbleTasks API", lifespan=lifespan)

# Include routers
app.include_router(transcription.router)
app.include_router(content.router)
app.include_router(history.router)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "history": is_database_configured(),
        "jwt_auth": is_jwt_auth_configured(),
    }
