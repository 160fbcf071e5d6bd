# wordsy/main.py - FastAPI application
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from wordsy import __version__
from wordsy.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Wordsy API",
    description="📚 Vocabulary learning API with adaptive mastery tracking",
    version=__version__,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Create database tables on startup
@app.on_event("startup")
async def startup():
    try:
        logger.info("🚀 Starting Wordsy API...")
        from wordsy.database import engine, Base, ensure_sqlite_directory
        import wordsy.models  # noqa: F401 - registers tables

        ensure_sqlite_directory(settings.database_url)
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables created/verified")
        settings.is_content_generation_configured()
    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")


@app.get("/")
async def root():
    """API status endpoint"""
    return {
        "message": f"📚 Wordsy API v{__version__} is running!",
        "version": __version__,
        "docs": "/docs",
        "status": "healthy",
        "features": [
            "📝 Words with types, notes and translations",
            "📁 Language tagged groups",
            "💬 Generated example sentences",
            "🧠 Generated quizzes with review of missed words",
            "📊 Mastery tracking and daily statistics"
        ]
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "wordsy-api",
        "version": __version__,
        "content_generation": bool(settings.openai_api_key)
    }


# Include routers
from wordsy.api import words, groups, quiz, stats, chat  # noqa: E402

app.include_router(words.router, prefix="/words", tags=["📝 Words"])
app.include_router(groups.router, prefix="/groups", tags=["📁 Groups"])
app.include_router(quiz.router, prefix="/quiz", tags=["🧠 Quiz System"])
app.include_router(stats.router, prefix="/stats", tags=["📊 Statistics"])
app.include_router(chat.router, prefix="/chat", tags=["💬 Chat"])
logger.info("✅ All routers included successfully")


# Error handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Global error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "status_code": 500,
            "is_success": False,
            "details": str(exc) if settings.debug else "Internal server error",
            "data": None
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("wordsy.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
