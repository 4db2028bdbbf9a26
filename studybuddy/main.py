import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studybuddy import config
from studybuddy.database.mongodb import ensure_indexes, get_db
from studybuddy.routes.account_routes import router as account_router
from studybuddy.routes.chat_routes import router as chat_router
from studybuddy.routes.session_routes import router as session_router
from studybuddy.utils.errors import StudyBuddyError

# Logging setup
logger = logging.getLogger("main")
logging.basicConfig(level=logging.INFO)


# ---------- Lifespan (startup / shutdown) ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.LLM_GATEWAY_API_KEY:
        logger.info("LLM_GATEWAY_API_KEY loaded successfully.")
    else:
        logger.error("LLM_GATEWAY_API_KEY is missing. /study-chat will fail until it is set.")

    if config.MONGO_URI:
        ensure_indexes(get_db())
    else:
        logger.warning("MONGO_URI is not set. Session and account endpoints will fail.")
    yield


# ---------- Initialize FastAPI ----------
app = FastAPI(title="StudyBuddy API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Errors are always {"error": "..."} ----------
@app.exception_handler(StudyBuddyError)
async def studybuddy_error_handler(request: Request, exc: StudyBuddyError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(status_code=500, content={"error": "An unexpected error occurred"})


# ---------- Register routers ----------
app.include_router(chat_router)                       # /study-chat
app.include_router(session_router)                    # /sessions...
app.include_router(account_router)                    # /account...


# ---------- Root health check ----------
@app.get("/")
def root():
    return {"message": "StudyBuddy API is running"}


@app.get("/health")
def health_check():
    return {
        "status": "OK",
        "database": "configured" if config.MONGO_URI else "not configured",
        "llm_gateway": "configured" if config.LLM_GATEWAY_API_KEY else "not configured",
    }


# ---------- Dev runner ----------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("studybuddy.main:app", host="0.0.0.0", port=8000, reload=True)
