# studybuddy/config.py
import os
from dotenv import load_dotenv

# ---------- Load environment variables ----------
load_dotenv()

# ---------- Database ----------
MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB = os.getenv("MONGO_DB", "studybuddy")

# ---------- Identity provider ----------
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-env")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")
AUTH_URL = os.getenv("AUTH_URL", "").rstrip("/")
AUTH_SERVICE_ROLE_KEY = os.getenv("AUTH_SERVICE_ROLE_KEY", "")

# ---------- LLM gateway ----------
LLM_GATEWAY_URL = os.getenv("LLM_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
LLM_GATEWAY_API_KEY = os.getenv("LLM_GATEWAY_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "google/gemini-2.5-flash")

# ---------- Account deletion ----------
APP_URL = os.getenv("APP_URL", "http://localhost:8501").rstrip("/")
DELETION_TOKEN_TTL_MINUTES = int(os.getenv("DELETION_TOKEN_TTL_MINUTES", "60"))

# ---------- HTTP ----------
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
