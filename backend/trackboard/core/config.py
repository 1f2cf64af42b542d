import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))

# Database file, stored in backend/data/ by default
DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "trackboard.db"),
)

# Language preselected for every freshly cloned problem
DEFAULT_CODE_LANGUAGE: str = os.getenv("DEFAULT_CODE_LANGUAGE", "cpp")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated; "*" allows everything (local dev)
CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Bind address for `trackboard-api`
API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
