import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Legacy clinic database (same schema the PHP system reads)
DATABASE_URL = os.getenv("DATABASE_URL", "mysql+pymysql://root@localhost/prevsaude")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Session tokens issued by /auth/login
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

# Client type used for pricing when the client row has none
DEFAULT_CLIENT_TYPE = os.getenv("DEFAULT_CLIENT_TYPE", "NSOCIO")

# When true, only dates matching the shift weekday ("semana") receive slots
EXPEDIENTE_FILTER_BY_WEEKDAY = os.getenv("EXPEDIENTE_FILTER_BY_WEEKDAY", "false").lower() == "true"

# Debug endpoints backing the procedure pricing test page
DEBUG_ROUTES_ENABLED = os.getenv("DEBUG_ROUTES_ENABLED", "false").lower() == "true"

# Login rate limiting
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
LOGIN_RATE_WINDOW = int(os.getenv("LOGIN_RATE_WINDOW", "300"))

# Storage retry for transient failures (lost connection, deadlock)
DB_MAX_RETRIES = int(os.getenv("DB_MAX_RETRIES", "3"))
DB_RETRY_DELAY = float(os.getenv("DB_RETRY_DELAY", "0.5"))

# Frontend base URL (Next.js panel)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
