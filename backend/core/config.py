# core/config.py
from __future__ import annotations
import os, pathlib

from dotenv import load_dotenv

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

# ------------------------------- App -------------------------------------
APP_ENV      = os.getenv("APP_ENV", "production")
HOST         = os.getenv("HOST", "127.0.0.1")
PORT         = int(os.getenv("PORT", "5000"))
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:8501")
LOG_LEVEL    = os.getenv("LOG_LEVEL", "INFO").upper()

# ------------------------------- Storage ---------------------------------
DB_ENGINE   = os.getenv("DB_ENGINE", "sqlite").lower()   # sqlite | postgres
SQLITE_PATH = os.getenv("SQLITE_PATH", str(BASE_DIR / "database.sqlite"))

PG_DBNAME = os.getenv("PGDATABASE", "expenses")
PG_USER   = os.getenv("PGUSER", "postgres")
PG_PASS   = os.getenv("PGPASSWORD", "")
PG_HOST   = os.getenv("PGHOST", "localhost")
PG_PORT   = int(os.getenv("PGPORT", "5432"))


def is_development() -> bool:
    return APP_ENV.lower() == "development"
