from dotenv import load_dotenv
import os

load_dotenv()  # Carrega variáveis do .env


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
DB_POOL_TIMEOUT = float(os.getenv("DB_POOL_TIMEOUT", 10))
DB_CONNECT_RETRIES = int(os.getenv("DB_CONNECT_RETRIES", 3))
DB_CONNECT_RETRY_DELAY = float(os.getenv("DB_CONNECT_RETRY_DELAY", 0.5))
DB_POOL_PREWARM = _env_bool("DB_POOL_PREWARM")
DB_BOOTSTRAP_MODE = str(os.getenv("DB_BOOTSTRAP_MODE", "off") or "off").strip().lower()
FK_DELETE_POLICY = str(os.getenv("FK_DELETE_POLICY", "restrict") or "restrict").strip().lower()
API_PREFIX = os.getenv("API_PREFIX", "/api").rstrip("/")
MAX_REQUEST_BYTES = int(os.getenv("MAX_REQUEST_BYTES", 1024 * 1024))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
CORS_ORIGIN_REGEX = os.getenv("CORS_ORIGIN_REGEX")

if DB_BOOTSTRAP_MODE not in {"off", "sync", "background"}:
    raise RuntimeError("DB_BOOTSTRAP_MODE invalida. Use 'off', 'sync' ou 'background'.")

if FK_DELETE_POLICY not in {"restrict", "cascade"}:
    raise RuntimeError("FK_DELETE_POLICY invalida. Use 'restrict' ou 'cascade'.")


def parse_cors_origins(value: str):
    if not value:
        return []
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]
