import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RQ_QUEUE_NAME: str = os.getenv("RQ_QUEUE_NAME", "relayer")

    # Request store layout: <prefix>operator and <prefix>request:<requester>
    STORE_KEY_PREFIX: str = os.getenv("STORE_KEY_PREFIX", "bridge:")

    # Per-requester write lock (SET NX PX spin)
    LOCK_TTL_MS: int = int(os.getenv("LOCK_TTL_MS", "5000"))
    LOCK_RETRY_COUNT: int = int(os.getenv("LOCK_RETRY_COUNT", "5"))
    LOCK_RETRY_DELAY_SEC: float = float(os.getenv("LOCK_RETRY_DELAY_SEC", "0.1"))

    # Identity and funding are injected by the transport, never read from ambient state.
    CALLER_HEADER: str = os.getenv("CALLER_HEADER", "x-caller-id")
    ATTACHED_VALUE_HEADER: str = os.getenv("ATTACHED_VALUE_HEADER", "x-attached-value")

    # Relayer notification. Empty URL disables enqueueing entirely.
    RELAYER_CALLBACK_URL: str = os.getenv("RELAYER_CALLBACK_URL", "")
    RELAYER_TIMEOUT_SEC: float = float(os.getenv("RELAYER_TIMEOUT_SEC", "5"))
    RELAYER_EVENT_VERSION: str = os.getenv("RELAYER_EVENT_VERSION", "1.0.0")

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Security & Privacy
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

settings = Settings()
