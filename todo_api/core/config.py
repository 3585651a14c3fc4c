

import os
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings model.

    All configuration variables are loaded from environment variables
    with fallback defaults for development.
    """

    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./todo.db")

    # Session store
    redis_url: str = os.getenv("REDIS_URI", "redis://localhost:6379/0")
    session_secret: str = os.getenv("SESSION_SECRET", "your-session-secret-change-in-production")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "todo.sid")
    session_max_age_days: int = int(os.getenv("SESSION_MAX_AGE_DAYS", "7"))
    session_key_prefix: str = os.getenv("SESSION_KEY_PREFIX", "sess:")

    # OAuth state signing
    secret_key: str = os.getenv("SECRET_KEY", "your-super-secret-key-change-in-production")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    oauth_state_expire_minutes: int = int(os.getenv("OAUTH_STATE_EXPIRE_MINUTES", "10"))
    oauth_state_cookie_name: str = os.getenv("OAUTH_STATE_COOKIE_NAME", "oauth_state")

    # Google OAuth settings
    google_client_id: Optional[str] = os.getenv("GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = os.getenv("GOOGLE_CLIENT_SECRET")
    google_redirect_uri: str = os.getenv("GOOGLE_CALLBACK_URL", "http://localhost:3001/api/auth/google/callback")

    # Comma separated list of allowed origins
    cors_server_address: str = os.getenv("CORS_SERVER_ADDRESS", "http://localhost:3000")

    # Redirects
    unauthenticated_redirect_path: str = os.getenv("UNAUTHENTICATED_REDIRECT_PATH", "/api")
    login_success_redirect: str = os.getenv("LOGIN_SUCCESS_REDIRECT", "/api/auth/me")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_server_address.split(",") if origin.strip()]

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_days * 24 * 60 * 60


# Global settings instance
settings = Settings()
