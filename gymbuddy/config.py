"""
Configuration module for GymBuddy backend.

Loads environment variables once at startup into an explicit Settings object.
Components receive the Settings instance (via the get_settings dependency or
as a function argument) instead of reading the environment themselves.
"""
import os
from typing import Dict, List, Optional
from dotenv import load_dotenv

# Load .env file
load_dotenv()


# Origins used by the mobile client during local development (Expo + web preview)
DEFAULT_DEV_CORS_ORIGINS = [
    "http://localhost:8080",
    "http://localhost:19006",
    "exp://localhost:19000",
    "exp://localhost:19006",
]

GYM_MATCH_POLICIES = ("prefer_match", "strict")


def _get_float(env: Dict[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")


def _get_int(env: Dict[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(
        self,
        SUPABASE_URL: str = "",
        SUPABASE_PUBLISHABLE_KEY: str = "",
        GOOGLE_API_KEY: str = "",
        GEMINI_MODEL: str = "gemini-2.0-flash",
        AI_TIMEOUT_SECONDS: float = 30.0,
        AI_MAX_RETRIES: int = 2,
        AI_RETRY_BACKOFF_SECONDS: float = 0.5,
        AI_RETRY_BACKOFF_MAX_SECONDS: float = 8.0,
        AI_CIRCUIT_FAILURE_THRESHOLD: int = 5,
        AI_CIRCUIT_RESET_SECONDS: float = 60.0,
        GYM_MATCH_POLICY: str = "prefer_match",
        ENVIRONMENT: str = "development",
        LOG_LEVEL: str = "INFO",
        CORS_ALLOWED_ORIGINS: Optional[List[str]] = None,
    ) -> None:
        # Supabase Configuration
        self.SUPABASE_URL = SUPABASE_URL
        self.SUPABASE_PUBLISHABLE_KEY = SUPABASE_PUBLISHABLE_KEY

        # Google Gemini API (partner recommendations)
        self.GOOGLE_API_KEY = GOOGLE_API_KEY
        self.GEMINI_MODEL = GEMINI_MODEL

        # AI call bounds
        self.AI_TIMEOUT_SECONDS = AI_TIMEOUT_SECONDS
        self.AI_MAX_RETRIES = AI_MAX_RETRIES
        self.AI_RETRY_BACKOFF_SECONDS = AI_RETRY_BACKOFF_SECONDS
        self.AI_RETRY_BACKOFF_MAX_SECONDS = AI_RETRY_BACKOFF_MAX_SECONDS
        self.AI_CIRCUIT_FAILURE_THRESHOLD = AI_CIRCUIT_FAILURE_THRESHOLD
        self.AI_CIRCUIT_RESET_SECONDS = AI_CIRCUIT_RESET_SECONDS

        # "prefer_match": fall back to the unfiltered list when nobody shares the gym
        # "strict": only ever return same-gym partners
        self.GYM_MATCH_POLICY = GYM_MATCH_POLICY

        # Application Settings
        self.ENVIRONMENT = ENVIRONMENT
        self.LOG_LEVEL = LOG_LEVEL

        # CORS Settings (only consulted in production)
        self.CORS_ALLOWED_ORIGINS = CORS_ALLOWED_ORIGINS or []

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Build Settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Raises:
            ValueError: If a numeric setting cannot be parsed.
        """
        if env is None:
            env = dict(os.environ)

        cors_raw = env.get("CORS_ALLOWED_ORIGINS", "")
        cors_origins = [origin.strip() for origin in cors_raw.split(",") if origin.strip()]

        return cls(
            SUPABASE_URL=env.get("SUPABASE_URL", ""),
            SUPABASE_PUBLISHABLE_KEY=env.get("SUPABASE_PUBLISHABLE_KEY", ""),
            GOOGLE_API_KEY=env.get("GOOGLE_API_KEY", ""),
            GEMINI_MODEL=env.get("GEMINI_MODEL", "gemini-2.0-flash"),
            AI_TIMEOUT_SECONDS=_get_float(env, "AI_TIMEOUT_SECONDS", 30.0),
            AI_MAX_RETRIES=_get_int(env, "AI_MAX_RETRIES", 2),
            AI_RETRY_BACKOFF_SECONDS=_get_float(env, "AI_RETRY_BACKOFF_SECONDS", 0.5),
            AI_RETRY_BACKOFF_MAX_SECONDS=_get_float(env, "AI_RETRY_BACKOFF_MAX_SECONDS", 8.0),
            AI_CIRCUIT_FAILURE_THRESHOLD=_get_int(env, "AI_CIRCUIT_FAILURE_THRESHOLD", 5),
            AI_CIRCUIT_RESET_SECONDS=_get_float(env, "AI_CIRCUIT_RESET_SECONDS", 60.0),
            GYM_MATCH_POLICY=env.get("GYM_MATCH_POLICY", "prefer_match").strip().lower(),
            ENVIRONMENT=env.get("ENVIRONMENT", "development"),
            LOG_LEVEL=env.get("LOG_LEVEL", "INFO"),
            CORS_ALLOWED_ORIGINS=cors_origins,
        )

    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """Get the JWKS URL for JWT verification."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    def validate(self) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing or invalid.
        """
        required_settings = {
            "SUPABASE_URL": self.SUPABASE_URL,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        if self.GYM_MATCH_POLICY not in GYM_MATCH_POLICIES:
            raise ValueError(
                f"GYM_MATCH_POLICY must be one of {', '.join(GYM_MATCH_POLICIES)}, "
                f"got {self.GYM_MATCH_POLICY!r}"
            )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings.from_env()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide Settings."""
    return settings


# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
