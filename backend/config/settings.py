from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path

# Get absolute path to backend directory (config/settings.py -> backend/)
_backend_dir = Path(__file__).parent.parent
_env_local = _backend_dir / '.env.local'
_env_file = _backend_dir / '.env'


class Settings(BaseSettings):
    """Application settings"""

    # Mounted behind API Gateway stage in Lambda (e.g. "/prod"), empty locally
    API_ROOT_PATH: str = ""

    # CORS - Will be parsed from environment variable string
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Database Configuration (relational provider)
    # Optional at load time: only the relational provider needs it
    DATABASE_URL: str = ""
    TEST_DATABASE_URL: str = ""

    # Storage provider selection
    # DATA_PROVIDER gates which providers are selectable: "", "relational" or "hosted"
    DATA_PROVIDER: str = ""
    # Provider used when no preference has been stored (defaults to DATA_PROVIDER, then mock)
    DEFAULT_PROVIDER: str = ""
    PROVIDER_PREFERENCE_FILE: str = str(_backend_dir / ".provider-preference.json")

    # Hosted backend (Supabase)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""  # Invites and password changes
    SUPABASE_JWT_SECRET: str = ""
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    JWT_ALGORITHM: str = "HS256"
    # Comma-separated emails allowed to invite new users
    ADMIN_EMAILS: str = ""

    # Place lookup
    GOOGLE_MAPS_API_KEY: str = ""
    GEOCODING_TIMEOUT_SECONDS: float = 10.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    class Config:
        # Prioritize .env.local for local development, fallback to .env
        # Use absolute paths to avoid working directory issues
        env_file = str(_env_local) if _env_local.exists() else str(_env_file)
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from environment file

    def get_allowed_origins(self) -> List[str]:
        """Parse and return CORS origins as a list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_deployment_provider(self) -> Optional[str]:
        """Return the configured deployment provider, or None for an unconfigured deployment"""
        value = self.DATA_PROVIDER.strip().lower()
        return value or None

    def get_default_provider(self) -> str:
        """Return the provider used when no preference is stored"""
        value = self.DEFAULT_PROVIDER.strip().lower()
        if value:
            return value
        return self.get_deployment_provider() or "mock"

    def get_admin_emails(self) -> List[str]:
        """Parse admin emails (lowercased); empty means nobody may invite"""
        return [email.strip().lower() for email in self.ADMIN_EMAILS.split(",") if email.strip()]

    def is_hosted_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


settings = Settings()
