"""
Application settings and configuration management.
"""
from typing import List, Optional, Union
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    # Base
    PROJECT_NAME: str = "WA Contacts Import"
    PROJECT_DESCRIPTION: str = "CSV contact import service for the WhatsApp messaging dashboard"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    
    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)
    
    # Contacts backend (external REST API)
    CONTACTS_API_URL: str = "http://localhost:5001/api"
    CONTACTS_IMPORT_PATH: str = "/contacts/import"
    CONTACTS_EXPORT_PATH: str = "/contacts/export"
    CONTACTS_API_TIMEOUT: Optional[float] = None  # no timeout on batch submission

    @field_validator("CONTACTS_API_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are appended to the base URL, so drop a trailing slash."""
        return v.rstrip("/")

    # Import workflow
    IMPORT_PREVIEW_ROWS: int = 10
    IMPORT_MAX_FILE_SIZE: int = 5 * 1024 * 1024  # 5MB
    IMPORT_SESSION_TTL_SECONDS: int = 60 * 60  # 1 hour idle

    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        """Pydantic config."""
        case_sensitive = True
        env_file = ".env"


# Create singleton settings instance
settings = Settings()
