"""Application configuration and settings management."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DOCSYNTH_", extra="ignore")

    app_name: str = Field(default="Document Synthesis API", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    object_store_url: str = Field(
        default="http://content-store:8080",
        description="Base URL of the remote content store REST API.",
    )
    object_store_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the content store and the document API.",
    )
    site_path: str = Field(
        default="/sites/documents",
        description="Server-relative path of the site that owns the containers.",
    )
    document_api_url: str = Field(
        default="http://content-store:8080/graph",
        description="Base URL of the remote document-creation API.",
    )
    default_container: str = Field(
        default="Shared Documents",
        description="Container used when the caller does not name one.",
    )
    fallback_containers: List[str] = Field(
        default_factory=lambda: ["Shared Documents", "Documents", "Dokument"],
        description="Well-known container names used when enumeration fails.",
    )
    document_extension: str = Field(
        default="docx",
        description="Extension of the word-processing documents that get stored.",
    )
    search_row_limit: int = Field(
        default=500,
        description="Maximum number of rows requested from the search endpoint.",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for content store and document API calls.",
    )
    ollama_base_url: str = Field(
        default="http://ollama:11434",
        description="Base URL for the Ollama service.",
    )
    generation_model: str = Field(
        default="llama3",
        description="Model used to generate document content.",
    )
    generation_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for a single generation call.",
    )
    probe_on_startup: bool = Field(
        default=True,
        description="Probe search reliability once when the application starts.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()
