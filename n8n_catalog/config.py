"""
Configuration settings for the n8n node catalog and response cache.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""
    
    # n8n API settings
    n8n_base_url: str = Field(
        default="http://localhost:5678",
        description="Base URL of the n8n instance"
    )
    n8n_api_key: Optional[str] = Field(
        default=None,
        description="n8n API key for authentication"
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for calls to the n8n API"
    )
    
    # Catalog settings
    catalog_refresh_interval: float = Field(
        default=300.0,
        description="Seconds a discovered node catalog stays fresh"
    )
    
    # Per-domain cache settings
    node_types_cache_ttl: float = Field(
        default=3600.0,
        description="TTL in seconds for cached node types"
    )
    node_types_cache_max_size: int = Field(
        default=50,
        description="Maximum cached node type entries"
    )
    workflows_cache_ttl: float = Field(
        default=120.0,
        description="TTL in seconds for cached workflows"
    )
    workflows_cache_max_size: int = Field(
        default=100,
        description="Maximum cached workflow entries"
    )
    credentials_cache_ttl: float = Field(
        default=600.0,
        description="TTL in seconds for cached credentials"
    )
    credentials_cache_max_size: int = Field(
        default=50,
        description="Maximum cached credential entries"
    )
    executions_cache_ttl: float = Field(
        default=30.0,
        description="TTL in seconds for cached executions"
    )
    executions_cache_max_size: int = Field(
        default=200,
        description="Maximum cached execution entries"
    )
    
    # Application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    
    class Config:
        env_file = ".env"
        case_sensitive = False


# Create global settings instance
settings = Settings()
