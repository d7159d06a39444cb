"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("feedcurator", description="Database name")
    user: str = Field("feedcurator", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(
        "FEEDCURATOR_DB_PASSWORD", description="Environment variable for password"
    )
    min_size: int = Field(1, description="Minimum pool size", ge=1)
    max_size: int = Field(5, description="Maximum pool size", ge=1)


class LLMConfig(BaseModel):
    """Classifier (LLM provider) configuration."""

    provider: str = Field("openai", description="Provider type (any OpenAI-compatible API)")
    model: str = Field("gemini-2.5-flash", description="Model name")
    api_key_env: Optional[str] = Field("GEMINI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(
        "https://generativelanguage.googleapis.com/v1beta/openai/",
        description="Base URL of the OpenAI-compatible endpoint",
    )
    temperature: float = Field(0.2, ge=0.0, le=2.0)


class IngestionConfig(BaseModel):
    """Feed ingestion settings."""

    feed_timeout: float = Field(30.0, description="Feed fetch timeout in seconds", gt=0)
    redirect_timeout: float = Field(5.0, description="Redirect resolution timeout", gt=0)
    redirect_domains: List[str] = Field(
        default_factory=lambda: ["news.google.com"],
        description="Hosts whose links are redirectors to resolve",
    )
    consent_markers: List[str] = Field(
        default_factory=lambda: ["consent.google.com"],
        description="Hosts of interstitial consent pages",
    )
    user_agent: str = Field("FeedCurator/1.0 (RSS curation)")
    browser_user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    @field_validator("redirect_domains", "consent_markers")
    @classmethod
    def lowercase_hosts(cls, v: List[str]) -> List[str]:
        """Store host names lower-cased."""
        return [h.strip().lower() for h in v if h.strip()]


class AnalysisConfig(BaseModel):
    """Classification pipeline settings."""

    batch_size: int = Field(5, description="Articles analyzed per invocation", ge=1, le=100)
    delay_seconds: float = Field(6.0, description="Pause between classifier calls", ge=0)
    page_timeout: float = Field(5.0, description="Article page fetch timeout", gt=0)
    max_content_chars: int = Field(12000, description="Article text sent to the classifier", ge=500)
    store_raw_html: bool = Field(False, description="Keep fetched HTML on the article row")
    analyze_on_share: bool = Field(True, description="Queue analysis for shared articles")
    user_agent: str = Field("Mozilla/5.0 (compatible; FeedCurator/1.0)")


class ServerConfig(BaseModel):
    """HTTP API settings."""

    host: str = Field("127.0.0.1")
    port: int = Field(8000, ge=1, le=65535)
    cron_secret_env: Optional[str] = Field(
        "CRON_SECRET", description="Environment variable holding the trigger bearer token"
    )
    default_min_score: int = Field(5, ge=0, le=10)


class ConfigModel(BaseModel):
    """Main configuration model."""

    log_level: str = Field("INFO", description="Logging level")
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names only."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class FeedSeed(BaseModel):
    """Feed entry used to seed the registry from YAML."""

    name: str = Field(..., description="Feed name")
    url: str = Field(..., description="RSS/Atom feed URL")
    category: Optional[str] = Field(None, description="Optional label")
