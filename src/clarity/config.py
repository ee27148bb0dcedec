from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    public_base_url: str  # Externally reachable URL of this API, used to build file URLs, e.g. https://api.clarity.app
    storage_path: str  # Directory path for stored objects (uploaded PDFs)
    storage_secret_key: str  # Key for signing time-limited file URLs
    llm_model: str = "gemini/gemini-2.5-flash"
    llm_api_key: str = ""
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "CLARITY_",
        "extra": "ignore",
    }
