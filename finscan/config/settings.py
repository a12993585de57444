from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "finscan"
    db_username: str = "finscan"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    upload_max_bytes: int = 10 * 1024 * 1024
    upload_folder: str = "financial_docs"

    storage_backend: str = "local"
    storage_local_root: str = "/app/files"
    storage_public_base_url: str = ""
    storage_timeout_seconds: int = 30

    s3_endpoint: str = ""
    s3_access_key: str = ""
    s3_secret_key: str = ""
    s3_bucket: str = ""
    s3_region: str = "us-east-1"

    pdf_engine: str = "pdfplumber"
    pdf_max_pages: int = 20

    # Empty means: gemini when its key is configured, openai otherwise.
    ai_provider: str = ""
    ai_temperature: float = 0.0

    gemini_api_key: str = ""
    gemini_model_name: str = "gemini-2.0-flash"
    gemini_timeout_seconds: int = 60

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 60
    openai_base_url: str = ""

    file_fetch_timeout_seconds: int = 30

    scoring_provider: str = "ai"
    anomaly_z_threshold: float = 3.0
    anomaly_min_history: int = 5

    pipeline_max_workers: int = 4
