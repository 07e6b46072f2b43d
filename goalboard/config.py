from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    storage_backend: str = "memory"  # "memory" | "sql"
    database_url: str = "postgresql+asyncpg://localhost:5432/goalboard"
    seed_sample_data: bool = True  # memory backend only
    create_tables: bool = True  # sql backend only, run on startup
    api_key: str | None = None
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "GOALBOARD_", "extra": "ignore"}


settings = Settings()
