from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ABSENCE_TERMS = (
    "ausência",
    "ausente",
    "ausencia",
    "nd",
    "n.d.",
    "n.d",
    "não detectado",
    "nao detectado",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LABTRACK_",
        extra="ignore",
    )

    database_url: str = "sqlite:///./labtrack.db"
    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    allowed_origins: str = "http://localhost:5173"
    seed_on_startup: bool = True

    # Lower-case terms; any of them inside an entry means "analyte absent".
    absence_terms: tuple[str, ...] = DEFAULT_ABSENCE_TERMS


settings = Settings()
