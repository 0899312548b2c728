from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "Agenda API"
    API_V1_PREFIX: str = "/api/v1"

    # DB
    DATABASE_URL: str = "sqlite:///./data/agenda.db"
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
