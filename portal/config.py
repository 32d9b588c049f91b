from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./portal.db"
    APP_NAME: str = "property-portal"
    LOG_LEVEL: str = "INFO"

    # Auth
    JWT_SECRET: str = ""  # REQUIRED in production - fail loudly if missing at auth time
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_EXPIRE_DAYS: int = 30

    # AI inference endpoint
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT_SECONDS: int = 60

    class Config:
        env_file = ".env"


settings = Settings()
