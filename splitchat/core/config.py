from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite+aiosqlite:///./splitchat.db"
    JWT_SECRET: str = "splitchat-development-secret-change-me"
    JWT_ALGO: str = "HS256"
    LOG_LEVEL: str = "INFO"
    DEFAULT_CURRENCY: str = "INR"

settings = Settings()
