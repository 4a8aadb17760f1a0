from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://nutritrack:nutritrack@db:5432/nutritrack"
    SECRET_KEY: str = "SECRET_KEY_FOR_NUTRITRACK"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    # development | production; production hides exception details in 500 responses
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False
    # Recreating tables on every start is only useful for local experiments
    RESET_DATABASE: bool = False
    SEED_TEST_USER: bool = False
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
