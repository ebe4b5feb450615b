from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "secret"


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "mydb"
    DB_PORT: str = "5432"
    DB_SSLMODE: str = "disable"

    # Known development value. Override JWT_SECRET in any real deployment.
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_HOURS: int = 24

    RESET_TOKEN_EXPIRE_MINUTES: int = 5
    BACKPACK_PREFIX_LENGTH: int = 3

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    ENVIRONMENT: str = "development"  # "development" or "production"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?sslmode={self.DB_SSLMODE}"
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
