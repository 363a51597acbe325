from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === General ===
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # === Session ===
    session_secret: str = Field(default=..., validation_alias="SESSION_SECRET")

    # === CSRF ===
    csrf_session_key: str = Field(default="csrf.token", validation_alias="CSRF_SESSION_KEY")
    csrf_form_key: str = Field(default="_token", validation_alias="CSRF_FORM_KEY")
    csrf_token_limit: int = Field(default=50, validation_alias="CSRF_TOKEN_LIMIT")

    @field_validator("csrf_token_limit")
    @classmethod
    def limit_is_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("CSRF_TOKEN_LIMIT must be at least 1")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
