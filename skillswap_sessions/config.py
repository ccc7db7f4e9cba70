from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./skillswap.db"
    DB_TIMEOUT_SECONDS: int = 5

    # Collaborators
    PROFILE_LOOKUP_TIMEOUT_SECONDS: float = 3.0
    MEETING_DOMAIN: str = "meet.jit.si"
    MEETING_ROOM_PREFIX: str = "skillswap"

    # Progress points
    XP_PER_SESSION_MENTOR: int = 50
    XP_PER_SESSION_LEARNER: int = 20
    XP_PER_REVIEW: int = 10

    # Input limits
    MAX_COMMENT_LENGTH: int = 1000
    MAX_MESSAGE_LENGTH: int = 1000

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
