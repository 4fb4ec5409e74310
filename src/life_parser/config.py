from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Intent scoring
    KEYWORD_WEIGHT: float = 1.0
    PATTERN_WEIGHT: float = 0.5
    START_BONUS: float = 0.3  # First token is one of the intent's keywords
    SINGLE_WORD_CONFIDENCE: float = 0.95
    TOKEN_NORMALIZER: float = 0.5  # score / (tokens * TOKEN_NORMALIZER + 1)
    PRIORITY_SCALE: float = 10.0
    MIN_INTENT_CONFIDENCE: float = 0.3
    DEFAULT_PRIORITY: int = 5

    # Entity matching against the content context
    ENTITY_MIN_CONFIDENCE: float = 0.4
    ID_MATCH_BONUS: float = 0.5
    NAME_MATCH_BONUS: float = 0.3
    PARTIAL_MATCH_CONFIDENCE: float = 0.6
    PARTIAL_MIN_WORD_LENGTH: int = 4
    FRAGMENT_MATCH_CONFIDENCE: float = 0.5  # Fallback pass only
    DEFAULT_SLEEP_HOURS: int = 8

    # Session bookkeeping
    UNKNOWN_LOG_CAPACITY: int = 50
    HISTORY_LIMIT: int = 100

    log_dir: str = "logs"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
