from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Decision margins (top score must lead the runner-up by at least this)
    manufacturer_match_delta: float = 0.45
    model_match_delta: float = 0.25

    # Model tokens this short or shorter get spacing variants ("a 70" / "a70")
    small_word_size: int = 3

    # Worker threads used to classify listings
    match_workers: int = Field(default=4, ge=1)

    # Too common to tell one product from another; never cast a vote
    ignorable_words: frozenset[str] = frozenset({"zoom", "camera", "digital", "optical"})

    # Log
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
