"""Library configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables (FOOD_TERMS_*)."""

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Corpus sources (None = bundled CSV files)
    abbreviations_source: str | None = None
    tagnames_source: str | None = None
    source_timeout_seconds: float = 30.0  # Only used for http(s) sources

    # Tagname index field boosts
    tagname_code_boost: float = 3.0
    tagname_name_boost: float = 2.0
    tagname_synonyms_boost: float = 2.0

    # BM25 Configuration
    bm25_k1: float = 1.5  # Term frequency saturation parameter
    bm25_b: float = 0.75  # Document length normalization

    # SQL emission
    sql_text_search_config: str = "english"  # Language passed to to_tsvector()

    model_config = SettingsConfigDict(
        env_prefix="FOOD_TERMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
