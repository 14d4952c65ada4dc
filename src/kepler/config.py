from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # LLM configuration (OpenAI-compatible chat completions endpoint)
    llm_api_key: str = ""
    llm_base_url: str = "https://api.deepseek.com"
    llm_model_name: str = "deepseek-chat"
    llm_temperature: float = 0.3
    llm_timeout: float = 30.0  # per-call timeout; a timeout counts as an oracle failure

    # Similarity oracle
    similarity_fallback_score: float = 0.5
    similarity_max_concurrency: int = 1  # 1 = sequential, in rubric order

    # Rubric source: JSON array of rubrics; built-in defaults when unset
    rubrics_file: Path | None = None

    # Scoring history
    results_dir: Path = Path("./results")
    persist_results: bool = True

    # Input limits
    max_transcript_chars: int = 100_000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


settings = Settings()
