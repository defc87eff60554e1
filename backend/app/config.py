"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "DocQuiz API"
    debug: bool = False

    # Documentation tree: <root>/<domain>/[<category>/]<topic>.json
    documentation_root: str = "../documentation"

    # JSON file stores (users, collections, performance)
    data_dir: str = "data"

    # AI provider for question generation: "anthropic" | "openai" | "gemini" | "mock" | "auto"
    # (auto = first provider with an API key, mock when none is set)
    ai_provider: str = "auto"
    max_output_tokens: int = 4096

    # Anthropic Claude
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-haiku-20240307"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Google Gemini - free tier (get key at https://aistudio.google.com/apikey)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Collections
    default_collection_name: str = "Auto Generated"
    collection_backend: str = "file"  # "file" | "supabase"

    # Supabase (only used with collection_backend="supabase")
    supabase_url: str = ""
    supabase_service_key: str = ""

    # Auth
    google_client_id: str = ""
    demo_token: str = "DEMO_TOKEN"
    demo_user_id: str = "demo-user-id"

    # CORS
    cors_origins: list[str] = ["http://localhost:4200", "http://127.0.0.1:4200"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
