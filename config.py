import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

load_dotenv()

IS_HF = os.environ.get("SPACE_ID") is not None


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    llm_api_key: Optional[str] = None
    llm_base_url: str = "https://api.groq.com/openai/v1"
    model_name: str = "llama-3.3-70b-versatile"
    llm_timeout: float = Field(default=60.0, gt=0)
    base_dir: str = "/tmp/data" if IS_HF else "data"
    database_url: Optional[str] = None
    max_upload_mb: int = Field(default=10, gt=0)
    log_level: str = "INFO"

    @property
    def upload_dir(self) -> str:
        return os.path.join(self.base_dir, "uploads")

    @property
    def db_url(self) -> str:
        return self.database_url or f"sqlite:///{os.path.join(self.base_dir, 'app.db')}"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def require_api_key(self) -> str:
        if not self.llm_api_key:
            raise ConfigError("LLM_API_KEY is not set (GROQ_API_KEY / OPENAI_API_KEY are also accepted)")
        return self.llm_api_key


def load_settings(env=None) -> Settings:
    """Build Settings from the environment (or any mapping, for tests)."""
    env = os.environ if env is None else env
    values = {
        "llm_api_key": env.get("LLM_API_KEY") or env.get("GROQ_API_KEY") or env.get("OPENAI_API_KEY"),
        "llm_base_url": env.get("LLM_BASE_URL"),
        "model_name": env.get("MODEL_NAME"),
        "llm_timeout": env.get("LLM_TIMEOUT"),
        "base_dir": env.get("BASE_DIR"),
        "database_url": env.get("DATABASE_URL"),
        "max_upload_mb": env.get("MAX_UPLOAD_MB"),
        "log_level": env.get("LOG_LEVEL"),
    }
    try:
        return Settings(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
