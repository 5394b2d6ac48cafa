"""Configuration for Hunt the Wumpus."""

import os
from dataclasses import dataclass
from pathlib import Path

API_KEY_ENV = "OPENAI_KEY"


class MissingCredentialError(RuntimeError):
    """Raised when the companion credential is not configured."""


@dataclass
class Config:
    """Application configuration."""

    api_key: str = ""
    api_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-3.5-turbo"
    max_tokens: int = 150
    temperature: float = 0.7
    ai_timeout: float | None = 30.0
    save_file: Path = Path("save.json")
    log_level: str = "WARNING"
    log_file: Path | None = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        log_file = os.getenv("WUMPUS_LOG_FILE")
        timeout = os.getenv("WUMPUS_AI_TIMEOUT", str(cls.ai_timeout))

        return cls(
            api_key=os.getenv(API_KEY_ENV, "").strip(),
            api_url=os.getenv("WUMPUS_API_URL", cls.api_url),
            model=os.getenv("WUMPUS_MODEL", cls.model),
            max_tokens=int(os.getenv("WUMPUS_MAX_TOKENS", str(cls.max_tokens))),
            temperature=float(
                os.getenv("WUMPUS_TEMPERATURE", str(cls.temperature))
            ),
            ai_timeout=float(timeout) if timeout and float(timeout) > 0 else None,
            save_file=Path(os.getenv("WUMPUS_SAVE_FILE", str(cls.save_file))),
            log_level=os.getenv("WUMPUS_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("WUMPUS_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
        )

    def require_api_key(self) -> str:
        """Return the companion credential or fail with a descriptive error."""
        if not self.api_key:
            raise MissingCredentialError(
                f"Missing {API_KEY_ENV} environment variable"
            )
        return self.api_key
