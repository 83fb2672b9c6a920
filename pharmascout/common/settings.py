"""
Runtime Settings

API credentials and model selection read from the environment. Scripts
call ``load_dotenv()`` first so a local .env file is honoured.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ADAPTERS = ["google", "bing", "llm", "known_vendors"]


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Credentials for external services. Empty values disable the service."""
    google_api_key: str = ""
    google_search_engine_id: str = ""
    bing_api_key: str = ""
    bing_market: str = "en-US"
    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    adapters: List[str] = field(default_factory=lambda: list(DEFAULT_ADAPTERS))

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            google_api_key=os.getenv("GOOGLE_SEARCH_API_KEY", ""),
            google_search_engine_id=os.getenv("GOOGLE_SEARCH_ENGINE_ID", ""),
            bing_api_key=os.getenv("BING_API_KEY", ""),
            bing_market=os.getenv("BING_MARKET", "en-US"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            adapters=_split_list(os.getenv("PHARMASCOUT_ADAPTERS")) or list(DEFAULT_ADAPTERS),
        )

    @property
    def has_google(self) -> bool:
        return bool(self.google_api_key and self.google_search_engine_id)

    @property
    def has_bing(self) -> bool:
        return bool(self.bing_api_key)

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)
