from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arch_genius.core.errors import MissingCredentialError
from arch_genius.utilities.utilities import Utilities


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    api_key: str = Field(default='', validation_alias=AliasChoices('api_key', 'gemini_api_key'))

    text_model: str = 'gemini-2.5-flash'
    image_model: str = 'gemini-2.5-flash-image'
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    image_aspect_ratio: str = '4:3'

    # Upper bound for a single generation or sketch call
    request_timeout_seconds: float = Field(default=120.0, gt=0)

    # Where exported reports and images go
    output_dir_path: Path = Path('./output')

    log_level: str = 'WARNING'

    def __init__(self, **data) -> None:
        Utilities.ensure_env_file(env_path=Path('.env'), example_path=Path('.env.example'))
        super().__init__(**data)

    @property
    def has_api_key(self) -> bool:
        return self.api_key.strip() != ''

    def require_api_key(self) -> str:
        """Return the stripped API key or raise before any network call is attempted."""
        if not self.has_api_key:
            raise MissingCredentialError(
                "API key is missing from the environment configuration. Set API_KEY in your environment or .env file."
            )
        return self.api_key.strip()
