from google import genai
from google.genai import types

from arch_genius.core.settings import Settings


class ClientFactory:
    @staticmethod
    def create_client(settings: Settings) -> genai.Client:
        api_key: str = settings.require_api_key()
        timeout_ms: int = int(settings.request_timeout_seconds * 1000)
        http_options: types.HttpOptions = types.HttpOptions(timeout=timeout_ms)
        client: genai.Client = genai.Client(api_key=api_key, http_options=http_options)
        return client
