from __future__ import annotations

import base64
import binascii
import re
import secrets
from datetime import datetime
from pathlib import Path


DATA_URI_PATTERN = re.compile(r"^data:(?P<mime_type>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


class Utilities:
    """Small file I/O and encoding helpers shared across the project."""

    def __init__(self) -> None:
        raise RuntimeError("Utilities is a static class; do not instantiate it.")

    @staticmethod
    def ensure_parent_dir(path: Path) -> None:
        """Create the parent directory for a file path (no-op if it already exists)."""
        path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def ensure_env_file(
        env_path: Path = Path(".env"),
        example_path: Path = Path(".env.example"),
    ) -> None:
        """Create .env from .env.example if .env is missing."""
        if env_path.exists() or not example_path.exists():
            return
        Utilities.write_bytes(env_path, example_path.read_bytes())

    @staticmethod
    def write_bytes(path: Path, data: bytes) -> None:
        """Write raw bytes to disk (overwrites existing file)."""
        Utilities.ensure_parent_dir(path)
        path.write_bytes(data)

    @staticmethod
    def make_session_id() -> str:
        """
        Create a unique, sortable id for one results session.
        """
        current_time: datetime = datetime.now()
        timestamp: str = current_time.strftime("%Y_%m_%d_%H%M%S")
        random_suffix_hex: str = secrets.token_hex(4)
        return f"{timestamp}_{random_suffix_hex}"

    @staticmethod
    def encode_data_uri(mime_type: str, payload: bytes | str) -> str:
        """Build an inline `data:` URI. `payload` may be raw bytes or already base64 text."""
        encoded: str = payload if isinstance(payload, str) else base64.b64encode(payload).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    @staticmethod
    def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
        """Split a base64 `data:` URI into (mime type, raw bytes)."""
        match = DATA_URI_PATTERN.match(data_uri)
        if match is None:
            raise ValueError("Not a base64 data URI.")
        try:
            payload: bytes = base64.b64decode(match.group("payload"), validate=True)
        except binascii.Error as exception:
            raise ValueError(f"Invalid base64 payload in data URI: {exception}") from exception
        return match.group("mime_type"), payload
