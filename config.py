import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

ALLOWED_MIME_TYPES = (
    'text/plain',
    'application/pdf',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/msword',
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup."""

    api_key: Optional[str] = None
    model: str = 'gemini-2.0-flash'
    host: str = '127.0.0.1'
    port: int = 3000
    upload_folder: str = 'uploads'
    max_upload_bytes: int = 20 * 1024 * 1024
    max_content_chars: int = 100000
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, env=None):
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            api_key=env.get('GEMINI_API_KEY') or None,
            model=env.get('GEMINI_MODEL', cls.model),
            host=env.get('HOST', cls.host),
            port=int(env.get('PORT', cls.port)),
            upload_folder=env.get('UPLOAD_FOLDER', cls.upload_folder),
            max_upload_bytes=int(env.get('MAX_UPLOAD_MB', 20)) * 1024 * 1024,
            max_content_chars=int(env.get('MAX_CONTENT_CHARS', cls.max_content_chars)),
            log_level=env.get('LOG_LEVEL', cls.log_level).upper(),
        )
