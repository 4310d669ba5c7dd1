from pathlib import Path
from typing import Annotated, List

import orjson
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Theater Seating'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Kvrocks Configuration (Redis protocol + Kvrocks storage)
    KVROCKS_HOST: str = 'localhost'
    KVROCKS_PORT: int = 6666
    KVROCKS_DB: int = 0
    KVROCKS_PASSWORD: str = ''
    REDIS_DECODE_RESPONSES: bool = True

    # Kvrocks Connection Pool Configuration
    KVROCKS_POOL_MAX_CONNECTIONS: int = 10  # Single active run, few connections needed
    KVROCKS_POOL_SOCKET_TIMEOUT: int = 10  # Socket read/write timeout (seconds)
    KVROCKS_POOL_SOCKET_CONNECT_TIMEOUT: int = 5  # Connection timeout (seconds)
    KVROCKS_POOL_SOCKET_KEEPALIVE: bool = True
    KVROCKS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # Health check interval (seconds)

    # Operator prompt
    OPERATOR_PROMPT_MODE: str = 'console'  # 'console' | 'scripted'
    OPERATOR_SCRIPTED_ANSWERS: Annotated[List[str], NoDecode] = []  # consumed in order by the scripted prompt

    @field_validator('OPERATOR_SCRIPTED_ANSWERS', mode='before')
    @classmethod
    def assemble_scripted_answers(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, str):
            return orjson.loads(v)
        elif isinstance(v, list):
            return v
        return []


settings = Settings()  # type: ignore
