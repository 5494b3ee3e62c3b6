from pathlib import Path
from typing import Literal, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import DEFAULT_SHOP_DEFINITION_PATH


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'ShopSync'
    VERSION: str = '1.2.0'
    DEBUG: bool = False

    # ShopSync protocol
    SHOPSYNC_CHANNEL: int = 9773
    REPLY_CHANNEL_MODULUS: int = 65536

    # Broadcast cadence (seconds, monotonic clock)
    BROADCAST_COOLDOWN_SECONDS: float = 30.0
    FIRST_BROADCAST_MIN_DELAY: float = 15.0
    FIRST_BROADCAST_MAX_DELAY: float = 30.0
    LEGACY_INTERVAL_BROADCAST: bool = False  # Fixed 30s broadcasts, older senders

    # Sender identity
    SHOP_COMPUTER_ID: Optional[int] = None
    SHOP_DEFINITION_PATH: str = str(DEFAULT_SHOP_DEFINITION_PATH)
    SHOP_DEFINITION_POLL_SECONDS: float = 5.0  # 0 disables reloading

    # Transport
    TRANSPORT_BACKEND: Literal['memory', 'redis'] = 'memory'
    USE_BINARY_CODEC: bool = False  # msgpack when True, JSON otherwise

    # Redis Configuration (pub/sub transport)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: SecretStr = SecretStr('')
    REDIS_CHANNEL_PREFIX: str = 'shopsync'
    REDIS_SOCKET_CONNECT_TIMEOUT: int = 10
    REDIS_HEALTH_CHECK_INTERVAL: int = 30
    REDIS_RECONNECT_DELAY: float = 5.0

    @field_validator('FIRST_BROADCAST_MAX_DELAY')
    @classmethod
    def check_first_broadcast_window(cls, v: float, info) -> float:
        min_delay = info.data.get('FIRST_BROADCAST_MIN_DELAY', 0.0)
        if v < min_delay:
            raise ValueError('FIRST_BROADCAST_MAX_DELAY must not be below FIRST_BROADCAST_MIN_DELAY')
        return v

    @field_validator('REPLY_CHANNEL_MODULUS')
    @classmethod
    def check_modulus(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('REPLY_CHANNEL_MODULUS must be positive')
        return v

    @property
    def REDIS_URL(self) -> str:
        return f'redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}'


settings = Settings()  # type: ignore
