import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "Product"
DEFAULT_REGION = "ap-southeast-1"
DEFAULT_SEED_COUNT = 4
DEFAULT_LOG_LEVEL = "INFO"


def _seed_count(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_SEED_COUNT
    try:
        count = int(raw)
    except ValueError:
        count = -1
    if count < 0:
        logger.warning("SEED_COUNT=%r is not a non-negative integer, using %d", raw, DEFAULT_SEED_COUNT)
        return DEFAULT_SEED_COUNT
    return count


def _log_level(raw: Optional[str]) -> str:
    level = (raw or DEFAULT_LOG_LEVEL).upper()
    # getLevelName maps known names to their int value
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("LOG_LEVEL=%r is not a logging level, using %s", raw, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


@dataclass(frozen=True)
class Settings:
    table_name: str = DEFAULT_TABLE
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    seed_count: int = DEFAULT_SEED_COUNT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            table_name=env.get("PRODUCTS_TABLE") or DEFAULT_TABLE,
            region=env.get("PRODUCTS_REGION") or DEFAULT_REGION,
            # DynamoDB local: http://localhost:8000
            endpoint_url=env.get("DYNAMODB_ENDPOINT_URL") or None,
            seed_count=_seed_count(env.get("SEED_COUNT")),
            log_level=_log_level(env.get("LOG_LEVEL")),
        )


def configure_logging(settings: Settings) -> None:
    # Lambda installs its own handler on the root logger; only the level is ours
    logging.getLogger("products").setLevel(settings.log_level)
