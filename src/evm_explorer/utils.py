import math
import sys
import time
from dynaconf import Dynaconf, Validator
from dynaconf.validator import ValidationError as DynaconfValidationError
from loguru import logger
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigError

WEI_PER_ETH = 10 ** 18


def hex_to_int(hex_value: str) -> int:
    # Ensure input is a 0x-prefixed hex quantity
    if not isinstance(hex_value, str):
        raise TypeError(f"Expected hex string, got {type(hex_value)}")
    if not hex_value.startswith(("0x", "0X")):
        raise ValueError(f"Expected 0x-prefixed hex string, got {hex_value!r}")

    return int(hex_value, 16)

def wei_to_eth(wei: Union[str, int]) -> int:
    """Convert a wei amount to whole ETH.

    Uses integer division, so anything below one ETH is truncated rather than
    rounded: 1.5 ETH worth of wei returns 1.

    Args:
        wei (Union[str, int]): Hex quantity as returned by the node, or an int

    Returns:
        int: Whole ETH
    """
    amount = hex_to_int(wei) if isinstance(wei, str) else wei
    if amount < 0:
        raise ValueError(f"Wei amount must be non-negative, got {amount}")
    return amount // WEI_PER_ETH

def shorten(hex_value: Optional[str], keep: int = 20) -> str:
    if not hex_value:
        return ""
    return hex_value[:keep] + "..." + hex_value[-6:]

def time_ago(timestamp: int, now: Optional[float] = None) -> str:
    """Coarse relative age of a unix timestamp, e.g. '42s ago' or '3h ago'"""
    if now is None:
        now = time.time()
    diff = max(0, math.floor(now - timestamp))

    if diff < 60:
        return f"{diff}s ago"
    if diff < 3600:
        return f"{diff // 60}m ago"
    if diff < 86400:
        return f"{diff // 3600}h ago"
    return f"{diff // 86400}d ago"

def load_config(file_name: str = "config.yml") -> Dynaconf:
    """Load and validate explorer configuration from chain config file
    
    Ensures that only one chain configuration is active. Any key can be
    overridden from the environment with the EXPLORER_ prefix, e.g.
    EXPLORER_CHAIN__RPC_URL.

    Params:
        file_name (str): Name of the chain config file to load, or a path to it

    Returns:
        Dynaconf: Validated configuration object
    """
    config_path = Path(file_name)
    if not config_path.is_absolute():
        project_root = Path(__file__).resolve().parent.parent.parent
        config_path = project_root / "chains" / file_name

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    # Validate that only one 'chain' section is active
    active_chain_count = 0
    with config_path.open('r') as f:
        for line in f:
            stripped_line = line.strip()
            # Check if the line starts with 'chain:' and is not commented out
            if stripped_line.startswith('chain:') and not line.lstrip().startswith('#'):
                active_chain_count += 1
                if active_chain_count > 1:
                    raise ConfigError(f"Multiple active 'chain' sections found in {config_path.name}. Only one chain can be explored at a time.")

    settings = Dynaconf(
        settings_files=[config_path],
        envvar_prefix="EXPLORER",
        validators=[
            Validator('chain.name', must_exist=True,
                     is_type_of=str,
                     condition=lambda x: x.islower() and x == x.strip(),
                     messages={"condition": "Chain name must be lowercase with no leading/trailing spaces"}
            ),
            Validator('chain.rpc_url', must_exist=True, is_type_of=str,
                     condition=lambda x: x.startswith(("http://", "https://")),
                     messages={"condition": "RPC URL must be an http(s) endpoint"}
            ),
            Validator('chain.request_timeout', default=None,
                     condition=lambda x: x is None or x > 0),
            Validator('explorer.latest_blocks', default=12, is_type_of=int, gte=1),
            Validator('explorer.scan_blocks', default=15, is_type_of=int, gte=1),
            Validator('explorer.max_transactions', default=20, is_type_of=int, gte=1),
            Validator('explorer.transactions_per_block', default=6, is_type_of=int, gte=1),
            Validator('explorer.parallel_fetch', default=False, is_type_of=bool),
            Validator('server.host', default="127.0.0.1", is_type_of=str),
            Validator('server.port', default=8080, is_type_of=int),
            Validator('metrics.enabled', default=False, is_type_of=bool),
            Validator('metrics.port', default=8000, is_type_of=int),
            Validator('logging.level', default="INFO", is_type_of=str),
            Validator('logging.to_file', default=False, is_type_of=bool),
            Validator('logging.destination', default="logs/explorer.log", is_type_of=str),
        ]
    )
    # Validate all settings at once
    try:
        settings.validators.validate()
    except DynaconfValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path.name}: {e}") from e

    return settings

def setup_logging(level: str = "INFO", to_file: bool = False, destination: str = "logs/explorer.log") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())

    # Save logs to file
    if to_file:
        logger.add(destination, level=level.upper(), rotation="100 MB", retention="10 days")
