"""
Configuration management for the Pharos LP adapter

Loads settings from environment variables and .env file.
Includes logging configuration with file output and correlation ID support.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv


def _load_env_file():
    """Load .env file from project root"""
    current = Path(__file__).parent.parent  # pharos_lp_adapter package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class RpcConfig:
    """Pharos RPC endpoint configuration"""
    url: str = field(default_factory=lambda: _get_env("PHAROS_RPC_URL", "https://testnet.dplabs-internal.com"))
    chain_id: int = field(default_factory=lambda: _get_env_int("PHAROS_CHAIN_ID", 688688))
    timeout_seconds: float = field(default_factory=lambda: _get_env_float("RPC_TIMEOUT_SECONDS", 30.0))
    # Inject extraData middleware for PoA-style block headers
    poa: bool = field(default_factory=lambda: _get_env_bool("RPC_POA", False))


@dataclass
class SignerConfig:
    """Signer configuration for local key signing"""
    private_key_env: str = field(default_factory=lambda: _get_env("SIGNER_PRIVATE_KEY_ENV", "EVM_PRIVATE_KEY"))
    keystore_path: str = field(default_factory=lambda: _get_env("EVM_KEYSTORE_PATH", ""))
    # Label used to tag log lines for this signer
    wallet_name: str = field(default_factory=lambda: _get_env("WALLET_NAME", "Unknown"))


@dataclass
class TxConfig:
    """Transaction confirmation configuration"""
    # Per-attempt receipt wait
    confirmation_timeout: float = field(default_factory=lambda: _get_env_float("TX_CONFIRMATION_TIMEOUT", 60.0))
    max_attempts: int = field(default_factory=lambda: _get_env_int("TX_MAX_ATTEMPTS", 5))
    # Fixed delay between attempts (no backoff)
    retry_delay: float = field(default_factory=lambda: _get_env_float("TX_RETRY_DELAY", 5.0))
    required_confirmations: int = field(default_factory=lambda: _get_env_int("TX_REQUIRED_CONFIRMATIONS", 1))
    receipt_poll_interval: float = field(default_factory=lambda: _get_env_float("TX_RECEIPT_POLL_INTERVAL", 1.0))
    # Priority fee (tip) in gwei when the chain reports a base fee
    priority_fee_gwei: float = field(default_factory=lambda: _get_env_float("TX_PRIORITY_FEE_GWEI", 1.0))


@dataclass
class LiquidityConfig:
    """Liquidity provisioning parameters"""
    # Mint deadline window in seconds (default: 30 minutes)
    deadline_seconds: int = field(default_factory=lambda: _get_env_int("LP_DEADLINE_SECONDS", 1800))
    # Gas limit used when estimation fails
    default_gas_limit: int = field(default_factory=lambda: _get_env_int("LP_DEFAULT_GAS_LIMIT", 500_000))
    # Safety margin applied to whichever gas limit is used
    gas_limit_multiplier: float = field(default_factory=lambda: _get_env_float("LP_GAS_LIMIT_MULTIPLIER", 1.2))
    # Gas limit for approve() when estimation fails
    approval_gas_limit: int = field(default_factory=lambda: _get_env_int("LP_APPROVAL_GAS_LIMIT", 100_000))


@dataclass
class TokenConfig:
    """Pharos testnet token and router addresses"""
    wphrs: str = field(default_factory=lambda: _get_env("PHAROS_WPHRS_ADDRESS", "0x76aaaDA469D23216bE5f7C596fA25F282Ff9b364"))
    usdt: str = field(default_factory=lambda: _get_env("PHAROS_USDT_ADDRESS", "0xD4071393f8716661958F766DF660033b3d35fD29"))
    usdc: str = field(default_factory=lambda: _get_env("PHAROS_USDC_ADDRESS", "0x72df0bcd7276f2dFbAc900D1CE63c272C4BCcCED"))
    router: str = field(default_factory=lambda: _get_env("PHAROS_ROUTER_ADDRESS", "0xF8a1D4FF0f9b9Af7CE58E1fc1833688F3BFd6115"))
    decimals: int = 18


def _get_default_log_path() -> str:
    """Get default log file path under pharos_lp_adapter/log/ with UTC timestamp"""
    from datetime import datetime, timezone
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_dir = Path(__file__).parent / "log"
    return str(log_dir / f"pharos_lp_{timestamp}.log")


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output and correlation ID support.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file output)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)

    Example .env:
        LOG_LEVEL=DEBUG
        LOG_CONSOLE=true
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", _get_default_log_path()))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))

    # Available placeholders: %(asctime)s, %(name)s, %(levelname)s, %(message)s
    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))

    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    Main configuration container

    Loads all settings from environment variables and .env file.

    Usage:
        from pharos_lp_adapter.config import config

        print(config.rpc.url)
        print(config.tx.max_attempts)
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    liquidity: LiquidityConfig = field(default_factory=LiquidityConfig)
    tokens: TokenConfig = field(default_factory=TokenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "pharos_lp_adapter",
) -> logging.Logger:
    """
    Set up logging based on configuration.

    Creates handlers for file and/or console output with optional rotation.
    The log file directory is created automatically if it doesn't exist.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Name of the logger to configure

    Returns:
        Configured logger instance

    Example:
        from pharos_lp_adapter.config import LoggingConfig, setup_logging
        logger = setup_logging(LoggingConfig(log_file="", log_level="DEBUG"))
    """
    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close before removing so file handles are released on reload
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config.log_format)

    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(log_config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if log_config.console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Logging initialized: file={log_config.log_file}, level={log_config.log_level}")

    return logger
