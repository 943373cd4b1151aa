"""Configuration management for Tasklist CalDAV Server."""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from monitoring.exceptions import ConfigurationError


@dataclass
class CalDAVConfig:
    """CalDAV server configuration."""
    realm: str = "Tasklist CalDAV Server"
    product_id: str = "-//Tasklist CalDAV Server//tasklist_caldav//EN"


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 5082
    debug: bool = False


@dataclass
class ServiceConfig:
    """Behaviour shared by all services."""
    # Zone used to read timestamps that arrive without a zone marker
    timezone: str = "UTC"

    def get_time_zone(self) -> ZoneInfo:
        """Resolve the configured zone name."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown time zone: {self.timezone}",
                {'timezone': self.timezone, 'cause': str(e)}
            )


@dataclass
class StorageConfig:
    """Seed data for the in-memory store."""
    data_file: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class Config:
    """Main application configuration."""
    caldav: CalDAVConfig = field(default_factory=CalDAVConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration."""
        # Fail at startup rather than on the first calendar upload
        self.service.get_time_zone()

    @classmethod
    def from_env(cls) -> 'Config':
        """Create configuration from environment variables."""
        caldav_config = CalDAVConfig(
            realm=os.getenv('CALDAV_REALM', CalDAVConfig.realm),
            product_id=os.getenv('CALDAV_PRODUCT_ID', CalDAVConfig.product_id)
        )

        server_config = ServerConfig(
            host=os.getenv('SERVER_HOST', '0.0.0.0'),
            port=int(os.getenv('SERVER_PORT', '5082')),
            debug=os.getenv('SERVER_DEBUG', '').lower() in ('true', '1', 'yes')
        )

        service_config = ServiceConfig(
            timezone=os.getenv('SERVICE_TIMEZONE', ServiceConfig.timezone)
        )

        storage_config = StorageConfig(
            data_file=os.getenv('STORAGE_DATA_FILE')
        )

        logging_config = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            format=os.getenv('LOG_FORMAT', LoggingConfig.format),
            file_path=os.getenv('LOG_FILE'),
            max_bytes=int(os.getenv('LOG_MAX_BYTES', str(LoggingConfig.max_bytes))),
            backup_count=int(os.getenv('LOG_BACKUP_COUNT', str(LoggingConfig.backup_count)))
        )

        return cls(
            caldav=caldav_config,
            server=server_config,
            service=service_config,
            storage=storage_config,
            logging=logging_config
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Create configuration from JSON file."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            caldav_data = data.get('caldav', {})
            caldav_config = CalDAVConfig(
                realm=caldav_data.get('realm', CalDAVConfig.realm),
                product_id=caldav_data.get('product_id', CalDAVConfig.product_id)
            )

            server_data = data.get('server', {})
            server_config = ServerConfig(
                host=server_data.get('host', '0.0.0.0'),
                port=server_data.get('port', 5082),
                debug=server_data.get('debug', False)
            )

            service_data = data.get('service', {})
            service_config = ServiceConfig(
                timezone=service_data.get('timezone', ServiceConfig.timezone)
            )

            storage_data = data.get('storage', {})
            storage_config = StorageConfig(
                data_file=storage_data.get('data_file')
            )

            logging_data = data.get('logging', {})
            logging_config = LoggingConfig(
                level=logging_data.get('level', 'INFO').upper(),
                format=logging_data.get('format', LoggingConfig.format),
                file_path=logging_data.get('file_path'),
                max_bytes=logging_data.get('max_bytes', LoggingConfig.max_bytes),
                backup_count=logging_data.get('backup_count', LoggingConfig.backup_count)
            )

            return cls(
                caldav=caldav_config,
                server=server_config,
                service=service_config,
                storage=storage_config,
                logging=logging_config
            )

        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid configuration file format: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'caldav': {
                'realm': self.caldav.realm,
                'product_id': self.caldav.product_id
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug': self.server.debug
            },
            'service': {
                'timezone': self.service.timezone
            },
            'storage': {
                'data_file': self.storage.data_file
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_bytes': self.logging.max_bytes,
                'backup_count': self.logging.backup_count
            }
        }

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        log_level = getattr(logging, self.logging.level, logging.INFO)

        formatter = logging.Formatter(self.logging.format)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.logging.file_path:
            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                self.logging.file_path,
                maxBytes=self.logging.max_bytes,
                backupCount=self.logging.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)


def load_config() -> Config:
    """Load configuration from file or environment variables."""
    config_files = [
        'config.json',
        'config/config.json',
        '/etc/tasklist-caldav/config.json'
    ]

    for config_file in config_files:
        if os.path.exists(config_file):
            try:
                return Config.from_file(config_file)
            except (ValueError, ConfigurationError) as e:
                logging.warning(f"Failed to load config from {config_file}: {e}")

    return Config.from_env()
