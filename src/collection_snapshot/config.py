"""
Runtime configuration.

Reads settings from the environment, after loading a .env file if one
is present. Other modules receive a BackupConfig instead of reading
the environment themselves.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse
import logging
import os

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_MONGODB_URI = 'mongodb://localhost:27017/'
DEFAULT_BACKUP_ROOT = './backup'
DEFAULT_LOG_LEVEL = 'INFO'


@dataclass(frozen=True)
class BackupConfig:
    """
    Validated runtime configuration.
    
    Attributes:
        mongodb_uri: connection string of the live store
        database: name of the database to export and restore
        backup_root: directory holding snapshot directories
        log_level: logging level name
    """
    
    mongodb_uri: str
    database: str
    backup_root: Path
    log_level: str
    
    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        load_dotenv_file: bool = True,
        **overrides: Optional[str]
    ) -> 'BackupConfig':
        """
        Build config from environment variables.
        
        Variables: MONGODB_URI, MONGODB_DATABASE, BACKUP_ROOT, BACKUP_LOG_LEVEL.
        Keyword overrides that are not None take precedence.
        
        Raises ConfigurationError if a value is missing or invalid.
        """
        if environ is None:
            if load_dotenv_file:
                load_dotenv()
            environ = os.environ
        
        def setting(name: str, env_var: str, default: Optional[str]) -> Optional[str]:
            value = overrides.get(name)
            if value is None:
                value = environ.get(env_var) or default
            return value
        
        uri = setting('mongodb_uri', 'MONGODB_URI', DEFAULT_MONGODB_URI)
        database = setting('database', 'MONGODB_DATABASE', None) or database_from_uri(uri)
        if not database:
            raise ConfigurationError(
                'MONGODB_DATABASE',
                "no database name set and none in the connection string"
            )
        
        backup_root = setting('backup_root', 'BACKUP_ROOT', DEFAULT_BACKUP_ROOT)
        log_level = parse_log_level(setting('log_level', 'BACKUP_LOG_LEVEL', DEFAULT_LOG_LEVEL))
        
        return cls(
            mongodb_uri=uri,
            database=database,
            backup_root=Path(backup_root).expanduser(),
            log_level=log_level,
        )


def database_from_uri(uri: str) -> Optional[str]:
    """Get the database name from the path of a MongoDB connection string."""
    path = urlparse(uri).path.lstrip('/')
    return path or None


def parse_log_level(raw_value: str) -> str:
    """
    Normalize a logging level name.
    
    Raises ConfigurationError if the name is not a logging level.
    """
    name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigurationError(
            'BACKUP_LOG_LEVEL',
            f"unknown logging level '{raw_value}'"
        )
    return name
