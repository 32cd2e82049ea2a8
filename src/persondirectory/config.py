"""
Configuration for the person directory.

The configuration is a YAML document with ``logging``, ``ldap``, ``provider``,
``mockup`` and ``prometheus`` sections. Only ``provider.base_dn`` is required;
everything else has a default.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import yaml
from ldap3 import ALL_ATTRIBUTES, BASE, LEVEL, SUBTREE

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SEARCH_SCOPES = {
    'SUBTREE': SUBTREE,
    'LEVEL': LEVEL,
    'BASE': BASE,
}

DEFAULT_CONNECTION = "default"
DEFAULT_FILTER = "(uid={identifier})"


@dataclass
class LdapServerConfig:
    """Where and how to reach one directory server."""

    host: str
    port: Optional[int] = None
    use_ssl: bool = False
    ca_cert: Optional[str] = None
    """CA certificates in PEM format, used to validate the server when set."""
    connect_timeout: Optional[float] = None
    receive_timeout: Optional[float] = None


@dataclass
class SearchConstraints:
    """Limits passed through to the directory with every search."""

    time_limit: int = 0
    """Server side time limit in seconds, 0 means no limit."""
    size_limit: int = 0
    """Maximum number of entries returned, 0 means no limit."""


@dataclass
class ProviderConfig:
    """Settings for `~persondirectory.ldap.LdapPersonProvider`."""

    base_dn: str = ""
    connection: str = DEFAULT_CONNECTION
    bind_dn: Optional[str] = None
    bind_password: Optional[str] = None
    scope: str = "SUBTREE"
    filter: str = DEFAULT_FILTER
    attributes: List[str] = field(default_factory=lambda: [ALL_ATTRIBUTES])
    attribute_map: Dict[str, str] = field(default_factory=dict)
    """Renames directory attribute names to person attribute names."""
    constraints: SearchConstraints = field(default_factory=SearchConstraints)

    def __post_init__(self):
        if self.scope.upper() not in SEARCH_SCOPES:
            raise ConfigurationError(f"Unknown search scope: {self.scope}")
        if "{identifier}" not in self.filter:
            raise ConfigurationError(f"Search filter has no {{identifier}} placeholder: {self.filter}")
        try:
            self.filter.format(identifier="x")
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(f"Invalid search filter {self.filter}: {e!r}") from e

    @property
    def search_scope(self):
        return SEARCH_SCOPES[self.scope.upper()]


@dataclass
class Config:
    provider: ProviderConfig
    servers: Dict[str, LdapServerConfig] = field(default_factory=dict)
    logging: dict = field(default_factory=dict)
    mockup: dict = field(default_factory=dict)
    prometheus: dict = field(default_factory=dict)

    @property
    def mockup_enabled(self) -> bool:
        return bool(self.mockup.get('enabled', False))

    @property
    def prometheus_enabled(self) -> bool:
        return bool(self.prometheus.get('enabled', False))


def parse_config(config: dict) -> Config:
    """Build a Config from an already parsed YAML document

    Args:
        config (dict): The parsed document.

    Raises:
        ConfigurationError: A required value is missing or a value is invalid.

    Returns:
        Config: The configuration.
    """
    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a mapping")
    ldap_config = config.get('ldap', {}) or {}
    provider_config = config.get('provider', {}) or {}
    if not provider_config.get('base_dn'):
        raise ConfigurationError("provider.base_dn is required")

    try:
        servers = {
            name: LdapServerConfig(**server)
            for name, server in (ldap_config.get('connections', {}) or {}).items()
        }
        constraints = SearchConstraints(
            time_limit=int(provider_config.get('time_limit', 0)),
            size_limit=int(provider_config.get('size_limit', 0)),
        )
        provider = ProviderConfig(
            base_dn=provider_config['base_dn'],
            connection=provider_config.get('connection', DEFAULT_CONNECTION),
            bind_dn=ldap_config.get('bind_dn'),
            bind_password=ldap_config.get('bind_pw'),
            scope=str(provider_config.get('scope', 'SUBTREE')),
            filter=provider_config.get('filter', DEFAULT_FILTER),
            attributes=list(provider_config.get('attributes') or [ALL_ATTRIBUTES]),
            attribute_map=dict(provider_config.get('attribute_map') or {}),
            constraints=constraints,
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    return Config(provider=provider,
                  servers=servers,
                  logging=config.get('logging', {}) or {},
                  mockup=config.get('mockup', {}) or {},
                  prometheus=config.get('prometheus', {}) or {})


def load_config(config_file) -> Config:
    config_path = os.path.abspath(config_file)
    with open(config_path, 'r') as file:
        try:
            config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e
    logger.debug(f"Loaded configuration: {config_path}")
    return parse_config(config)
