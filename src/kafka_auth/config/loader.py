"""Authentication configuration loading from YAML files and dicts.

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax in YAML values, so secrets can stay out of the
file. A warning is logged for credential fields that hold literal values.
"""

import logging
import os
import re
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

from kafka_auth.config.models import (
    AuthenticationConfig,
    AWSMSKConfig,
    KerberosConfig,
    PlainTextConfig,
    SASLConfig,
)
from kafka_auth.errors import ConfigurationError
from kafka_auth.security.tls import TLSClientSettings

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "authentication"

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(([^}]*))?)?\}")

# Keys that must be injected through ${VAR} references
SECRET_KEYS = frozenset({"password", "ca_pem"})

T = TypeVar("T")


class _ExpandedValue(str):
    """A string produced by ${VAR} expansion, eligible for type coercion."""


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", context={"path": str(path)})
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def find_plaintext_secrets(data: Any, path: str = "") -> List[str]:
    """Return dotted paths of secret keys holding literal (non ${VAR}) values."""
    found: List[str] = []
    if isinstance(data, dict):
        for key, value in data.items():
            key_path = f"{path}.{key}" if path else str(key)
            if key in SECRET_KEYS and isinstance(value, str) and value:
                if not ENV_VAR_PATTERN.search(value):
                    found.append(key_path)
            else:
                found.extend(find_plaintext_secrets(value, key_path))
    return found


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        expanded = ENV_VAR_PATTERN.sub(replacer, data)
        return _ExpandedValue(expanded) if ENV_VAR_PATTERN.search(data) else data
    else:
        return data


def _coerce(value: Any, target: Any) -> Any:
    # Literal YAML strings keep their type; only env expansions are coerced
    if not isinstance(value, _ExpandedValue):
        return value
    if target is bool and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if target is int and re.fullmatch(r"-?\d+", value.strip()):
        return int(value)
    return str(value)


def _build(cls: Type[T], data: Optional[Dict[str, Any]], path: str) -> T:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must be a mapping", context={"path": path})

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(
            f"'{path}' has invalid keys: {', '.join(unknown)}",
            context={"path": path},
        )

    kwargs = {}
    for name, value in data.items():
        if name == "aws_msk":
            kwargs[name] = _build(AWSMSKConfig, value, f"{path}.aws_msk")
        elif value is None:
            continue
        else:
            kwargs[name] = _coerce(value, known[name].type)
            if known[name].type is bool and not isinstance(kwargs[name], bool):
                raise ConfigurationError(
                    f"'{path}.{name}' must be true or false", context={"path": path}
                )
    return cls(**kwargs)


def authentication_config_from_dict(data: Optional[Dict[str, Any]]) -> AuthenticationConfig:
    """Build an AuthenticationConfig from an ``authentication`` mapping.

    Blocks that are absent stay ``None``. A block that is present but empty
    (``sasl: {}``) is configured with default values.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError("authentication settings must be a mapping")

    blocks = {
        "plain_text": PlainTextConfig,
        "sasl": SASLConfig,
        "tls": TLSClientSettings,
        "kerberos": KerberosConfig,
    }
    unknown = sorted(set(data) - set(blocks))
    if unknown:
        raise ConfigurationError(
            f"authentication has invalid keys: {', '.join(unknown)}",
            context={"path": DEFAULT_SECTION},
        )

    kwargs = {
        name: _build(cls, data[name], name)
        for name, cls in blocks.items()
        if name in data
    }
    return AuthenticationConfig(**kwargs)


def load_authentication_config(
    path: Path,
    section: Optional[str] = DEFAULT_SECTION,
) -> AuthenticationConfig:
    """Load authentication settings from a YAML file.

    Args:
        path: YAML file to read
        section: Top-level key holding the settings; ``None`` when the whole
            file is the authentication mapping
    """
    raw = load_yaml(path)
    if section is not None:
        raw = raw.get(section) or {}

    for secret_path in find_plaintext_secrets(raw):
        logger.warning(
            "Secret stored as literal value in configuration file; use ${VAR_NAME} instead",
            extra={"field": secret_path},
        )

    config = authentication_config_from_dict(_expand_env_vars(raw))
    logger.debug(
        "Authentication configuration loaded",
        extra={
            "configured": ",".join(
                name
                for name in ("plain_text", "sasl", "tls", "kerberos")
                if getattr(config, name) is not None
            )
        },
    )
    return config
