"""Runtime configuration assembled from CLI arguments, YAML and environment.

The driver receives a RunConfig value instead of reading module globals, so
tests can point it at local fixture indices and capture its output.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TextIO

import yaml

from constants import Constants, IndexNames
from common.logging_utils import redact

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""


class AuthRequiredError(Exception):
    """Raised when a private index is configured but no token is available."""


@dataclass(frozen=True)
class IndexSource:
    """One APKINDEX location and the label printed for its packages."""
    name: str
    url: str
    public: bool = False


@dataclass
class RunConfig:
    """Everything the driver needs to run one query."""
    sources: List[IndexSource] = field(default_factory=list)
    auth_token: Optional[str] = None
    timeout: float = Constants.REQUEST_TIMEOUT
    user_agent: str = Constants.USER_AGENT
    max_workers: Optional[int] = None

    @property
    def needs_auth(self) -> bool:
        return any(not s.public for s in self.sources)


def default_sources() -> List[IndexSource]:
    """The built-in Wolfi and Chainguard indices."""
    return [
        IndexSource(name, url, public=name in Constants.PUBLIC_INDICES)
        for name, url in Constants.DEFAULT_APK_INDICES.items()
    ]


def local_sources(path: str) -> List[IndexSource]:
    """A single local index replacing the defaults."""
    return [IndexSource(IndexNames.LOCAL.value, path, public=True)]


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML configuration file.

    Recognised keys::

        indices:
          - name: wolfi
            url: https://packages.wolfi.dev/os/x86_64/APKINDEX.tar.gz
            public: true
        timeout: 60
        max_workers: 4

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigError(f"Couldn't read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Couldn't parse config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def sources_from_config(data: Mapping[str, Any]) -> Optional[List[IndexSource]]:
    """Index sources declared in a config mapping, or None when absent."""
    entries = data.get("indices")
    if entries is None:
        return None
    if not isinstance(entries, list):
        raise ConfigError("'indices' must be a list")
    sources = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("url"):
            raise ConfigError(f"Invalid index entry {entry!r}: 'name' and 'url' are required")
        sources.append(
            IndexSource(
                str(entry["name"]),
                str(entry["url"]),
                public=bool(entry.get("public", entry["name"] in Constants.PUBLIC_INDICES)),
            )
        )
    return sources


def get_env_with_fallback(env_name: str, fallback: Optional[str]) -> Optional[str]:
    """Return the environment value when the variable is set, else fallback."""
    if env_name in os.environ:
        return os.environ[env_name]
    return fallback


def prompt_for_token(stdin: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> str:
    """Ask for the token interactively on stderr, reading the answer from stdin.

    Raises:
        AuthRequiredError: If nothing was entered.
    """
    stdin = sys.stdin if stdin is None else stdin
    stderr = sys.stderr if stderr is None else stderr
    stderr.write(
        "Specifying an auth token is required. Use `"
        + Constants.TOKEN_HINT_COMMAND
        + "` to get the required token. Please enter token now - alternatively, you can also "
        "specify this via --auth-token flag or by setting "
        + Constants.ENV_HTTP_AUTH
        + " environment variable: "
    )
    stderr.flush()
    token = stdin.readline().strip("\r\n")
    if not token:
        raise AuthRequiredError("No auth token provided")
    return token


def resolve_auth_token(
    cli_token: Optional[str],
    needs_auth: bool,
    stdin: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> Optional[str]:
    """Pick the token from HTTP_AUTH, then --auth-token, then the prompt.

    The prompt only happens when a non-public index is configured.
    """
    token = get_env_with_fallback(Constants.ENV_HTTP_AUTH, cli_token)
    if token:
        logger.debug("Using auth token %s", redact(token))
        return token
    if not needs_auth:
        return None
    return prompt_for_token(stdin, stderr)


def build_run_config(
    args: Any, stdin: Optional[TextIO] = None, stderr: Optional[TextIO] = None
) -> RunConfig:
    """Create the RunConfig for parsed CLI arguments.

    Precedence for the index list: --local-apkindex, then the config file,
    then the built-in defaults.

    Raises:
        ConfigError: On an unusable --config file.
        AuthRequiredError: When a token is needed and none was supplied.
    """
    data: Dict[str, Any] = {}
    config_path = getattr(args, "CONFIG", None)
    if config_path:
        data = load_config_file(config_path)
        logger.info("Loaded config from: %s", config_path)

    local = getattr(args, "LOCAL_APKINDEX", None)
    if local:
        sources = local_sources(local)
    else:
        sources = sources_from_config(data) or default_sources()

    config = RunConfig(sources=sources)
    if data.get("timeout") is not None:
        try:
            config.timeout = float(data["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout {data['timeout']!r}") from e
    if data.get("max_workers") is not None:
        try:
            config.max_workers = max(1, int(data["max_workers"]))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid max_workers {data['max_workers']!r}") from e

    config.auth_token = resolve_auth_token(
        getattr(args, "AUTH_TOKEN", None), config.needs_auth, stdin, stderr
    )
    return config
