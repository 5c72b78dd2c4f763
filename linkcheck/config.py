"""Typed link-checker configuration with JSON/YAML load/save helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlsplit

import yaml  # type: ignore

from .constants import (
    DEFAULT_DEBUG,
    DEFAULT_EXTERNAL_LINKS,
    DEFAULT_HTTP_HEADERS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    DEFAULT_VERBOSE,
    JSON_INDENT,
    SUPPORTED_CONFIG_SUFFIXES,
)
from .types import JSONDict, JSONValue
from .url import HTTP_SCHEMES, in_root, normalize_url, split_fragment


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"Invalid bool for '{key}': {value!r}")


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid float for '{key}': {value!r}") from exc


def normalize_root(root: str) -> str:
    """Normalize the crawl root, rejecting anything that cannot be crawled."""

    normalized = normalize_url(root)
    if normalized is None:
        raise ValueError(f"Invalid root URL: {root!r}")

    if urlsplit(normalized).scheme not in HTTP_SCHEMES:
        raise ValueError(f"Root URL must use http or https: {root!r}")

    base, _ = split_fragment(normalized)
    return base


@dataclass(slots=True)
class CheckConfig:
    """Top-level configuration shared by the checker, fetcher, and CLI."""

    root: str

    verbose: bool = DEFAULT_VERBOSE
    debug: bool = DEFAULT_DEBUG
    external_links: bool = DEFAULT_EXTERNAL_LINKS

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))

    metadata: dict[str, JSONValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.root or not self.root.strip():
            raise ValueError("CheckConfig requires a root URL")
        self.root = normalize_root(self.root)

        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    def in_root(self, url: str) -> bool:
        """Check whether a normalized URL falls under the crawl root."""

        return in_root(url, self.root)

    def headers_for(self, url: str) -> dict[str, str]:
        """Return request headers for a URL."""

        merged: dict[str, str] = dict(self.default_headers)
        merged.setdefault("User-Agent", self.user_agent)
        return merged

    def to_dict(self) -> JSONDict:
        """Serialize config for reproducibility."""

        return {
            "root": self.root,
            "verbose": self.verbose,
            "debug": self.debug,
            "external_links": self.external_links,
            "timeout_seconds": self.timeout_seconds,
            "user_agent": self.user_agent,
            "default_headers": self.default_headers,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CheckConfig":
        """Build config from a parsed dictionary."""

        if not payload.get("root"):
            raise ValueError("Config missing required key: 'root'")

        return cls(
            root=str(payload["root"]),
            verbose=_as_bool(payload.get("verbose", DEFAULT_VERBOSE), "verbose"),
            debug=_as_bool(payload.get("debug", DEFAULT_DEBUG), "debug"),
            external_links=_as_bool(
                payload.get("external_links", DEFAULT_EXTERNAL_LINKS),
                "external_links",
            ),
            timeout_seconds=_as_float(
                payload.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
                "timeout_seconds",
            ),
            user_agent=str(payload.get("user_agent", DEFAULT_USER_AGENT)),
            default_headers={
                str(k): str(v)
                for k, v in dict(payload.get("default_headers", DEFAULT_HTTP_HEADERS)).items()
            },
            metadata=dict(payload.get("metadata", {})),
        )


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config at {path} must be a mapping at top level")
    return data


def load_config_payload(path: str | Path) -> dict[str, Any]:
    """Read a JSON/YAML config file into a plain mapping without validating it."""

    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    if suffix == ".json":
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    else:
        payload = _load_yaml(config_path)

    if not isinstance(payload, dict):
        raise ValueError(f"Config at {config_path} must be a mapping")

    return payload


def load_config(path: str | Path) -> CheckConfig:
    """Load CheckConfig from JSON/YAML path."""

    return CheckConfig.from_dict(load_config_payload(path))


def save_config(config: CheckConfig, path: str | Path) -> None:
    """Save CheckConfig as JSON or YAML based on file extension."""

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = out_path.suffix.lower()
    payload = config.to_dict()

    if suffix == ".json":
        out_path.write_text(
            json.dumps(payload, indent=JSON_INDENT, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return

    if suffix in {".yaml", ".yml"}:
        out_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        return

    raise ValueError(
        f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
    )


__all__ = [
    "CheckConfig",
    "load_config",
    "load_config_payload",
    "normalize_root",
    "save_config",
]
