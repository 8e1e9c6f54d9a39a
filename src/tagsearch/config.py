"""Application configuration loaded from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping

import httpx

from tagsearch.embedding.encoder import DEFAULT_DIMENSIONS, DEFAULT_MODEL
from tagsearch.errors import ConfigurationError, TargetNotFoundError
from tagsearch.models import DatabaseTarget

ENV_PREFIX = "TAGSEARCH_"
DEFAULT_TOP_K = 10
DEFAULT_TIMEOUT = 30.0

# Display names for the first two indexes when no NAME is set.
_DEFAULT_TARGET_NAMES = {
    1: "Combined & Concatenated",
    2: "Categories Only",
}

ColumnPolicy = Literal["result", "fixed"]


def _check_url(variable: str, url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid {variable}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(f"{variable} must be an absolute http(s) URL: {url!r}")


def _load_targets(environ: Mapping[str, str]) -> tuple[DatabaseTarget, ...]:
    """Read ``TAGSEARCH_DB_<n>_*`` variables until the first gap."""
    targets: list[DatabaseTarget] = []
    number = 1
    while True:
        prefix = f"{ENV_PREFIX}DB_{number}_"
        url = environ.get(prefix + "URL", "").strip()
        if not url:
            break
        token = environ.get(prefix + "TOKEN", "").strip()
        if not token:
            raise ConfigurationError(f"{prefix}TOKEN is required when {prefix}URL is set")
        name = environ.get(prefix + "NAME", "").strip() or _DEFAULT_TARGET_NAMES.get(
            number, f"Database {number}"
        )
        _check_url(prefix + "URL", url)
        targets.append(DatabaseTarget(name=name, url=url.rstrip("/"), token=token))
        number += 1

    names = [target.name for target in targets]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Database names must be unique: {names}")
    return tuple(targets)


def _split_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True, slots=True)
class AppConfig:
    targets: tuple[DatabaseTarget, ...] = ()
    openai_api_key: str | None = None
    embedding_model: str = DEFAULT_MODEL
    dimensions: int = DEFAULT_DIMENSIONS
    top_k: int = DEFAULT_TOP_K
    timeout_seconds: float = DEFAULT_TIMEOUT
    sources: tuple[str, ...] = ()
    column_policy: ColumnPolicy = "result"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ

        timeout_raw = env.get(ENV_PREFIX + "TIMEOUT", "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}TIMEOUT: {timeout_raw!r}") from exc
        if timeout <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT must be positive")

        policy = env.get(ENV_PREFIX + "COLUMN_POLICY", "result").strip().lower() or "result"
        if policy not in ("result", "fixed"):
            raise ConfigurationError(f"Unknown column policy: {policy!r}")

        return cls(
            targets=_load_targets(env),
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            embedding_model=env.get(ENV_PREFIX + "EMBEDDING_MODEL", "").strip() or DEFAULT_MODEL,
            timeout_seconds=timeout,
            sources=_split_list(env.get(ENV_PREFIX + "SOURCES", "")),
            column_policy=policy,  # type: ignore[arg-type]
        )

    @property
    def target_names(self) -> list[str]:
        return [target.name for target in self.targets]

    def get_target(self, name: str | None = None) -> DatabaseTarget:
        """Return the named target, or the first one when no name is given."""
        if not name:
            if not self.targets:
                raise TargetNotFoundError(name)
            return self.targets[0]
        for target in self.targets:
            if target.name == name:
                return target
        raise TargetNotFoundError(name)
