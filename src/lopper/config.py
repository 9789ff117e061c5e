"""Protected branch configuration."""

from collections.abc import Iterable

DEFAULT_PROTECTED_BRANCHES = frozenset({"main", "master", "development", "dev", "testing", "test"})


def parse_protect_option(value: str) -> list[str]:
    """Split a comma-separated ``--protect`` value into patterns."""
    return [p.strip() for p in value.split(",") if p.strip()]


def resolve_protected(
    configured: Iterable[str] = (),
    extra: Iterable[str] = (),
    defaults: Iterable[str] = DEFAULT_PROTECTED_BRANCHES,
) -> frozenset[str]:
    """Combine the built-in, per-repository and per-invocation protected names."""
    return frozenset(defaults) | frozenset(configured) | frozenset(extra)
