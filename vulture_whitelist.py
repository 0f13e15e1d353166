"""Vulture whitelist — false positives that should not be flagged as dead code."""

# Typer registers these commands through decorators
_global_options  # type: ignore[name-defined]  # noqa: B018
deps  # type: ignore[name-defined]  # noqa: B018
config_set  # type: ignore[name-defined]  # noqa: B018
config_get  # type: ignore[name-defined]  # noqa: B018
config_list  # type: ignore[name-defined]  # noqa: B018
config_keys  # type: ignore[name-defined]  # noqa: B018

# Context manager protocol on LinearClient
__enter__  # type: ignore[name-defined]  # noqa: B018
__exit__  # type: ignore[name-defined]  # noqa: B018

# Mock setup in tests
_.headers  # type: ignore[name-defined]  # noqa: B018
