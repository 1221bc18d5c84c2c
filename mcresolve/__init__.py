"""Main module for the mcresolve API.

This package resolves a game version's metadata, following its inheritance chain,
into a single merged and platform-filtered launch specification. Start with the
`standard` module, `Resolver` and `resolve_version` are the main entry points.
"""

RESOLVER_NAME = "mcresolve"
RESOLVER_VERSION = "1.0.0"
RESOLVER_AUTHORS = ["mcresolve contributors"]
RESOLVER_URL = "https://github.com/mcresolve/mcresolve"
