"""
Settings — Default configuration values for the Nacelle node sourcing connector.

This module provides the DEFAULT_SETTINGS dict that the orchestrator uses as
fallback values when environment variables are not set. The actual
configuration is loaded from .env at runtime.

Configuration precedence (highest to lowest):
  1. CLI flags (--verbose, --fragments-dir, --no-save)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Required environment variables (no defaults):
  NACELLE_SPACE_ID        Nacelle space identifier
  NACELLE_GRAPHQL_TOKEN   Nacelle space GraphQL token

Settings reference:
  NACELLE_ENDPOINT        GraphQL endpoint URL
  PROVIDER_NAME           Label used in snapshot folder naming
  FRAGMENTS_DIR           Fragment cache directory (one .graphql file per type)
  TYPE_PREFIX             Prefix of node types (e.g., "NacelleProduct")
  OUTPUT_DIR              Where to write snapshots (default: ./output)
  OUTPUT_RETENTION_DAYS   How many days to keep old snapshots (0 = keep forever)
  SAVE_JSON               Whether to write the node snapshot to disk
  VERBOSE                 Whether to print every operation and its variables
"""

PROVIDER_NAME = "Nacelle_Space"

DEFAULT_SETTINGS = {
    "NACELLE_ENDPOINT": "https://hailfrequency.com/v2/graphql",
    "PROVIDER_NAME": PROVIDER_NAME,
    "FRAGMENTS_DIR": "./gql-fragments",
    "TYPE_PREFIX": "Nacelle",
    "OUTPUT_DIR": "./output",
    "OUTPUT_RETENTION_DAYS": 30,
    "SAVE_JSON": True,
    "VERBOSE": False,
}
