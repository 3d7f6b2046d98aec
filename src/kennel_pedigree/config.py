"""Configuration constants for kennel-pedigree."""

import os
from pathlib import Path

# Deepest pedigree the engine will build. Generation 0 is the dog itself.
MAX_GENERATIONS: int = 6

# Depth offered by the pedigree chart and used when the caller does not ask.
DEFAULT_GENERATIONS: int = 4

# How far up a candidate parent's ancestry we look for the dog being edited.
CYCLE_CHECK_GENERATIONS: int = MAX_GENERATIONS

# COI risk bands, as fractions (6.25%, 12.5%, 25%).
COI_MODERATE_THRESHOLD: float = 0.0625
COI_HIGH_THRESHOLD: float = 0.125
COI_VERY_HIGH_THRESHOLD: float = 0.25

# Directory with the pedigree database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/kennel-pedigree").expanduser(),
    Path("~/.kennel-pedigree").expanduser(),
    Path("~/.config/kennel-pedigree").expanduser(),
]

DATABASE_FILENAME: str = "pedigree.db"

# API token location for the GraphQL adapter. First file found is used.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/kennel-pedigree-token.txt").expanduser(),
    Path("~/.config/secret/kennel-pedigree-token.txt").expanduser(),
]

GRAPHQL_URL: str = os.environ.get(
    "KENNEL_PEDIGREE_GRAPHQL_URL", "http://localhost:4000/graphql"
)

# Seconds before a GraphQL request is abandoned.
GRAPHQL_TIMEOUT: float = 30.0


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the preferred default."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
