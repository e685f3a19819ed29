"""
Training-data curation for prompt/completion datasets.

Raw documents are normalised, classified into one of a fixed set of formats
and mined for prompt/completion pairs by a per-format strategy. Stored
datasets can be cleaned, exported, imported and analyzed for quality,
diversity, readability and balance.
"""

from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("dataset-curator")
except PackageNotFoundError:  # pragma: no cover - local editable install
    __version__ = "0.1.0"
