"""
ingestion/normalizer.py
-----------------------
Column-name normalisation for raw record tables.

Survey exports name their columns inconsistently (``Participant ID``,
``participantId``, ``participant-id``).  The loaders normalise headers to
snake_case before looking columns up.
"""

from __future__ import annotations

import re

import pandas as pd


def normalize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize DataFrame column names:

    * Strip leading/trailing whitespace.
    * Split camelCase words (``regionId`` → ``region_id``).
    * Convert to lowercase.
    * Replace spaces and special characters with underscores.
    * Collapse consecutive underscores.

    Args:
        df: Input DataFrame.

    Returns:
        New DataFrame with normalized column names (data unchanged).
    """
    rename_map = {}
    for position, col in enumerate(df.columns):
        new_col = str(col).strip()
        new_col = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", new_col)
        new_col = new_col.lower()
        new_col = re.sub(r"[\s\-/\\\.]+", "_", new_col)
        new_col = re.sub(r"[^a-z0-9_]", "", new_col)
        new_col = re.sub(r"_+", "_", new_col).strip("_")
        rename_map[col] = new_col or f"col_{position}"

    return df.rename(columns=rename_map)
