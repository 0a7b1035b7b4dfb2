from __future__ import annotations

from typing import Sequence

import pandas as pd


def validate_required_columns(
    df: pd.DataFrame,
    required: Sequence[str],
    table_name: str = "",
) -> None:
    """
    Ensure all required columns are present in the DataFrame.
    Raise ValueError if any are missing.
    """
    missing = [c for c in required if c not in df.columns]
    if missing:
        prefix = f"{table_name}: " if table_name else ""
        raise ValueError(f"{prefix}missing required columns: {missing}")


def validate_unique_keys(
    df: pd.DataFrame,
    keys: Sequence[str],
    table_name: str = "",
) -> None:
    """
    Ensure no two rows share the same key, so a left join cannot multiply rows.

    We allow empty DataFrames.
    """
    if df.empty:
        return

    duplicated = df.duplicated(subset=list(keys), keep=False)
    if duplicated.any():
        prefix = f"{table_name}: " if table_name else ""
        sample = df.loc[duplicated, list(keys)].drop_duplicates().head(5).to_dict(orient="records")
        raise ValueError(
            f"{prefix}found {int(duplicated.sum())} rows with duplicate keys on {list(keys)}. "
            f"Examples: {sample}"
        )
