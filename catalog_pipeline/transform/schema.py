import logging
from typing import List

import pandas as pd

from catalog_pipeline.errors import DomainError, SchemaError

DROPPED_COLUMNS: List[str] = ["description"]
RENAMED_COLUMNS: dict[str, str] = {"listed_in": "genre"}


def normalize_schema(df_input: pd.DataFrame) -> pd.DataFrame:
    """
    Entfernt die Freitext-Beschreibung und benennt die Genre-Liste um.

    Args:
        df_input: Geladenes Roh-DataFrame (12 Spalten).

    Returns:
        Neues DataFrame ohne 'description' und mit 'genre' statt 'listed_in'.

    Raises:
        SchemaError: Wenn eine der erwarteten Spalten fehlt.
    """
    missing = set(DROPPED_COLUMNS + list(RENAMED_COLUMNS)).difference(df_input.columns)
    if missing:
        raise SchemaError(missing, stage="Schema-Normalisierung")

    df = df_input.copy()
    df = df.drop(columns=DROPPED_COLUMNS).rename(columns=RENAMED_COLUMNS)
    logging.info(
        f"Schema: {DROPPED_COLUMNS} entfernt, {RENAMED_COLUMNS} umbenannt "
        f"({len(df)} Zeilen, {len(df.columns)} Spalten).")
    return df


def cast_release_year(df_input: pd.DataFrame, column: str = "release_year") -> pd.DataFrame:
    """Typisiert das Erscheinungsjahr als Int64; leere oder nicht-ganzzahlige Werte sind ein DomainError."""
    if column not in df_input.columns:
        raise SchemaError([column], stage="Jahr-Typisierung")

    df = df_input.copy()
    text = df[column].astype("string").str.strip()
    is_integer = text.str.fullmatch(r"\d+").fillna(False).astype(bool)
    if not is_integer.all():
        bad = df.loc[~is_integer]
        raise DomainError(column, list(zip(bad["show_id"], bad[column])),
                          detail="Erwartet wird eine ganze Zahl (Basis 10).")

    df[column] = text.astype("Int64")
    return df
