import logging

import pandas as pd

from catalog_pipeline.errors import SchemaError, UnparseableDurationError

SEASON_PATTERN: str = r"\bSeasons?\b"
MINUTES_MARKER: str = "min"
LEADING_INT_PATTERN: str = r"(\d+)"


def split_duration(df_input: pd.DataFrame, source_col: str = "duration") -> pd.DataFrame:
    """
    Teilt 'duration' in 'season_total' (Serien) und 'movie_length' (Filme, Minuten).

    Genau eine der beiden neuen Spalten ist pro Zeile belegt. Die Zahl ist
    jeweils die erste Ganzzahl im Text ("3 Seasons" -> 3, "90 min" -> 90).

    Raises:
        SchemaError: Wenn `source_col` fehlt.
        UnparseableDurationError: Für Werte, die weder Staffeln noch Minuten sind.
    """
    if source_col not in df_input.columns:
        raise SchemaError([source_col], stage="Laufzeit-Aufteilung")

    df = df_input.copy()
    text = df[source_col].astype("string").str.strip()
    is_season = text.str.contains(SEASON_PATTERN, regex=True, na=False).astype(bool)
    is_minutes = ~is_season & text.str.contains(MINUTES_MARKER, regex=False, na=False).astype(bool)
    numbers = text.str.extract(LEADING_INT_PATTERN, expand=False).astype("Int64")

    unparseable = ~(is_season | is_minutes) | numbers.isna()
    if unparseable.any():
        bad = df.loc[unparseable]
        raise UnparseableDurationError(list(zip(bad["show_id"], bad[source_col])))

    df = df.drop(columns=[source_col])
    df["season_total"] = numbers.where(is_season)
    df["movie_length"] = numbers.where(is_minutes)
    logging.info(
        f"Laufzeit: {int(is_minutes.sum())} Filme (Minuten), {int(is_season.sum())} Serien (Staffeln).")
    return df
