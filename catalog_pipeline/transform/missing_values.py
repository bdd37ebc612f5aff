import logging
from typing import Iterable

import pandas as pd

from catalog_pipeline.errors import DomainError, SchemaError

DEFAULT_CONTENT_TYPES: tuple[str, str] = ("Movie", "TV Show")


def normalize_missing_values(
    df_input: pd.DataFrame,
    content_types: Iterable[str] = DEFAULT_CONTENT_TYPES,
) -> pd.DataFrame:
    """
    Ersetzt leere Strings in allen Spalten durch pd.NA und prüft die Spalte 'type'.

    Alle Spalten werden als pandas 'string'-Dtype geführt, damit pd.NA der
    einheitliche Null-Marker ist. Andere Werte bleiben unverändert.

    Args:
        df_input: DataFrame nach der Schema-Normalisierung (nur Text).
        content_types: Erlaubte Werte der Spalte 'type'.

    Returns:
        Neues DataFrame mit pd.NA statt "".

    Raises:
        SchemaError: Wenn die Spalte 'type' fehlt.
        DomainError: Wenn 'type' einen anderen Wert (oder NA) enthält.
    """
    if "type" not in df_input.columns:
        raise SchemaError(["type"], stage="Missing-Value-Normalisierung")

    df = df_input.copy()
    n_replaced = 0
    for col in df.columns:
        series = df[col].astype("string")
        empty_mask = series.isin([""])
        n_replaced += int(empty_mask.sum())
        df[col] = series.mask(empty_mask, pd.NA)
    logging.info(f"Missing Values: {n_replaced} leere Zellen durch NA ersetzt.")

    allowed = list(content_types)
    unexpected = ~df["type"].isin(allowed)
    if unexpected.any():
        bad = df.loc[unexpected]
        raise DomainError("type", list(zip(bad["show_id"], bad["type"])),
                          detail=f"Erlaubt sind nur {allowed}.")

    return df
