# catalog_pipeline/transform/ratings.py
import logging
from typing import List

import pandas as pd

from catalog_pipeline.errors import DomainError, SchemaError, UnmappedNullError

# Kennzeichen einer Laufzeit, die versehentlich in 'rating' gelandet ist ("74 min")
DURATION_MARKER: str = "min"
REQUIRED_COLUMNS: List[str] = ["show_id", "rating", "duration"]
CHANGE_COLUMNS: List[str] = ["show_id", "column", "old_value", "new_value"]


def _rating_text(df: pd.DataFrame) -> pd.Series:
    return df["rating"].astype("string")


def repair_duration_swap(df_input: pd.DataFrame, swap_config: dict) -> pd.DataFrame:
    """
    Repariert Zeilen, in denen die Laufzeit in 'rating' statt in 'duration' steht.

    Der Ersatzwert für 'rating' ist extern verifiziert (swap_config['rating'])
    und gilt für alle in swap_config['show_ids'] gelisteten Zeilen.

    Raises:
        DomainError: Wenn eine betroffene Zeile bereits eine 'duration' hat
                     oder nicht in der Konfiguration gelistet ist.
    """
    df = df_input.copy()
    rating = _rating_text(df)
    swapped = rating.str.contains(DURATION_MARKER, regex=False, na=False).astype(bool)
    configured_ids = set(swap_config.get("show_ids", []))

    if not swapped.any():
        if configured_ids:
            logging.warning(
                f"Ratings: keine vertauschten Laufzeiten gefunden, konfiguriert waren {sorted(configured_ids)}.")
        return df

    affected = df.loc[swapped]
    occupied = affected[affected["duration"].notna()]
    if not occupied.empty:
        raise DomainError("duration", list(zip(occupied["show_id"], occupied["duration"])),
                          detail="'rating' enthält eine Laufzeit, 'duration' ist aber bereits belegt.")

    unlisted = affected[~affected["show_id"].isin(list(configured_ids))]
    if not unlisted.empty:
        raise DomainError("rating", list(zip(unlisted["show_id"], unlisted["rating"])),
                          detail="Zeilen mit Laufzeit in 'rating' fehlen in swap_repair.show_ids.")

    not_found = configured_ids.difference(affected["show_id"])
    if not_found:
        logging.warning(f"Ratings: konfigurierte swap_repair-IDs nicht betroffen: {sorted(not_found)}")

    df.loc[swapped, "duration"] = df.loc[swapped, "rating"]
    df.loc[swapped, "rating"] = swap_config["rating"]
    logging.info(
        f"Ratings: {int(swapped.sum())} vertauschte Laufzeiten nach 'duration' verschoben, "
        f"rating='{swap_config['rating']}' gesetzt.")
    return df


def normalize_rating_synonyms(df_input: pd.DataFrame, synonyms: dict[str, str]) -> pd.DataFrame:
    """Ersetzt veraltete Rating-Codes exakt (case-sensitiv) durch den kanonischen Code."""
    df = df_input.copy()
    rating = _rating_text(df)
    for deprecated, canonical in synonyms.items():
        mask = rating.isin([deprecated])
        if mask.any():
            df.loc[mask, "rating"] = canonical
            logging.info(f"Ratings: {int(mask.sum())}x '{deprecated}' -> '{canonical}'.")
    return df


def fill_reference_ratings(df_input: pd.DataFrame, reference: dict[str, str]) -> pd.DataFrame:
    """
    Füllt fehlende Ratings aus der externen Referenz-Zuordnung show_id -> rating.

    Vorhandene Ratings werden nie überschrieben.

    Raises:
        UnmappedNullError: Wenn ein fehlendes Rating keinen Referenzeintrag hat.
    """
    df = df_input.copy()
    missing = df["rating"].isna()
    if not missing.any():
        return df

    unmapped = df.loc[missing & ~df["show_id"].isin(list(reference)), "show_id"]
    if not unmapped.empty:
        raise UnmappedNullError("rating", unmapped.tolist())

    df.loc[missing, "rating"] = df.loc[missing, "show_id"].map(reference)
    logging.info(f"Ratings: {int(missing.sum())} fehlende Werte aus Referenz gefüllt.")
    return df


def repair_ratings(df_input: pd.DataFrame, corrections: dict) -> pd.DataFrame:
    """
    Führt die drei Rating-Reparaturen in fester Reihenfolge aus.

    1. Laufzeit/Rating-Vertauschung (swap_repair)
    2. Synonym-Normalisierung (rating_synonyms, z.B. UR -> NR)
    3. Referenz-Füllung fehlender Werte (reference_ratings)

    Args:
        df_input: DataFrame nach der Datums-Normalisierung.
        corrections: Geladene Korrektur-Konfiguration (siehe corrections.yaml).

    Returns:
        Neues DataFrame; kein Rating enthält danach "min", keines ist NA.
    """
    missing = set(REQUIRED_COLUMNS).difference(df_input.columns)
    if missing:
        raise SchemaError(missing, stage="Rating-Reparatur")

    logging.info(f"Ratings: Korrekturen Version {corrections.get('version', 'unbekannt')}.")
    df = repair_duration_swap(df_input, corrections.get("swap_repair", {}))
    df = normalize_rating_synonyms(df, corrections.get("rating_synonyms", {}))
    df = fill_reference_ratings(df, corrections.get("reference_ratings", {}))
    return df


def collect_rating_changes(before: pd.DataFrame, after: pd.DataFrame) -> list[dict]:
    """Listet alle durch die Reparatur geänderten Zellen (für die Audit-CSV)."""
    changes: list[dict] = []
    for col in ("rating", "duration"):
        old = before[col].astype("string")
        new = after[col].astype("string")
        changed = old.fillna("\0").ne(new.fillna("\0")).to_numpy(dtype=bool)
        for idx in before.index[changed]:
            changes.append({
                "show_id": before.at[idx, "show_id"],
                "column": col,
                "old_value": old.at[idx],
                "new_value": new.at[idx],
            })
    return changes
