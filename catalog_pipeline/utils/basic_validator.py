import logging
from typing import List, Tuple
from datetime import datetime
import pandas as pd
from pathlib import Path

from catalog_pipeline.errors import CatalogValidationError

CURRENT_YEAR: int = datetime.now().year
YEAR_MIN: int = 1888
YEAR_MAX: int = CURRENT_YEAR + 1
OUTPUT_COLUMNS: List[str] = [
    "show_id", "type", "title", "director", "cast", "country", "release_year",
    "rating", "genre", "date_added_as_date", "season_total", "movie_length",
]
DEFAULT_CONTENT_TYPES: dict[str, str] = {"movie": "Movie", "show": "TV Show"}


def validate_dataframe(
    df: pd.DataFrame,
    *,
    df_name: str | None = None,
    expected_rows: int | None = None,
    content_types: dict[str, str] | None = None,
    forbidden_ratings: List[str] | None = None,
    log_level: int = logging.WARNING,
    error_report_path: str | None = None,
    save_invalid_rows: bool = False,
    invalid_rows_output_path: str = "invalid_rows_found.csv",
) -> Tuple[bool, List[str]]:
    """
    Prüft die Invarianten des bereinigten Katalogs.

    Geprüft werden Spalten und Reihenfolge, show_id (eindeutig, nicht leer),
    title, release_year, die Rating-Domäne (kein "min", keine veralteten Codes,
    kein NA) sowie die Exklusivität von movie_length/season_total passend zu 'type'.

    Returns:
        (ok, errors) – ok ist True, wenn keine Fehler gefunden wurden.
    """
    name = df_name or "DataFrame"
    types = content_types or DEFAULT_CONTENT_TYPES
    errors: List[str] = []
    invalid_rows_parts: List[pd.DataFrame] = []

    # 0) Zeilenanzahl
    if expected_rows is not None and len(df) != expected_rows:
        errors.append(f"{name}: {len(df)} Zeilen, erwartet {expected_rows}.")

    # 1) Spalten + Reihenfolge
    missing = set(OUTPUT_COLUMNS).difference(df.columns)
    if missing:
        errors.append(f"{name}: fehlende Spalten: {', '.join(sorted(missing))}")
        # Ohne vollständiges Schema sind die Zeilenprüfungen nicht aussagekräftig
        for msg in errors:
            logging.log(log_level, msg)
        _write_error_report(name, errors, error_report_path)
        return False, errors
    if list(df.columns) != OUTPUT_COLUMNS:
        errors.append(f"{name}: Spaltenreihenfolge weicht ab: {list(df.columns)}")

    # 2) Primärschlüssel
    null_ids = df["show_id"].isna()
    if null_ids.any():
        errors.append(f"{name}: {int(null_ids.sum())} Zeilen ohne show_id.")
        invalid_rows_parts.append(df[null_ids])
    dup_ids = df["show_id"].duplicated(keep=False) & ~null_ids
    if dup_ids.any():
        errors.append(f"{name}: {int(dup_ids.sum())} Zeilen mit doppelter show_id.")
        invalid_rows_parts.append(df[dup_ids])

    null_titles = df["title"].isna()
    if null_titles.any():
        errors.append(f"{name}: {int(null_titles.sum())} Zeilen ohne title.")
        invalid_rows_parts.append(df[null_titles])

    # 3) Jahr
    invalid_year_mask = (~df["release_year"].between(YEAR_MIN, YEAR_MAX)).fillna(True).astype(bool) \
        | df["release_year"].isna()
    if invalid_year_mask.any():
        errors.append(
            f"{name}: {int(invalid_year_mask.sum())} Zeilen mit ungültigem Jahr "
            f"(<{YEAR_MIN} oder >{YEAR_MAX} oder NA) in Spalte 'release_year'.")
        invalid_rows_parts.append(df[invalid_year_mask])

    # 4) Rating-Domäne
    rating = df["rating"].astype("string")
    rating_problems = {
        "enthalten eine Laufzeit ('min')": rating.str.contains("min", regex=False, na=False).astype(bool),
        "sind NA": rating.isna(),
    }
    for code in forbidden_ratings or []:
        rating_problems[f"haben den veralteten Code '{code}'"] = rating.isin([code])
    for label, mask in rating_problems.items():
        if mask.any():
            errors.append(f"{name}: {int(mask.sum())} Ratings {label}.")
            invalid_rows_parts.append(df[mask])

    # 5) Laufzeit-Exklusivität passend zum Typ
    is_movie = df["type"].eq(types["movie"]).fillna(False).astype(bool)
    is_show = df["type"].eq(types["show"]).fillna(False).astype(bool)
    has_length = df["movie_length"].notna()
    has_seasons = df["season_total"].notna()
    bad_duration = (has_length == has_seasons) | (has_length != is_movie) | (has_seasons != is_show)
    if bad_duration.any():
        errors.append(
            f"{name}: {int(bad_duration.sum())} Zeilen, bei denen movie_length/season_total "
            f"nicht exakt zum Typ passen.")
        invalid_rows_parts.append(df[bad_duration])

    if not pd.api.types.is_datetime64_any_dtype(df["date_added_as_date"]):
        errors.append(
            f"{name}: Spalte date_added_as_date ist kein Datum (dtype={df['date_added_as_date'].dtype}).")

    for msg in errors:
        logging.log(log_level, msg)

    # --- Fehlerhafte Zeilen speichern ---
    if save_invalid_rows:
        try:
            if invalid_rows_parts:
                invalid_df = pd.concat(invalid_rows_parts)
                invalid_df = invalid_df[~invalid_df.index.duplicated()]
            else:
                # Leere CSV mit Spaltenkopf erstellen
                invalid_df = df.head(0).copy()
            out_path = Path(invalid_rows_output_path)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            invalid_df.to_csv(out_path, index=False)
            logging.info(
                f"{name}: Fehlerhafte Zeilen gespeichert unter {out_path} (Anzahl: {len(invalid_df)})"
            )
        except OSError as e:
            logging.error(
                f"{name}: Fehler beim Speichern fehlerhafter Zeilen: {e}")

    _write_error_report(name, errors, error_report_path)
    return len(errors) == 0, errors


def _write_error_report(name: str, errors: List[str], error_report_path: str | None) -> None:
    if not (error_report_path and errors):
        return
    try:
        rep_path = Path(error_report_path)
        rep_path.parent.mkdir(parents=True, exist_ok=True)
        rep_path.write_text("\n".join(errors), encoding="utf-8")
        logging.info(f"{name}: Fehlerreport gespeichert unter {rep_path}")
    except OSError as e:
        logging.error(
            f"{name}: Fehler beim Speichern des Fehlerreports: {e}")


def validate_or_raise(
    df: pd.DataFrame,
    **kwargs,
) -> None:
    ok, errs = validate_dataframe(df, **kwargs)
    if not ok:
        raise CatalogValidationError(kwargs.get("df_name") or "DataFrame", errs)
