# catalog_pipeline/adapters/netflix_adapter.py
import logging
from functools import partial
from pathlib import Path
from typing import Callable, List, Tuple

import pandas as pd
from catalog_pipeline.adapters.base_adapter import BaseAdapter
from catalog_pipeline.errors import CatalogValidationError, LoadError
from catalog_pipeline.transform.dates import normalize_date_added
from catalog_pipeline.transform.duration import split_duration
from catalog_pipeline.transform.missing_values import normalize_missing_values
from catalog_pipeline.transform.ratings import CHANGE_COLUMNS, collect_rating_changes, repair_ratings
from catalog_pipeline.transform.schema import cast_release_year, normalize_schema
from catalog_pipeline.utils.basic_validator import DEFAULT_CONTENT_TYPES, OUTPUT_COLUMNS
from catalog_pipeline.utils.corrections import load_corrections

EXPECTED_COLUMNS: List[str] = [
    "show_id", "type", "title", "director", "cast", "country", "date_added",
    "release_year", "rating", "duration", "listed_in", "description",
]


def read_catalog_csv(path: str | Path) -> pd.DataFrame:
    """
    Liest den Netflix-Export als reines Text-DataFrame.

    Leere Zellen bleiben leere Strings; die Umwandlung in NA ist Aufgabe der
    Missing-Value-Normalisierung.

    Raises:
        LoadError: Datei fehlt, ist nicht lesbar/parsbar oder der Header
                   entspricht nicht den 12 erwarteten Spalten.
    """
    csv_path = Path(path)
    if not csv_path.is_file():
        raise LoadError(csv_path, "Datei nicht gefunden")

    try:
        df = pd.read_csv(csv_path, dtype="string", keep_default_na=False,
                         na_filter=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise LoadError(csv_path, str(e)) from e

    if list(df.columns) != EXPECTED_COLUMNS:
        raise LoadError(
            csv_path,
            f"Header {list(df.columns)} entspricht nicht dem erwarteten Schema {EXPECTED_COLUMNS}")
    logging.info(f"{len(df)} Zeilen aus {csv_path.name} geladen.")
    return df


class NetflixAdapter(BaseAdapter):
    """Adapter für den Netflix-Katalog (netflix_titles.csv).

    • show_id             str, eindeutig, nie NA
    • type                'Movie' | 'TV Show'
    • release_year        Int64
    • rating              str, repariert, nie NA
    • date_added_as_date  datetime64 (nur Datum), NA erlaubt
    • season_total / movie_length  Int64, genau eine Spalte belegt
    """

    def __init__(self, source_config: dict):
        super().__init__(source_config)
        if "corrections" in source_config:
            self.corrections: dict = source_config["corrections"]
        else:
            self.corrections = load_corrections(source_config["corrections_path"])
        self.content_types: dict[str, str] = source_config.get("content_types", DEFAULT_CONTENT_TYPES)
        self.repaired_rows: list[dict] = []

    # ------------------------------------------------------------ #
    # 1) Extract                                                   #
    # ------------------------------------------------------------ #
    def extract(self) -> pd.DataFrame:  # type: ignore[override]
        return read_catalog_csv(self.config["file_path"])

    # ------------------------------------------------------------ #
    # 2) Transform                                                 #
    # ------------------------------------------------------------ #
    def stages(self) -> List[Tuple[str, Callable[[pd.DataFrame], pd.DataFrame]]]:
        return [
            ("Schema", normalize_schema),
            ("Missing Values", partial(normalize_missing_values,
                                       content_types=list(self.content_types.values()))),
            ("Erscheinungsjahr", cast_release_year),
            ("Datum", normalize_date_added),
            ("Ratings", partial(repair_ratings, corrections=self.corrections)),
            ("Laufzeit", split_duration),
        ]

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:  # type: ignore[override]
        current = df
        input_ids = set(df["show_id"])
        for stage_name, stage in self.stages():
            result = stage(current)
            if len(result) != len(current):
                raise CatalogValidationError(
                    f"Stufe '{stage_name}'",
                    [f"Zeilenanzahl geändert: {len(current)} -> {len(result)}"])
            if stage_name == "Ratings":
                self.repaired_rows = collect_rating_changes(current, result)
            logging.debug(f"Stufe '{stage_name}' abgeschlossen ({len(result)} Zeilen).")
            current = result

        if set(current["show_id"]) != input_ids:
            raise CatalogValidationError("NetflixAdapter", ["Menge der show_ids hat sich verändert."])

        # ---------- Audit-CSV der Reparaturen --------------------
        if self.config.get("save_repairs", True):
            self._log_aux_files("NetflixAdapter", self.repaired_rows, CHANGE_COLUMNS)

        return current[OUTPUT_COLUMNS]
