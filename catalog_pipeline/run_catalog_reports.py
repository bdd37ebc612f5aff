# catalog_pipeline/run_catalog_reports.py
import argparse
import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
import yaml

from catalog_pipeline.transform.normalize import explode_list_column

# --- Globale Stil-Einstellung für Plots ---
plt.style.use('seaborn-v0_8-whitegrid')

UNKNOWN_CATEGORY = "Unbekannt"
CLEANED_DTYPES: dict[str, str] = {
    "show_id": "string", "type": "string", "title": "string", "director": "string",
    "cast": "string", "country": "string", "release_year": "Int64", "rating": "string",
    "genre": "string", "season_total": "Int64", "movie_length": "Int64",
}


def read_cleaned_catalog(path: str | Path) -> pd.DataFrame:
    """Liest die bereinigte CSV mit den Typen, die die Pipeline erzeugt hat."""
    return pd.read_csv(
        path,
        dtype=CLEANED_DTYPES,
        keep_default_na=False,
        na_values=[""],
        parse_dates=["date_added_as_date"],
        encoding="utf-8",
    )


# === Aggregationen ===

def count_by_type(df: pd.DataFrame) -> pd.Series:
    return df["type"].value_counts().rename("count")


def count_by_rating(df: pd.DataFrame) -> pd.Series:
    return df["rating"].value_counts().rename("count")


def count_by_rating_category(df: pd.DataFrame, rating_categories: dict[str, str]) -> pd.Series:
    """Zählt Titel je Zielgruppe; Ratings ohne Zuordnung landen in 'Unbekannt'."""
    categories = df["rating"].map(rating_categories).fillna(UNKNOWN_CATEGORY)
    return categories.value_counts().rename("count")


def top_countries(df: pd.DataFrame, top_n: int = 10) -> pd.Series:
    """Top-N Länder; Koproduktionen zählen für jedes beteiligte Land."""
    return explode_list_column(df, "country").value_counts().head(top_n).rename("count")


def top_genres(df: pd.DataFrame, top_n: int = 10) -> pd.Series:
    return explode_list_column(df, "genre").value_counts().head(top_n).rename("count")


def titles_added_per_year(df: pd.DataFrame) -> pd.DataFrame:
    """Anzahl hinzugefügter Titel pro Jahr (Zeilen) und Typ (Spalten)."""
    dated = df[df["date_added_as_date"].notna()]
    years = dated["date_added_as_date"].dt.year.rename("year_added")
    table = pd.crosstab(years, dated["type"])
    table.columns.name = None
    return table.sort_index()


def movie_length_summary(df: pd.DataFrame) -> pd.Series:
    return df["movie_length"].dropna().astype(float).describe().round(2)


# === Plots ===

def plot_counts(counts: pd.Series, output_dir: Path, filename: str, title: str,
                xlabel: str, ylabel: str, horizontal: bool = False,
                hue: list[str] | None = None) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    labels = [str(i) for i in counts.index]
    values = counts.to_list()

    fig, ax = plt.subplots(figsize=(10, 6))
    if horizontal:
        sns.barplot(x=values, y=labels, hue=hue, dodge=False, ax=ax)
    else:
        sns.barplot(x=labels, y=values, hue=hue, dodge=False, ax=ax)
        ax.tick_params(axis='x', rotation=45)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    plt.tight_layout()
    file_path = output_dir / filename
    fig.savefig(file_path)
    plt.close(fig)
    logging.info(f"Plot '{filename}' gespeichert in '{file_path}'.")
    return file_path


def plot_titles_added_per_year(per_year: pd.DataFrame, output_dir: Path) -> Path | None:
    if per_year.empty:
        logging.info("Keine Datumswerte für die Zeitreihe vorhanden.")
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    long_df = per_year.reset_index().melt(id_vars="year_added", var_name="type", value_name="count")

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.lineplot(data=long_df, x="year_added", y="count", hue="type", marker="o", ax=ax)
    ax.set_title("Hinzugefügte Titel pro Jahr")
    ax.set_xlabel("Jahr hinzugefügt")
    ax.set_ylabel("Anzahl Titel")
    plt.tight_layout()
    file_path = output_dir / "titles_added_per_year.png"
    fig.savefig(file_path)
    plt.close(fig)
    logging.info(f"Zeitreihe gespeichert in '{file_path}'.")
    return file_path


def plot_movie_length_hist(df: pd.DataFrame, output_dir: Path, bins: int = 30) -> Path | None:
    lengths = df["movie_length"].dropna().astype(float)
    if lengths.empty:
        logging.info("Keine Filmlaufzeiten für das Histogramm vorhanden.")
        return None
    output_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 6))
    sns.histplot(lengths, bins=bins, ax=ax)
    ax.set_title("Verteilung der Filmlaufzeiten")
    ax.set_xlabel("Laufzeit (Minuten)")
    ax.set_ylabel("Anzahl Filme")
    plt.tight_layout()
    file_path = output_dir / "movie_length_hist.png"
    fig.savefig(file_path)
    plt.close(fig)
    logging.info(f"Histogramm gespeichert in '{file_path}'.")
    return file_path


# === Textbericht ===

def generate_catalog_report(df: pd.DataFrame, report_path: Path, top_n: int = 10,
                            rating_categories: dict[str, str] | None = None) -> Path:
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_lines = []
    report_lines.append("======================================")
    report_lines.append("        Netflix-Katalog-Bericht        ")
    report_lines.append("======================================")
    report_lines.append(f"Datum der Analyse: {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    report_lines.append("--- Allgemeine Statistiken ---")
    report_lines.append(f"Gesamtzahl der Titel: {len(df)}")
    for content_type, count in count_by_type(df).items():
        report_lines.append(f"  - {content_type}: {count}")

    report_lines.append("\n--- Ratings ---")
    for rating, count in count_by_rating(df).items():
        report_lines.append(f"  - {rating}: {count}")
    if rating_categories:
        report_lines.append("\nNach Zielgruppe:")
        for category, count in count_by_rating_category(df, rating_categories).items():
            report_lines.append(f"  - {category}: {count}")

    report_lines.append(f"\n--- Top {top_n} Länder ---")
    for country, count in top_countries(df, top_n).items():
        report_lines.append(f"  - {country}: {count}")

    report_lines.append(f"\n--- Top {top_n} Genres ---")
    for genre, count in top_genres(df, top_n).items():
        report_lines.append(f"  - {genre}: {count}")

    report_lines.append("\n--- Filmlaufzeiten (Minuten) ---")
    for stat, value in movie_length_summary(df).items():
        report_lines.append(f"  - {stat}: {value}")

    report_lines.append("\n--- Details zu allen Spalten ---")
    for col in df.columns:
        non_na_count = df[col].notna().sum()
        dtype = str(df[col].dtype)
        report_lines.append(f"  - Spalte '{col}' (Typ: {dtype}): {non_na_count} nicht-fehlende Werte (von {len(df)})")

    report_path.write_text("\n".join(report_lines) + "\n", encoding="utf-8")
    logging.info(f"Katalog-Bericht gespeichert unter: {report_path}")
    return report_path


def run_reports(df: pd.DataFrame, output_dir: Path, reports_cfg: dict | None = None) -> list[Path]:
    """Schreibt Aggregationen (CSV), Plots (PNG) und den Textbericht nach output_dir."""
    cfg = reports_cfg or {}
    top_n = int(cfg.get("top_n", 10))
    rating_categories: dict[str, str] = cfg.get("rating_categories", {})
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.info(f"Erstelle Katalog-Berichte in '{output_dir}'...")
    written: list[Path] = []

    type_counts = count_by_type(df)
    rating_counts = count_by_rating(df)
    countries = top_countries(df, top_n)
    genres = top_genres(df, top_n)
    per_year = titles_added_per_year(df)

    for name, table in [("counts_by_type", type_counts), ("counts_by_rating", rating_counts),
                        ("top_countries", countries), ("top_genres", genres),
                        ("titles_added_per_year", per_year)]:
        path = output_dir / f"{name}.csv"
        table.to_csv(path)
        written.append(path)

    written.append(plot_counts(type_counts, output_dir, "counts_by_type.png",
                               "Filme vs. Serien", "Typ", "Anzahl Titel"))
    hue = [rating_categories.get(r, UNKNOWN_CATEGORY) for r in rating_counts.index] \
        if rating_categories else None
    written.append(plot_counts(rating_counts, output_dir, "counts_by_rating.png",
                               "Titel pro Rating", "Rating", "Anzahl Titel", hue=hue))
    if rating_categories:
        category_counts = count_by_rating_category(df, rating_categories)
        category_counts.to_csv(output_dir / "counts_by_rating_category.csv")
        written.append(output_dir / "counts_by_rating_category.csv")
        written.append(plot_counts(category_counts, output_dir, "counts_by_rating_category.png",
                                   "Titel pro Zielgruppe", "Zielgruppe", "Anzahl Titel"))
    written.append(plot_counts(countries, output_dir, "top_countries.png",
                               f"Top {top_n} Länder", "Anzahl Titel", "Land", horizontal=True))
    written.append(plot_counts(genres, output_dir, "top_genres.png",
                               f"Top {top_n} Genres", "Anzahl Titel", "Genre", horizontal=True))
    for optional in (plot_titles_added_per_year(per_year, output_dir),
                     plot_movie_length_hist(df, output_dir)):
        if optional is not None:
            written.append(optional)

    written.append(generate_catalog_report(df, output_dir / "catalog_report.txt", top_n,
                                           rating_categories))
    logging.info(f"Katalog-Berichte abgeschlossen ({len(written)} Dateien).")
    return written


# === Analyseklasse und Ausführung ===

class CatalogReportGenerator:
    def __init__(self, config_path_str: str | Path = 'config.yaml'):
        self.config_path = Path(config_path_str)
        if not self.config_path.exists():
            alt_config_path = Path(__file__).resolve().parent / config_path_str
            if alt_config_path.exists():
                self.config_path = alt_config_path
            else:
                raise FileNotFoundError(f"Konfigurationsdatei nicht gefunden: {config_path_str} oder {alt_config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self.cfg = yaml.safe_load(f) or {}

        log_level_str = self.cfg.get('logging', {}).get('level', 'INFO').upper()
        logging.basicConfig(level=getattr(logging, log_level_str, logging.INFO),
                            format='%(asctime)s - %(levelname)s - %(message)s')

        self.output_cfg = self.cfg.get('output', {})
        self.reports_cfg = self.cfg.get('reports', {})

    def _resolve_path(self, path_str: str | Path) -> Path:
        """ Löst einen Pfad relativ zum Konfigurationsdatei-Verzeichnis auf, wenn er relativ ist. """
        path_obj = Path(path_str)
        if path_obj.is_absolute():
            return path_obj
        return (self.config_path.parent / path_obj).resolve()

    def load_data(self) -> pd.DataFrame:
        cleaned_path = self._resolve_path(
            self.output_cfg.get("csv_path", "data/processed/netflix_titles_clean.csv"))
        if not cleaned_path.exists():
            raise FileNotFoundError(
                f"Bereinigter Katalog nicht gefunden: {cleaned_path} (zuerst catalog-pipeline ausführen)")
        df = read_cleaned_catalog(cleaned_path)
        logging.info(f"Bereinigter Katalog geladen von: {cleaned_path} ({len(df)} Zeilen)")
        return df

    def run_analyses(self) -> list[Path]:
        logging.info("Starte Katalog-Analyse...")
        df = self.load_data()
        output_dir = self._resolve_path(self.reports_cfg.get("output_dir", "data/analysis"))
        return run_reports(df, output_dir, self.reports_cfg)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Erstellt Berichte und Plots zum bereinigten Katalog.")
    parser.add_argument("--config", default="config.yaml")
    args = parser.parse_args(argv)

    analyzer = CatalogReportGenerator(config_path_str=args.config)
    analyzer.run_analyses()
    return 0


if __name__ == '__main__':
    sys.exit(main())
