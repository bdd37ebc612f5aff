import argparse
import logging
import sys
from pathlib import Path

import pandas as pd
import yaml

from catalog_pipeline.adapters.netflix_adapter import NetflixAdapter
from catalog_pipeline.errors import CatalogPipelineError
from catalog_pipeline.loaders.csv_loader import CsvLoader
from catalog_pipeline.utils.basic_validator import validate_or_raise


class CatalogPipeline:
    """
    Orchestriert die Bereinigung des Netflix-Katalogs vom Laden der Roh-CSV
    über alle Bereinigungsstufen bis zum Speichern der bereinigten Tabelle.
    """

    def __init__(self, config_filename: str | Path = 'config.yaml'):
        """
        Initialisiert die Pipeline.

        Liest die Konfigurationsdatei ein und initialisiert das Logging.

        Args:
            config_filename: Der Dateiname der YAML-Konfigurationsdatei,
                             relativ zum Speicherort dieses Skripts (oder absolut).

        Raises:
            FileNotFoundError: Wenn die Konfigurationsdatei nicht gefunden wird.
            yaml.YAMLError: Wenn die Konfigurationsdatei nicht gültig ist.
        """
        self.script_dir: Path = Path(__file__).resolve().parent
        config_path: Path = self.script_dir / config_filename
        # Relative Pfade in der Config beziehen sich auf das Verzeichnis der Config
        self.config_dir: Path = config_path.parent

        if not config_path.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self.config: dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logging.error(
                f"Fehler beim Parsen der Konfigurationsdatei {config_path}: {e}"
            )
            raise

        if self.config is None:  # yaml.safe_load liefert None bei leerer Datei
            self.config = {}
            logging.warning(
                f"Konfigurationsdatei {config_path} ist leer oder enthält keine gültige YAML-Struktur."
            )

        log_config: dict = self.config.get('logging', {})
        level_name = log_config.get('level', 'INFO').upper()
        level_value = getattr(logging, level_name, logging.INFO)
        logging.basicConfig(
            level=level_value,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S')
        logging.getLogger().setLevel(level_value)
        self.logger = logging.getLogger(__name__)

        validation_cfg: dict = self.config.get("validation", {})
        self.validation_reports_dir: Path = self._resolve_path(
            validation_cfg.get("reports_dir", "data/validation_reports"))

    def _resolve_path(self, path_value: str | Path) -> Path:
        """
        Konvertiert einen Pfadwert aus der Konfiguration in ein absolutes Path-Objekt.

        Relative Pfade werden zum Verzeichnis der Konfigurationsdatei aufgelöst.

        Raises:
            ValueError: Wenn der path_value weder ein String noch ein Path-Objekt ist.
        """
        if isinstance(path_value, Path):
            path_obj = path_value
        elif isinstance(path_value, str):
            path_obj = Path(path_value)
        else:
            self.logger.error(
                f"Ungültiger Pfadwert in Config: {path_value} (Typ: {type(path_value)})"
            )
            raise ValueError(
                f"Pfadwert muss ein String oder Path-Objekt sein: {path_value}")

        if path_obj.is_absolute():
            return path_obj
        return (self.config_dir / path_obj).resolve()

    def _build_adapter(self, input_path: str | Path | None) -> NetflixAdapter:
        adapter_config_raw: dict = self.config.get("sources", {}).get("NetflixAdapter", {})
        processed_adapter_config = {
            key: (
                self._resolve_path(value) if isinstance(value, (str, Path)) and
                key.endswith("_path") else value
            ) for key, value in adapter_config_raw.items()
        }
        if input_path is not None:
            processed_adapter_config["file_path"] = Path(input_path)
        if "file_path" not in processed_adapter_config:
            raise ValueError("Kein 'sources.NetflixAdapter.file_path' in der Konfiguration.")
        processed_adapter_config.setdefault(
            "corrections_path", self._resolve_path("corrections.yaml"))
        processed_adapter_config["aux_base_dir"] = self.config_dir
        aux_dirs: dict = self.config.get("aux_output_dirs") or {}
        processed_adapter_config["aux_output_dirs"] = {
            kind: self._resolve_path(path) for kind, path in aux_dirs.items()
        }
        if "content_types" in self.config:
            processed_adapter_config["content_types"] = self.config["content_types"]
        return NetflixAdapter(processed_adapter_config)

    def run(self,
            input_path: str | Path | None = None,
            output_path: str | Path | None = None) -> pd.DataFrame:
        """
        Führt die gesamte Pipeline aus (alles oder nichts).

        Jeder Fehler einer Stufe wird weitergereicht; in diesem Fall wird
        keine Ausgabedatei geschrieben.

        Returns:
            Das bereinigte DataFrame.
        """
        self.logger.info("Starte Katalog-Pipeline...")

        adapter = self._build_adapter(input_path)
        raw_df = adapter.extract()
        cleaned_df = adapter.transform(raw_df)

        validation_cfg: dict = self.config.get("validation", {})
        corrections = adapter.corrections
        validate_or_raise(
            cleaned_df,
            df_name="Cleaned-Catalog",
            expected_rows=validation_cfg.get("expected_rows", len(raw_df)),
            content_types=adapter.content_types,
            forbidden_ratings=list(corrections.get("rating_synonyms", {})),
            error_report_path=str(self.validation_reports_dir / "Cleaned-Catalog_report.txt"),
            save_invalid_rows=validation_cfg.get("save_invalid_rows", True),
            invalid_rows_output_path=str(
                self.validation_reports_dir / "Cleaned-Catalog_invalid_rows.csv"),
        )

        output_cfg: dict = self.config.get("output", {})
        if output_path is not None:
            target = Path(output_path)
        else:
            target = self._resolve_path(
                output_cfg.get("csv_path", "data/processed/netflix_titles_clean.csv"))
        CsvLoader(target).load(cleaned_df)

        reports_cfg: dict = self.config.get("reports", {})
        if reports_cfg.get("enabled", False):
            # Import erst hier: matplotlib/seaborn nur laden, wenn Berichte aktiv sind
            from catalog_pipeline.run_catalog_reports import run_reports
            run_reports(cleaned_df, self._resolve_path(
                reports_cfg.get("output_dir", "data/analysis")), reports_cfg)

        self.logger.info(
            f"Pipeline abgeschlossen. {len(cleaned_df)} Einträge bereinigt.")
        return cleaned_df


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Bereinigt den Netflix-Katalog (netflix_titles.csv).")
    parser.add_argument("--config", default="config.yaml",
                        help="YAML-Konfiguration (relativ zum Paket oder absolut)")
    parser.add_argument("--input", dest="input_path", default=None,
                        help="Roh-CSV; überschreibt sources.NetflixAdapter.file_path")
    parser.add_argument("--output", dest="output_path", default=None,
                        help="Ziel-CSV; überschreibt output.csv_path")
    args = parser.parse_args(argv)

    try:
        pipeline = CatalogPipeline(config_filename=Path(args.config).resolve()
                                   if Path(args.config).exists() else args.config)
        pipeline.run(input_path=args.input_path, output_path=args.output_path)
    except (CatalogPipelineError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        # Konfigurationsfehler (Config, corrections.yaml) ebenso mit Exit-Code 1
        logging.getLogger(__name__).error(f"Pipeline abgebrochen ({type(e).__name__}): {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
