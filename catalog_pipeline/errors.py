"""Fehlertaxonomie der Katalog-Pipeline.

Jeder Fehler bricht den gesamten Lauf ab (fail fast). Die Attribute tragen
genug Kontext (Pfad, Spalten, show_ids, Werte), damit ein Mensch entweder die
Eingabedaten oder die Korrektur-Konfiguration berichtigen kann.
"""
from pathlib import Path
from typing import Iterable, List, Tuple

# Maximale Anzahl an Beispielen in einer Fehlermeldung
_MAX_EXAMPLES = 10


def _format_rows(rows: List[Tuple[str, object]]) -> str:
    shown = ", ".join(f"{sid}={val!r}" for sid, val in rows[:_MAX_EXAMPLES])
    if len(rows) > _MAX_EXAMPLES:
        shown += f", ... (+{len(rows) - _MAX_EXAMPLES} weitere)"
    return shown


class CatalogPipelineError(Exception):
    """Basisklasse aller Pipeline-Fehler."""


class LoadError(CatalogPipelineError):
    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Datei {self.path} konnte nicht geladen werden: {reason}")


class SchemaError(CatalogPipelineError):
    def __init__(self, missing_columns: Iterable[str], stage: str):
        self.columns = sorted(missing_columns)
        self.stage = stage
        super().__init__(
            f"{stage}: fehlende Spalten: {', '.join(self.columns)}")


class DomainError(CatalogPipelineError):
    """Eine Spalte enthält einen Wert außerhalb ihres erwarteten Wertebereichs."""

    def __init__(self, column: str, rows: List[Tuple[str, object]], detail: str = ""):
        self.column = column
        self.rows = rows
        self.show_ids = [sid for sid, _ in rows]
        msg = f"Unerwartete Werte in Spalte '{column}' ({len(rows)} Zeilen): {_format_rows(rows)}"
        if detail:
            msg = f"{msg}. {detail}"
        super().__init__(msg)


class FormatError(CatalogPipelineError):
    def __init__(self, column: str, rows: List[Tuple[str, object]], expected: str):
        self.column = column
        self.rows = rows
        self.show_ids = [sid for sid, _ in rows]
        self.expected = expected
        super().__init__(
            f"{len(rows)} Werte in '{column}' entsprechen nicht dem Format "
            f"'{expected}': {_format_rows(rows)}")


class UnmappedNullError(CatalogPipelineError):
    def __init__(self, column: str, show_ids: List[str]):
        self.column = column
        self.show_ids = show_ids
        super().__init__(
            f"{len(show_ids)} fehlende Werte in '{column}' ohne Eintrag in der "
            f"Referenz-Zuordnung: {', '.join(show_ids[:_MAX_EXAMPLES])}")


class UnparseableDurationError(CatalogPipelineError):
    def __init__(self, rows: List[Tuple[str, object]]):
        self.rows = rows
        self.show_ids = [sid for sid, _ in rows]
        super().__init__(
            f"{len(rows)} Werte in 'duration' sind weder Minuten noch Staffeln: "
            f"{_format_rows(rows)}")


class CatalogValidationError(CatalogPipelineError):
    def __init__(self, df_name: str, errors: List[str]):
        self.df_name = df_name
        self.errors = errors
        joined = "\n - ".join(errors)
        super().__init__(f"Validation Fehler in {df_name}:\n - {joined}")
