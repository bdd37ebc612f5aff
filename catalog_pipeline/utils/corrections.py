import logging
from pathlib import Path

import yaml

REQUIRED_SECTIONS = ("swap_repair", "rating_synonyms", "reference_ratings")


def load_corrections(path: str | Path) -> dict:
    """
    Lädt die versionierte Korrektur-Tabelle (corrections.yaml).

    Die Werte stammen aus externer Verifikation und lassen sich nicht aus dem
    Datensatz ableiten; sie werden daher separat vom Code gepflegt.

    Raises:
        FileNotFoundError: Wenn die Datei fehlt.
        yaml.YAMLError: Wenn die Datei kein gültiges YAML ist.
        ValueError: Wenn Abschnitte fehlen oder falsch strukturiert sind.
    """
    corrections_path = Path(path)
    if not corrections_path.exists():
        raise FileNotFoundError(f"Korrekturdatei nicht gefunden: {corrections_path}")

    try:
        data = yaml.safe_load(corrections_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        logging.error(f"Fehler beim Parsen der Korrekturdatei {corrections_path}: {e}")
        raise

    missing = [s for s in REQUIRED_SECTIONS if s not in data]
    if missing:
        raise ValueError(f"{corrections_path}: fehlende Abschnitte: {', '.join(missing)}")

    swap = data["swap_repair"] or {}
    if not isinstance(swap, dict) or "rating" not in swap:
        raise ValueError(f"{corrections_path}: swap_repair benötigt 'rating' und 'show_ids'.")
    swap["show_ids"] = [str(s) for s in swap.get("show_ids") or []]

    for section in ("rating_synonyms", "reference_ratings"):
        mapping = data[section] or {}
        if not isinstance(mapping, dict):
            raise ValueError(f"{corrections_path}: '{section}' muss eine Zuordnung sein.")
        data[section] = {str(k): str(v) for k, v in mapping.items()}

    data["swap_repair"] = swap
    data["version"] = str(data.get("version", "unbekannt"))
    logging.info(
        f"Korrekturen Version {data['version']} geladen: {len(swap['show_ids'])} Swap-IDs, "
        f"{len(data['rating_synonyms'])} Synonyme, {len(data['reference_ratings'])} Referenzwerte.")
    return data
