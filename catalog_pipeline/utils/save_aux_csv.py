from pathlib import Path
import pandas as pd

# Fallback, wenn die Pipeline-Config keine aux_output_dirs angibt
DEFAULT_AUX_DIRS: dict[str, str] = {
    "repairs": "data/validation_reports/repairs",
}


def _get_target_dir(kind: str, aux_dirs: dict | None = None, base_dir: Path | None = None) -> Path:
    """Liefert das Zielverzeichnis für eine CSV-Art (z.B. repairs)."""
    dirs = {**DEFAULT_AUX_DIRS, **(aux_dirs or {})}
    target = Path(dirs.get(kind, f"data/validation_reports/{kind}"))
    if target.is_absolute():
        return target
    return Path(base_dir or Path.cwd()) / target


def save_aux_csv(kind: str, adapter_name: str, df: pd.DataFrame,
                 aux_dirs: dict | None = None, base_dir: Path | None = None) -> Path:
    """Speichert DataFrame unter <dir>/<adapter_name>_<kind>.csv (überschreibt den letzten Lauf)."""
    target_dir = _get_target_dir(kind, aux_dirs, base_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    out_path = target_dir / f"{adapter_name}_{kind}.csv"
    df.to_csv(out_path, index=False)
    return out_path
