import logging

import pandas as pd

from catalog_pipeline.errors import FormatError, SchemaError

# "September 25, 2021" – Monatsname, Tag ohne führende Null, vierstelliges Jahr
DATE_ADDED_PATTERN: str = r"[A-Za-z]+\s\d+,\s\d+"
DATE_ADDED_FORMAT: str = "%B %d, %Y"


def normalize_date_added(
    df_input: pd.DataFrame,
    source_col: str = "date_added",
    target_col: str = "date_added_as_date",
) -> pd.DataFrame:
    """
    Parst die Freitext-Spalte 'date_added' strikt in ein Datum.

    Jeder nicht-leere Wert muss nach dem Trimmen exakt dem Muster
    "Monat T, JJJJ" entsprechen. Es wird nichts stillschweigend verworfen
    oder umgedeutet: schon ein abweichender Wert lässt die Stufe scheitern.

    Args:
        df_input: DataFrame nach der Missing-Value-Normalisierung.
        source_col: Name der Textspalte.
        target_col: Name der neuen Datumsspalte.

    Returns:
        Neues DataFrame mit `target_col` (datetime64, NaT wo die Quelle NA war)
        und ohne `source_col`.

    Raises:
        SchemaError: Wenn `source_col` fehlt.
        FormatError: Mit allen (show_id, Wert)-Paaren, die nicht passen.
    """
    if source_col not in df_input.columns:
        raise SchemaError([source_col], stage="Datums-Normalisierung")

    df = df_input.copy()
    text = df[source_col].astype("string").str.strip()
    present = text.notna()
    matches = text.str.fullmatch(DATE_ADDED_PATTERN).fillna(False).astype(bool)
    parsed = pd.to_datetime(text.where(matches), format=DATE_ADDED_FORMAT, errors="coerce")

    # Muster passt, aber z.B. unbekannter Monatsname -> NaT
    bad = present & (~matches | parsed.isna())
    if bad.any():
        offenders = df.loc[bad]
        raise FormatError(source_col, list(zip(offenders["show_id"], offenders[source_col])),
                          expected=DATE_ADDED_FORMAT)

    position = df.columns.get_loc(source_col)
    df = df.drop(columns=[source_col])
    df.insert(position, target_col, parsed.dt.normalize())
    logging.info(
        f"Datum: {int(present.sum())} Werte geparst, {int((~present).sum())} ohne Datum.")
    return df
