import pandas as pd

LIST_SEPARATOR = ","


def split_multi_value(value) -> list[str]:
	"""Zerlegt eine kommaseparierte Liste ("India, United States") in getrimmte Einträge."""
	if not isinstance(value, str):
		return []
	return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]


def explode_list_column(df: pd.DataFrame, column: str) -> pd.Series:
	"""
	Liefert eine Serie mit einem Eintrag pro Listenelement (Index der Ursprungszeile).

	Die Listen bleiben im DataFrame als String gespeichert; das Aufteilen
	passiert erst hier, bei der Abfrage. Fehlende Werte fallen weg.
	"""
	values = df[column].dropna().astype(str)
	exploded = values.map(split_multi_value).explode()
	return exploded.dropna().rename(column)
