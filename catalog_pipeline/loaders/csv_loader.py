import logging
from pathlib import Path

import pandas as pd

DATE_FORMAT = "%Y-%m-%d"


class CsvLoader:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self, df: pd.DataFrame) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(self.path, index=False, date_format=DATE_FORMAT, encoding="utf-8")
        logging.info(f"Bereinigter Katalog ({len(df)} Zeilen) gespeichert unter: {self.path}")
        return self.path
