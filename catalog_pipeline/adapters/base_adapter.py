from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from catalog_pipeline.utils.save_aux_csv import save_aux_csv

class BaseAdapter(ABC):
    def __init__(self, source_config: dict):
        self.config = source_config

    @abstractmethod
    def extract(self) -> pd.DataFrame:
        """Lädt Rohdaten als DataFrame (nur Text)"""
        pass

    @abstractmethod
    def transform(self, data: pd.DataFrame) -> pd.DataFrame:
        """Bereinigt und formatiert die Quelldaten zu einem DataFrame"""
        pass

    def _log_aux_files(
        self,
        adapter_name: str,
        repaired_rows: list[dict],
        columns: list[str],
    ) -> Path:
        # Immer schreiben; ohne Reparaturen nur der Header
        return save_aux_csv("repairs", adapter_name, pd.DataFrame(repaired_rows, columns=columns),
                            aux_dirs=self.config.get("aux_output_dirs"),
                            base_dir=self.config.get("aux_base_dir"))
