from dataclasses import dataclass

@dataclass(frozen=True)
class ReconConfig:
    bank_path: str = "data/raw/bank.csv"
    books_path: str = "data/raw/books.csv"
    column_map_path: str = "config/column_map.json"
    rules_path: str = "config/recon_config.json"
    outputs_dir: str = "outputs"
