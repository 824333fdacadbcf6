import pandas as pd


def load_csv(path: str) -> pd.DataFrame:
    # everything as text; normalization happens per record later
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df
