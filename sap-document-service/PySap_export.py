"""Export object usage matches to Excel or CSV"""
import logging
import pandas as pd
from pathlib import Path
from typing import Iterable
from PySap_config import check_output_file
from PySap_webi import MatchRecord

logger = logging.getLogger(__name__)

MATCH_COLUMNS = ['Report Path', 'Report Name', 'Data Provider', 'Object Name']


def matches_to_dataframe(records: Iterable[MatchRecord]) -> pd.DataFrame:
    """Convert match records to a DataFrame with a fixed column order."""
    return pd.DataFrame([tuple(record) for record in records], columns=MATCH_COLUMNS)


def export_matches(records: Iterable[MatchRecord], file_path: str) -> str:
    """Save match records as .xlsx or .csv depending on the file extension.
    :param records: Match records to save
    :param file_path: Destination file
    :return: The path written"""

    check_output_file(file_path)
    path = Path(file_path)
    suffix = path.suffix.lower()

    path.parent.mkdir(parents=True, exist_ok=True)
    df = matches_to_dataframe(records)

    if suffix == '.xlsx':
        with pd.ExcelWriter(path, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name='Matches', index=False)
    else:
        df.to_csv(path, index=False, encoding='utf-8-sig')

    logger.info(f"{len(df)} match(es) saved at {path}")
    return str(path)
