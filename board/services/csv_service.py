"""
CSV reading and writing shared by the post import/export endpoints
"""
import csv
import io
import logging
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

UTF8_BOM = '\ufeff'


class CsvService:
    """Parses uploaded CSV files and renders CSV downloads"""

    def parse_csv(self, data: bytes) -> Tuple[List[str], List[Tuple[int, Dict[str, str]]]]:
        """Return the header names and (line number, row) pairs.

        The first record is the header, blank lines are skipped and every
        value is trimmed. The line number is where the record starts, so a
        quoted value spanning several lines reports its first line. Raises
        UnicodeDecodeError for non UTF-8 input and csv.Error for malformed
        records.
        """
        text = data.decode('utf-8-sig')
        reader = csv.reader(io.StringIO(text, newline=''), skipinitialspace=True)
        headers = []
        for record in reader:
            if record:
                headers = [h.strip() for h in record]
                break

        rows = []
        start = reader.line_num + 1
        for record in reader:
            line, start = start, reader.line_num + 1
            values = {h: (record[i] if i < len(record) else '').strip() for i, h in enumerate(headers)}
            if not any(values.values()):
                continue
            rows.append((line, values))

        logger.info(f'CSV parsed: {len(rows)} rows')
        return headers, rows

    def missing_headers(self, headers: Sequence[str], required: Sequence[str]) -> List[str]:
        missing = [h for h in required if h not in headers]
        if missing:
            logger.warning(f'CSV missing required headers: {missing}')
        return missing

    def export_to_csv(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> bytes:
        """Render rows as UTF-8 CSV with a BOM so spreadsheet apps pick the encoding"""
        logger.info(f'CSV export: {len(rows)} rows')
        buf = io.StringIO()
        buf.write(UTF8_BOM)
        writer = csv.writer(buf)
        writer.writerow(headers)
        writer.writerows(rows)
        return buf.getvalue().encode('utf-8')

    def generate_file_name(self, prefix: str) -> str:
        return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"


csv_service = CsvService()
