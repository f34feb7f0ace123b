"""Tests for CSV export.

Run: python -m pytest tests/test_export.py -v -s
"""

from __future__ import annotations

import csv
import io
import logging
import re

from detonation_scanner.services.export import (
    CSV_COLUMNS,
    export_results_to_csv,
    generate_timestamped_filename,
    results_to_frame,
)

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
)
log = logging.getLogger(__name__)


class TestCsvExport:
    def test_header_only_when_empty(self) -> None:
        text = export_results_to_csv([])
        assert text.splitlines() == [",".join(CSV_COLUMNS)]

    def test_row_values(self, make_result) -> None:
        result = make_result(
            "RIOT", price=12.5, change_percent=-3.456, volume=2_500_000,
            market_cap=1_200_000_000, sector="Crypto", explosive_potential=61,
        )
        text = export_results_to_csv([result])
        log.info("CSV:\n%s", text)
        rows = list(csv.DictReader(io.StringIO(text)))
        assert len(rows) == 1
        row = rows[0]
        assert row["Ticker"] == "RIOT"
        assert row["Price"] == "12.50"
        assert row["ChangePercent"] == "-3.46"
        assert row["Volume"] == "2500000"
        assert row["MarketCap"] == "1200000000"
        assert row["Float"] == "12000000"
        assert row["ExplosivePotential"] == "61"
        assert row["CatalystScore"] == "20"
        assert row["SentimentScore"] == "65"

    def test_commas_are_quoted(self, make_result) -> None:
        text = export_results_to_csv([make_result("ACME", company_name="Acme, Inc.")])
        assert '"Acme, Inc."' in text
        row = next(csv.DictReader(io.StringIO(text)))
        assert row["Company"] == "Acme, Inc."

    def test_frame_column_order(self, make_result) -> None:
        frame = results_to_frame([make_result("A"), make_result("B")])
        assert list(frame.columns) == CSV_COLUMNS
        assert list(frame["Ticker"]) == ["A", "B"]


class TestTimestampedFilename:
    def test_format(self) -> None:
        name = generate_timestamped_filename("scan", "csv")
        assert re.fullmatch(r"scan-\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}\.csv", name)
