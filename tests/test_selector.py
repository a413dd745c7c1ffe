"""
Tests for row selection by data file.
"""

import pytest

from sdrf_samplelist.exceptions import MalformedSdrf, NoMatchingRows
from sdrf_samplelist.sdrf.reader import SDRFReader, SDRFTable
from sdrf_samplelist.sdrf.selector import normalize_data_file, select_rows


class TestNormalizeDataFile:
    """Tests for data file name normalisation."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("run1.raw", "run1"),
            ("run1.RAW", "run1"),
            ("run1.mzML", "run1"),
            ("run1.mzML.gz", "run1"),
            ("run1", "run1"),
            ("/data/raw/run1.raw", "run1"),
            ("C:\\data\\run1.raw", "run1"),
            ("sample.d/", "sample"),
            ("run1.wiff2", "run1"),
            ("run.1.raw", "run.1"),
            (" run1.raw ", "run1"),
        ],
    )
    def test_normalize(self, name, expected):
        assert normalize_data_file(name) == expected

    def test_unknown_extension_kept(self):
        assert normalize_data_file("run1.txt") == "run1.txt"


class TestSelectRows:
    """Tests for select_rows."""

    def test_select_exact(self, sample_sdrf_path):
        table = SDRFReader(sample_sdrf_path).read()
        rows = select_rows(table, "sample2.raw")

        assert len(rows) == 1
        assert rows[0].get("source name") == "PXD000001-Sample-2"

    def test_select_by_stem_or_converted_name(self, sample_sdrf_path):
        table = SDRFReader(sample_sdrf_path).read()

        for target in ["sample2", "sample2.mzML", "/tmp/conv/sample2.mzML"]:
            rows = select_rows(table, target)
            assert [r.number for r in rows] == [2]

    def test_select_multiple_rows_in_order(self, tmt_sdrf_path):
        table = SDRFReader(tmt_sdrf_path).read()
        rows = select_rows(table, "fraction1.raw")

        assert [r.number for r in rows] == [1, 2, 3, 4]

    def test_no_matching_rows(self, sample_sdrf_path):
        table = SDRFReader(sample_sdrf_path).read()

        with pytest.raises(NoMatchingRows) as excinfo:
            select_rows(table, "missing.raw")

        assert excinfo.value.data_file == "missing.raw"
        assert "missing.raw" in str(excinfo.value)

    def test_stem_is_case_sensitive(self, sample_sdrf_path):
        table = SDRFReader(sample_sdrf_path).read()

        with pytest.raises(NoMatchingRows):
            select_rows(table, "SAMPLE1.raw")

    @pytest.mark.parametrize("target", ["", "   "])
    def test_empty_target(self, sample_sdrf_path, target):
        table = SDRFReader(sample_sdrf_path).read()

        with pytest.raises(ValueError):
            select_rows(table, target)

    def test_missing_data_file_column(self):
        table = SDRFTable.from_records(["source name"], [["s1"]])

        with pytest.raises(MalformedSdrf) as excinfo:
            select_rows(table, "run1.raw")

        assert excinfo.value.column == "comment[data file]"

    def test_selection_does_not_modify_table(self, scenario_table):
        before = scenario_table.rows
        select_rows(scenario_table, "run1.raw")
        assert scenario_table.rows == before
