"""
Tests for SampleListAnnotator - the end-to-end workflow.
"""

from io import BytesIO

import pytest
from lxml import etree

from sdrf_samplelist.core.annotator import SampleListAnnotator
from sdrf_samplelist.exceptions import MalformedMzml, MalformedSdrf, NoMatchingRows
from sdrf_samplelist.sdrf.classifier import ClassificationTable, ColumnClassifier, Ignore
from sdrf_samplelist.sdrf.reader import SDRFTable

MZML_NS = "{http://psi.hupo.org/ms/mzml}"


def _run(annotator, document: bytes):
    out = BytesIO()
    result = annotator.annotate(BytesIO(document), out)
    return result, out.getvalue()


def _samples(document: bytes):
    root = etree.fromstring(document)
    sample_list = root.find(f".//{MZML_NS}sampleList")
    return sample_list, sample_list.findall(f"{MZML_NS}sample")


class TestSampleListAnnotator:
    """Tests for SampleListAnnotator."""

    def test_annotate_label_free(self, sample_sdrf_path, small_mzml):
        result, output = _run(SampleListAnnotator(sdrf_file=sample_sdrf_path), small_mzml)

        assert result.data_file == "sample1.raw"
        assert result.num_samples == 1
        assert result.source_files == ["sample1.raw"]
        assert not result.indexed

        sample_list, samples = _samples(output)
        assert sample_list.get("count") == "1"
        assert samples[0].get("id") == "sample_1"
        assert samples[0].get("name") == "PXD000001-Sample-1"

        cv = {p.get("accession"): p.get("value") for p in samples[0].findall(f"{MZML_NS}cvParam")}
        assert cv["OBI:0100026"] == "Homo sapiens"
        assert cv["EFO:0000408"] == "hepatocellular carcinoma"

        user = [(p.get("name"), p.get("value")) for p in samples[0].findall(f"{MZML_NS}userParam")]
        assert ("assay name", "run 1") in user
        assert [v for n, v in user if n == "comment[modification parameters]"] == [
            "NT=Oxidation;MT=Variable;TA=M;AC=Unimod:35",
            "NT=Carbamidomethyl;TA=C;MT=fixed;AC=UNIMOD:4",
        ]

    def test_two_assays_of_one_file(self, scenario_table, small_mzml):
        annotator = SampleListAnnotator(table=scenario_table, data_file="run1.raw")
        result, output = _run(annotator, small_mzml)

        assert result.num_samples == 2
        sample_list, samples = _samples(output)
        assert sample_list.get("count") == "2"
        for sample, assay in zip(samples, ["run 1", "run 2"]):
            params = list(sample)
            assert etree.QName(params[0]).localname == "userParam"
            assert params[0].get("value") == assay
            assert params[1].get("accession") == "OBI:0100026"
            assert params[1].get("value") == "Homo sapiens"

    def test_tmt_channels(self, tmt_sdrf_path, small_mzml):
        annotator = SampleListAnnotator(sdrf_file=tmt_sdrf_path, data_file="fraction1.raw")
        result, output = _run(annotator, small_mzml)

        assert result.num_samples == 4
        _, samples = _samples(output)
        assert [s.get("name") for s in samples] == ["tumor 1", "normal 1", "tumor 2", "normal 2"]

    def test_group_by_override(self, tmt_sdrf_path, small_mzml):
        annotator = SampleListAnnotator(
            sdrf_file=tmt_sdrf_path, data_file="fraction1.raw", identity_columns=["assay name"]
        )
        result, _ = _run(annotator, small_mzml)

        assert result.num_samples == 1

    def test_custom_classifier(self, scenario_table, small_mzml):
        classifier = ColumnClassifier(ClassificationTable(default=Ignore()))
        annotator = SampleListAnnotator(table=scenario_table, data_file="run1.raw", classifier=classifier)
        _, output = _run(annotator, small_mzml)

        _, samples = _samples(output)
        assert all(len(s) == 0 for s in samples)

    def test_missing_data_file_writes_nothing(self, sample_sdrf_path, small_mzml):
        annotator = SampleListAnnotator(sdrf_file=sample_sdrf_path, data_file="missing.raw")
        out = BytesIO()

        with pytest.raises(NoMatchingRows) as excinfo:
            annotator.annotate(BytesIO(small_mzml), out)

        assert "missing.raw" in str(excinfo.value)
        assert out.getvalue() == b""

    def test_allow_empty(self, sample_sdrf_path, small_mzml):
        annotator = SampleListAnnotator(
            sdrf_file=sample_sdrf_path, data_file="missing.raw", allow_empty=True
        )
        result, output = _run(annotator, small_mzml)

        assert result.num_samples == 0
        assert b'<sampleList count="0"/>' in output

    def test_malformed_sdrf_writes_nothing(self, fixtures_dir, small_mzml):
        annotator = SampleListAnnotator(sdrf_file=fixtures_dir / "malformed_sdrf.tsv")
        out = BytesIO()

        with pytest.raises(MalformedSdrf):
            annotator.annotate(BytesIO(small_mzml), out)

        assert out.getvalue() == b""

    def test_no_source_file(self, sample_sdrf_path):
        document = (
            b'<?xml version="1.0"?>\n<mzML xmlns="http://psi.hupo.org/ms/mzml">\n'
            b"  <fileDescription/>\n  <softwareList/>\n  <run id=\"r\"/>\n</mzML>\n"
        )
        out = BytesIO()

        with pytest.raises(MalformedMzml):
            SampleListAnnotator(sdrf_file=sample_sdrf_path).annotate(BytesIO(document), out)

        assert out.getvalue() == b""

    def test_truncated_header_writes_nothing(self, sample_sdrf_path, small_mzml):
        truncated = small_mzml[: small_mzml.index(b"<instrumentConfigurationList")]
        out = BytesIO()

        with pytest.raises(MalformedMzml) as excinfo:
            SampleListAnnotator(sdrf_file=sample_sdrf_path).annotate(BytesIO(truncated), out)

        assert "<run>" in str(excinfo.value)
        assert out.getvalue() == b""

    def test_explicit_data_file_without_source_file(self, sample_sdrf_path):
        document = (
            b'<?xml version="1.0"?>\n<mzML xmlns="http://psi.hupo.org/ms/mzml">\n'
            b"  <fileDescription/>\n  <softwareList/>\n  <run id=\"r\"/>\n</mzML>\n"
        )
        annotator = SampleListAnnotator(sdrf_file=sample_sdrf_path, data_file="sample3.raw")
        result, output = _run(annotator, document)

        assert result.num_samples == 1
        assert b'name="PXD000001-Sample-3"' in output

    def test_bytes_outside_sample_list_unchanged(self, sample_sdrf_path, small_mzml):
        _, output = _run(SampleListAnnotator(sdrf_file=sample_sdrf_path), small_mzml)

        anchor = small_mzml.index(b"<softwareList")
        assert output.startswith(small_mzml[:anchor])
        assert output.endswith(small_mzml[anchor:])

    def test_replaces_existing_sample_list(self, sample_sdrf_path, fixtures_dir):
        document = (fixtures_dir / "with_sample_list.mzML").read_bytes()
        _, output = _run(SampleListAnnotator(sdrf_file=sample_sdrf_path), document)

        _, samples = _samples(output)
        assert [s.get("id") for s in samples] == ["sample_1"]
        assert b"stale" not in output

    def test_indexed(self, sample_sdrf_path, indexed_mzml, index_checker):
        result, output = _run(SampleListAnnotator(sdrf_file=sample_sdrf_path), indexed_mzml)

        assert result.indexed
        index_checker(output)

    def test_deterministic(self, tmt_sdrf_path, indexed_mzml):
        annotator = SampleListAnnotator(sdrf_file=tmt_sdrf_path, data_file="fraction1.raw")

        _, first = _run(annotator, indexed_mzml)
        _, second = _run(annotator, indexed_mzml)

        assert first == second

    def test_requires_sdrf(self):
        with pytest.raises(ValueError):
            SampleListAnnotator()

    def test_build_sample_list(self, sample_sdrf_path):
        annotator = SampleListAnnotator(sdrf_file=sample_sdrf_path)
        sample_list = annotator.build_sample_list("sample2.mzML")

        assert sample_list.count == 1
        assert sample_list.samples[0].name == "PXD000001-Sample-2"

    def test_table_reused(self, sample_sdrf_path):
        annotator = SampleListAnnotator(sdrf_file=sample_sdrf_path)
        assert annotator.table is annotator.table
        assert isinstance(annotator.table, SDRFTable)
