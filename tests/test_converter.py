import asyncio
import logging

import pytest

from conftest import read_workbook_bytes
from pipe2excel.config import ConverterConfig
from pipe2excel.converter import (
    as_document,
    convert_documents,
    convert_documents_async,
    convert_multiple,
    convert_single,
    prepare_document,
)
from pipe2excel.errors import (
    ConversionError,
    EmptyInputError,
    InvalidDocumentError,
    NoInputError,
    NoValidDataError,
)
from pipe2excel.workbook import SourceDocument


def test_convert_single_builds_sheet_named_from_source():
    artifact = convert_single("A|B|C\n1|2|3\n", "Lab_Results_Audit.txt")

    assert artifact.file_name == "Lab_Results.xlsx"
    assert artifact.sheet_names == ("Lab_Audit",)
    workbook = read_workbook_bytes(artifact.payload)
    assert workbook == {"Lab_Audit": [["A", "B", "C"], ["1", "2", "3"]]}


def test_convert_single_raises_for_blank_document():
    with pytest.raises(EmptyInputError):
        convert_single("   \n\n\t\n", "blank.txt")


def test_convert_documents_requires_input():
    with pytest.raises(NoInputError):
        convert_documents([])
    with pytest.raises(NoInputError):
        convert_documents(None)


def test_multi_file_conversion_skips_empty_documents():
    documents = [
        {"name": "emr_one.txt", "content": "id|name\n1|Ann\n"},
        {"name": "empty.txt", "content": "\n  \n"},
        {"name": "service.txt", "content": "id|name\r\n2|Bob\r\n"},
        {"name": "Lab_data.pipe", "content": "x|y\n"},
    ]
    artifact = convert_multiple(documents, output_name="Combined Report")

    assert artifact.file_name == "Combined Report.xlsx"
    assert artifact.sheet_names == ("EMR", "EMR_1", "Lab")
    assert any("empty.txt" in warning for warning in artifact.warnings)

    workbook = read_workbook_bytes(artifact.payload)
    assert list(workbook) == ["EMR", "EMR_1", "Lab"]
    assert workbook["EMR_1"] == [["id", "name"], ["2", "Bob"]]


def test_multi_file_conversion_with_only_blank_documents_fails():
    documents = [SourceDocument("a.txt", ""), SourceDocument("b.txt", " \n ")]
    with pytest.raises(NoValidDataError):
        convert_documents(documents)


def test_convert_multiple_skips_single_blank_document():
    with pytest.raises(NoValidDataError):
        convert_multiple([SourceDocument("a.txt", "\n")])


def test_convert_documents_uses_default_batch_name():
    config = ConverterConfig(default_output_name="Merged")
    artifact = convert_documents(
        [SourceDocument("a.txt", "1"), SourceDocument("b.txt", "2")], config=config
    )
    assert artifact.file_name == "Merged.xlsx"
    assert artifact.sheet_names == ("a", "b")


def test_sheet_names_unique_for_identical_file_names():
    documents = [SourceDocument("report.txt", f"row {index}") for index in range(5)]
    artifact = convert_documents(documents, output_name="out.xlsx")
    assert artifact.sheet_names == ("report", "report_1", "report_2", "report_3", "report_4")


def test_custom_delimiter_is_applied():
    config = ConverterConfig(delimiter=",")
    artifact = convert_single("a, b ,c\n|x|", "data.txt", config=config)
    workbook = read_workbook_bytes(artifact.payload)
    assert workbook["data"] == [["a", "b", "c"], ["|x|", None, None]]


def test_prepare_document_reports_inconsistent_columns(caplog):
    config = ConverterConfig(column_check_threshold=0, column_sample_rows=10)
    document = SourceDocument("ragged.txt", "a|b|c\n1|2\n")
    with caplog.at_level(logging.WARNING, logger="pipe2excel.parsing"):
        outcome = prepare_document(document, config)

    assert not outcome.skipped
    assert outcome.rows == [["a", "b", "c"], ["1", "2"]]
    assert len(outcome.warnings) == 1
    assert "ragged.txt" in caplog.text


def test_prepare_document_skips_column_check_below_threshold():
    outcome = prepare_document(SourceDocument("ragged.txt", "a|b|c\n1|2\n"))
    assert outcome.warnings == []


def test_prepare_document_marks_blank_document_as_skipped():
    outcome = prepare_document(SourceDocument("blank.txt", "\r\n\r\n"))
    assert outcome.skipped
    assert "blank.txt" in outcome.skip_reason


def test_chunked_conversion_matches_unchunked_output():
    text = "\n".join(f"{index}|item {index}|{index * 3}" for index in range(50_000))
    document = SourceDocument("big.txt", text)

    chunked = prepare_document(document, ConverterConfig(chunk_size=997))
    unchunked = prepare_document(document, ConverterConfig(chunk_size=50_000))

    assert chunked.rows == unchunked.rows
    assert len(chunked.rows) == 50_000


def test_async_conversion_matches_sync_conversion(small_chunks):
    documents = [
        SourceDocument("emr.txt", "a|b\n1|2\n3|4\n5|6\n7|8"),
        SourceDocument("blank.txt", ""),
        SourceDocument("lab.txt", "x\ny\n"),
    ]
    sync_artifact = convert_documents(documents, output_name="out.xlsx", config=small_chunks)
    async_artifact = asyncio.run(
        convert_documents_async(documents, output_name="out.xlsx", config=small_chunks)
    )

    assert async_artifact.sheet_names == sync_artifact.sheet_names
    assert read_workbook_bytes(async_artifact.payload) == read_workbook_bytes(sync_artifact.payload)


def test_async_conversion_single_blank_document_raises():
    with pytest.raises(EmptyInputError):
        asyncio.run(convert_documents_async([SourceDocument("blank.txt", " ")]))


def test_as_document_validates_input():
    assert as_document({"name": "a.txt", "content": "x"}) == SourceDocument("a.txt", "x")
    with pytest.raises(InvalidDocumentError):
        as_document({"content": "x"})
    with pytest.raises(InvalidDocumentError):
        as_document(42)


def test_malformed_document_is_a_conversion_error():
    with pytest.raises(ConversionError, match="name"):
        convert_documents([{"name": "a.txt"}])


def test_control_characters_in_single_file_are_written():
    artifact = convert_single("A|B\x0cC|D\n1|2|3\n", "data.txt")
    workbook = read_workbook_bytes(artifact.payload)
    assert workbook == {"data": [["A", "BC", "D"], ["1", "2", "3"]]}


def test_control_characters_do_not_drop_other_sheets():
    artifact = convert_multiple(
        [
            {"name": "good.txt", "content": "a|b\n"},
            {"name": "bad.txt", "content": "x|y\x00z\n"},
        ]
    )
    assert artifact.sheet_names == ("good", "bad")
    workbook = read_workbook_bytes(artifact.payload)
    assert workbook["good"] == [["a", "b"]]
    assert workbook["bad"] == [["x", "yz"]]


def test_convert_multiple_names_single_document_batch_with_default():
    artifact = convert_multiple([SourceDocument("Lab_Results_Audit.txt", "a|b")])
    assert artifact.file_name == "Combined.xlsx"
    assert artifact.sheet_names == ("Lab_Audit",)
