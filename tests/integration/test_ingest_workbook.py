"""End-to-end ingestion: workbook bytes -> classified, deduplicated, audited records."""
import json
from io import BytesIO
from textwrap import dedent

import pandas as pd
import pytest

from arbitration_ingest import FormatError, Forum, ingest_rows, ingest_workbook
from arbitration_ingest.cli import load_existing_records, main
from arbitration_ingest.record_standardizer import CaseRecord
from arbitration_ingest.validation_report import (
    build_report,
    records_to_frame,
    summarize_cases,
    write_outputs,
)


def jams_frame() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "REFNO": "J-100",
                "Case ID": "J-100",
                "ARBITRATOR NAME": "Hon. Ann Lee",
                "Business Name": "Acme Wireless",
                "CONSUMER ATTORNEY": "Smith & Lee",
                "Date Filed": "2022-05-01",
                "RESULT": "Award",
                "CLAIM AMOUNT": "$10,000",
                "AWARD AMOUNT": "$1,200.00",
            },
            {
                "REFNO": "J-200",
                "Case ID": "j-200",
                "ARBITRATOR NAME": "Hon. Bo Chen",
                "Business Name": "Globex",
                "CONSUMER ATTORNEY": None,
                "Date Filed": "not recorded",
                "RESULT": "Dismissed",
                "CLAIM AMOUNT": None,
                "AWARD AMOUNT": "N/A",
            },
            {
                "REFNO": "J-300",
                "Case ID": None,
                "ARBITRATOR NAME": "Hon. Ann Lee",
                "Business Name": "Initech",
                "CONSUMER ATTORNEY": "Doe LLP",
                "Date Filed": "2023-02-10",
                "RESULT": "Settled",
                "CLAIM AMOUNT": "500",
                "AWARD AMOUNT": None,
            },
        ]
    )


def to_xlsx(df: pd.DataFrame) -> bytes:
    buf = BytesIO()
    df.to_excel(buf, index=False, engine="openpyxl")
    return buf.getvalue()


def test_ingest_workbook_end_to_end():
    existing = [{"caseId": "J-200"}, CaseRecord(forum=Forum.AAA, case_id="A-1")]
    result = ingest_workbook(to_xlsx(jams_frame()), "export_2023.xlsx", existing)

    assert result.forum is Forum.JAMS
    assert result.classification.rule == "header_jams_signature"
    assert len(result.standardized_rows) == 3

    assert [r.case_id for r in result.duplicates] == ["j-200"]
    assert [r.case_id for r in result.new_records] == ["J-100", None]
    assert len(result.quality_reports) == len(result.new_records)
    assert [r.has_discrepancies for r in result.quality_reports] == [False, True]

    first = result.new_records[0]
    assert first.arbitrator_name == "Hon. Ann Lee"
    assert first.consumer_attorney == "Smith & Lee"
    assert first.filing_date == "2022-05-01T00:00:00"
    assert first.disposition == "Award"
    assert first.claim_amount == "$10,000"
    assert first.award_amount == "1200.00"

    dup = result.duplicates[0]
    assert dup.filing_date == "not recorded"
    assert dup.award_amount == "N/A"

    assert result.summary() == {
        "filename": "export_2023.xlsx",
        "file_type": "JAMS",
        "priority": 2,
        "records_processed": 2,
        "duplicates_found": 1,
        "discrepancies_found": 1,
    }


def test_filename_overrides_headers():
    result = ingest_workbook(to_xlsx(jams_frame()), "AAA_Consumer_Q1.xlsx")
    assert result.forum is Forum.AAA
    assert all(r.forum is Forum.AAA for r in result.standardized_rows)
    assert result.summary()["priority"] == 1


def test_unreadable_workbook_is_fatal():
    with pytest.raises(FormatError):
        ingest_workbook(b"\x00\x01garbage", "jams.xlsx")


def test_empty_sheet_gives_empty_result():
    result = ingest_rows([], "jams_empty.xlsx")
    assert result.standardized_rows == ()
    assert result.new_records == ()
    assert result.quality_reports == ()
    assert result.forum is Forum.JAMS


def test_reports(tmp_path):
    result = ingest_workbook(to_xlsx(jams_frame()), "export_2023.xlsx", [{"case_id": "J-200"}])
    report = build_report(result)
    assert report["summary"]["duplicates_found"] == 1
    assert report["classification"]["is_default"] is False
    assert report["quality"]["missing_field_counts"] == {"case_id": 1}
    assert report["cases"]["total_cases"] == 2
    assert report["cases"]["jams"] == 2
    assert report["cases"]["highest_award_amount"] == pytest.approx(1200.0)

    paths = write_outputs(result, tmp_path / "out")
    new_df = pd.read_csv(paths["new_records"], dtype=str, encoding="utf-8-sig")
    assert list(new_df.columns) == list(records_to_frame([]).columns)
    assert len(new_df) == 2
    attn = pd.read_csv(paths["attention_required"], dtype=str, encoding="utf-8-sig")
    assert attn["missing_fields"].tolist() == ["case_id"]
    assert attn["respondent_name"].tolist() == ["Initech"]
    dups = pd.read_csv(paths["duplicates"], dtype=str, encoding="utf-8-sig")
    assert dups["case_id"].tolist() == ["j-200"]
    saved = json.loads(paths["report"].read_text(encoding="utf-8"))
    assert saved["summary"]["filename"] == "export_2023.xlsx"


def test_summarize_cases():
    records = [
        CaseRecord(forum=Forum.AAA, case_id="1", arbitrator_name="A", respondent_name="R", filing_date="2020-01-01T00:00:00", disposition="Award", award_amount="100"),
        CaseRecord(forum=Forum.JAMS, case_id="2", award_amount="300.5"),
        CaseRecord(forum=Forum.JAMS, case_id="3", award_amount="N/A"),
    ]
    stats = summarize_cases(records)
    assert stats["total_cases"] == 3
    assert stats["aaa"] == 1
    assert stats["jams"] == 2
    assert stats["missing_data"] == 2
    assert stats["total_award_amount"] == pytest.approx(400.5)
    assert stats["average_award_amount"] == pytest.approx(200.25)
    assert stats["highest_award_amount"] == pytest.approx(300.5)
    assert summarize_cases([])["total_cases"] == 0


def test_cli_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    workbook = tmp_path / "jams_cases.xlsx"
    workbook.write_bytes(to_xlsx(jams_frame()))
    existing = tmp_path / "existing.csv"
    existing.write_text("caseId,forum\nJ-100,JAMS\n", encoding="utf-8")
    config = tmp_path / "ingest.yaml"
    config.write_text(
        dedent(
            f"""
            logging:
              level: INFO
              logs_dir: {tmp_path / 'logs'}
            paths:
              output_dir: {tmp_path / 'out'}
            """
        ),
        encoding="utf-8",
    )

    code = main(["--input", str(workbook), "--existing", str(existing), "--config", str(config)])
    assert code == 0
    report = json.loads((tmp_path / "out" / "ingestion_report.json").read_text(encoding="utf-8"))
    assert report["summary"]["file_type"] == "JAMS"
    assert report["summary"]["duplicates_found"] == 1
    assert (tmp_path / "logs" / "ingestion.log").exists()


def test_cli_rejects_bad_workbook(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    bad = tmp_path / "broken.xlsx"
    bad.write_bytes(b"nope")
    assert main(["--input", str(bad), "--output", str(tmp_path / "out")]) == 1


def test_load_existing_records_json(tmp_path):
    path = tmp_path / "existing.json"
    path.write_text(json.dumps([{"caseId": "A-1"}, "junk", {"case_id": "A-2"}]), encoding="utf-8")
    assert load_existing_records(str(path)) == [{"caseId": "A-1"}, {"case_id": "A-2"}]
    assert load_existing_records(None) == []


def test_cli_missing_snapshot_returns_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    workbook = tmp_path / "jams_cases.xlsx"
    workbook.write_bytes(to_xlsx(jams_frame()))
    code = main(["--input", str(workbook), "--existing", str(tmp_path / "gone.csv"), "--output", str(tmp_path / "out")])
    assert code == 3
    assert not (tmp_path / "out").exists()


def test_cli_rejects_malformed_snapshot_and_missing_input(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    workbook = tmp_path / "jams_cases.xlsx"
    workbook.write_bytes(to_xlsx(jams_frame()))
    not_a_list = tmp_path / "existing.json"
    not_a_list.write_text(json.dumps({"caseId": "J-1"}), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")

    assert main(["--input", str(workbook), "--existing", str(not_a_list)]) == 3
    assert main(["--input", str(workbook), "--existing", str(broken)]) == 3
    assert main(["--input", str(tmp_path / "absent.xlsx")]) == 3


def test_cli_rejects_malformed_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "ingest.yaml"
    config.write_text("logging: [unclosed\n", encoding="utf-8")
    assert main(["--input", str(tmp_path / "x.xlsx"), "--config", str(config)]) == 2


def test_cli_ignores_serial_ids_in_snapshot(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    workbook = tmp_path / "jams_cases.xlsx"
    workbook.write_bytes(to_xlsx(jams_frame()))
    existing = tmp_path / "existing.csv"
    existing.write_text("id,caseId\nJ-100,X-1\n2,j-200\n", encoding="utf-8")
    out = tmp_path / "out"
    assert main(["--input", str(workbook), "--existing", str(existing), "--output", str(out)]) == 0
    report = json.loads((out / "ingestion_report.json").read_text(encoding="utf-8"))
    assert report["summary"]["duplicates_found"] == 1
    dups = pd.read_csv(out / "duplicates.csv", dtype=str, encoding="utf-8-sig")
    assert dups["case_id"].tolist() == ["j-200"]
