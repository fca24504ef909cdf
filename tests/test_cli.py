import json

from app.cli import main
from escopo.store import ScopeSequenceStore


def test_cli_ingests_and_writes_summary(tmp_path, ciencias_workbook, store_path, capsys):
    workbook = tmp_path / "escopo.xlsx"
    workbook.write_bytes(ciencias_workbook)
    out_dir = tmp_path / "out"

    code = main(
        [
            "--input", str(workbook),
            "--level", "Anos Finais",
            "--store", store_path,
            "--output-dir", str(out_dir),
        ]
    )

    assert code == 0
    printed = capsys.readouterr().out
    assert "Items: 1" in printed
    assert "[ok]   Ciências: 1 items" in printed

    summary = json.loads((out_dir / "result.json").read_text(encoding="utf-8"))
    assert summary["level"] == "Anos Finais"
    assert summary["items"][0]["skillCode"] == "EF06CI01"
    assert len(ScopeSequenceStore(store_path).get_level("Anos Finais")) == 1


def test_cli_dry_run_leaves_store_untouched(tmp_path, ciencias_workbook, store_path):
    workbook = tmp_path / "escopo.xlsx"
    workbook.write_bytes(ciencias_workbook)

    code = main(["--input", str(workbook), "--level", "Anos Finais", "--store", store_path, "--dry-run"])

    assert code == 0
    assert ScopeSequenceStore(store_path).get_level("Anos Finais") == []


def test_cli_reports_malformed_workbook(tmp_path, store_path, capsys):
    bad = tmp_path / "bad.xlsx"
    bad.write_bytes(b"plain text")

    assert main(["--input", str(bad), "--level", "Anos Finais", "--store", store_path]) == 1
    assert "[error]" in capsys.readouterr().out


def test_cli_missing_input(tmp_path, store_path):
    assert main(["--input", str(tmp_path / "nope.xlsx"), "--level", "x", "--store", store_path]) == 1


def test_cli_output_json_name_from_flag_and_env(tmp_path, ciencias_workbook, store_path, monkeypatch):
    workbook = tmp_path / "escopo.xlsx"
    workbook.write_bytes(ciencias_workbook)
    out_dir = tmp_path / "out"
    base = ["--input", str(workbook), "--level", "Anos Finais", "--store", store_path, "--dry-run"]

    monkeypatch.setenv("OUTPUT_JSON_NAME", "from_env.json")
    assert main(base + ["--output-dir", str(out_dir)]) == 0
    assert (out_dir / "from_env.json").is_file()

    assert main(base + ["--output-dir", str(out_dir), "--output-json-name", "explicit.json"]) == 0
    assert (out_dir / "explicit.json").is_file()
    assert not (out_dir / "result.json").exists()
