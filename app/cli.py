import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.backend.process import process_upload, write_json_output
from escopo.extractors.excel.reader import MalformedWorkbookError
from escopo.logger import set_level
from escopo.store import ScopeSequenceStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest an escopo-sequência workbook for one education level."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Workbook path (.xlsx or .xls).",
    )
    parser.add_argument(
        "--level",
        required=True,
        help='Education level label, e.g. "Anos Finais".',
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Store JSON path (default: STORE_PATH setting).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write the ingestion summary JSON.",
    )
    parser.add_argument(
        "--output-json-name",
        default=None,
        help="Summary JSON filename (default: result.json, or env OUTPUT_JSON_NAME).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and report without touching the store.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (header scans).",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    path = Path(args.input).expanduser()
    if not path.is_file():
        print(f"[error] input not found: {args.input}")
        return 1
    level = args.level.strip()
    if not level:
        print("[error] --level must not be blank.")
        return 1

    try:
        summary = process_upload(
            path.read_bytes(),
            level,
            store=ScopeSequenceStore(args.store),
            filename=path.name,
            dry_run=args.dry_run,
        )
    except MalformedWorkbookError as e:
        print(f"[error] {path.name}: {e}")
        return 1

    print(f"Level: {summary['level']}")
    print(f"Items: {summary['items_count']} (rows skipped: {summary['rows_skipped']})")
    for sheet in summary["sheets"]:
        if sheet["status"] == "skipped":
            print(f"[skip] {sheet['sheet_name']}: {sheet['reason']}")
        else:
            print(f"[ok]   {sheet['sheet_name']}: {sheet['items_count']} items")
    for warning in summary["warnings"]:
        print(f"[warn] {warning}")
    if args.dry_run:
        print("Dry run: store not modified.")
    else:
        print(f"Saved: {summary['saved']}")

    if args.output_dir:
        json_path = write_json_output(summary, args.output_dir, output_filename=args.output_json_name)
        print("JSON:", json_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
