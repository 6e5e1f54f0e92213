# scripts/check_applications.py
"""
Check an applications document and print what is in it.

Usage:
  # summary of the configured data file
  python scripts/check_applications.py

  # another file, only one month, machine-readable
  python scripts/check_applications.py --file backup/applications.json --month 2024-03 --json

Exit status is 1 when the document cannot be read or parsed, or when two
records share an id. Nothing is ever written.
"""

import argparse
import json
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.config.settings import get_data_file  # noqa: E402
from app.services.application_store import ALL_MONTHS, ApplicationStore  # noqa: E402
from app.services.errors import TrackerError  # noqa: E402
from app.services.repository import JsonFileApplicationRepository  # noqa: E402


def check(path: Path, month: str = ALL_MONTHS) -> dict:
    """Returns a report dict; raises TrackerError if the document is unusable."""
    repo = JsonFileApplicationRepository(path)
    store = ApplicationStore(repo)

    summary = store.summarize()
    applied_month, records = store.list_applications(month=month)
    ids = Counter(r.id for r in repo.load_all())
    duplicates = sorted(i for i, n in ids.items() if n > 1)

    return {
        "file": str(path),
        "exists": path.exists(),
        **summary,
        "month": applied_month,
        "listed": [
            {"id": r.id, "dateReceived": r.date_received, "company": r.company, "role": r.role,
             "status": r.status.value if r.status else None}
            for r in records
        ],
        "duplicate_ids": duplicates,
    }


def print_report(report: dict):
    print(f"📂 {report['file']}" + ("" if report["exists"] else " (not created yet)"))
    print(f"   Total applications: {report['total']}")
    for month, n in report["months"].items():
        print(f"   • {month}: {n}")
    if report["statuses"]:
        print("   Status: " + ", ".join(f"{s}={n}" for s, n in report["statuses"].items()))
    print(f"\n🗓️  {report['month']} ({len(report['listed'])})")
    for row in report["listed"]:
        print(f"   [{row['id']}] {row['dateReceived']}  {row['company']} — {row['role']}  ({row['status'] or 'no status'})")
    if report["duplicate_ids"]:
        print(f"\n❌ Duplicate ids: {', '.join(report['duplicate_ids'])}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check the job applications document")
    parser.add_argument("--file", type=Path, default=None, help="Document to check (default: configured data file)")
    parser.add_argument("--month", default=ALL_MONTHS, help="YYYY-MM to list, or 'all' (default)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)

    path = args.file or get_data_file()
    try:
        report = check(path, month=args.month)
    except TrackerError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
    else:
        print_report(report)
    return 1 if report["duplicate_ids"] else 0


if __name__ == "__main__":
    sys.exit(main())
