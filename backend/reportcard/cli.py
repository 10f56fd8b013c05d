"""
Command line report card viewer.

Usage:
    report-card view --name "Jane Doe" --id S-1001
    report-card view --name "Jane Doe" --id S-1001 --api-url http://backend:8000
"""

import argparse
import sys

from reportcard.client import ReportCardClient, ReportSession, render_report
from reportcard.errors import InvalidCredentials, MissingCredentials
from reportcard.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="report-card", description="View a student report card")
    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="log in with name and ID and print the report card")
    view.add_argument("--name", required=True)
    view.add_argument("--id", dest="student_id", required=True)
    view.add_argument("--api-url", default=None, help="backend base URL (default: $API_URL)")
    return parser


def main(argv=None, client: ReportCardClient = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    client = client or ReportCardClient(base_url=args.api_url)
    session = ReportSession(client)
    try:
        report = session.login(args.name, args.student_id)
        print(render_report(session.current, report))
        return 0
    except (MissingCredentials, InvalidCredentials) as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        session.logout()
        client.close()


if __name__ == "__main__":
    sys.exit(main())
