import sys
import json
import logging
import argparse

from release_stats.config import (
    JSON_LOG_FILE,
    LOG_FILE,
    METRICS_PORT,
    RAW_DATA_CSV,
    REPOS,
    STATS_CSV,
)
from release_stats.crawler.manager import run_collection
from release_stats.dashboard import DashboardService
from release_stats.storage.csv_export import read_records_csv
from release_stats.utils.logging_setup import setup_logging
from release_stats.utils.metrics import start_metrics_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-stats",
        description="GitHub release statistics",
    )
    parser.add_argument("--metrics-port", type=int, default=METRICS_PORT,
                        help="Expose Prometheus metrics on this port (0 = off)")
    parser.add_argument("--log-file", default=LOG_FILE)
    parser.add_argument("--json-log-file", default=JSON_LOG_FILE or None)
    sub = parser.add_subparsers(dest="command", required=True)

    collect = sub.add_parser("collect", help="Fetch releases and export CSV tables")
    collect.add_argument("repos", nargs="*", help="owner/repo (default: REPOS setting)")
    collect.add_argument("--raw-csv", default=RAW_DATA_CSV)
    collect.add_argument("--stats-csv", default=STATS_CSV)
    collect.add_argument("--save-db", action="store_true",
                         help="Also persist records and stats to the database")

    report = sub.add_parser("report", help="Print the dashboard report as JSON")
    report.add_argument("--input", default=RAW_DATA_CSV, help="Release table CSV")
    report.add_argument("--repository", default=None, help="Repository filter (default: all)")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_file=args.log_file, json_log_file=args.json_log_file)

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    if args.command == "collect":
        repos = args.repos or REPOS
        if not repos:
            logging.error("No repositories given and REPOS is empty")
            return 1
        run_collection(repos, raw_csv=args.raw_csv, stats_csv=args.stats_csv, save_db=args.save_db)
        return 0

    result = read_records_csv(args.input)
    service = DashboardService(result.records)
    print(json.dumps(service.get_dashboard(args.repository), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
