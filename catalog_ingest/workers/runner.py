"""
Worker entry point.

Usage:
    python -m catalog_ingest.workers.runner csv
    python -m catalog_ingest.workers.runner dlq
"""
import argparse
import logging
import signal
import sys
from catalog_ingest.core.logging_config import configure_logging
from catalog_ingest.workers.csv_worker import CsvWorker
from catalog_ingest.workers.dlq_processor import DlqProcessor

logger = logging.getLogger(__name__)

WORKERS = {
    'csv': CsvWorker,
    'dlq': DlqProcessor
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a catalog ingestion queue worker")
    parser.add_argument("worker", choices=sorted(WORKERS), help="Queue to consume: csv or dlq")
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    worker = WORKERS[args.worker]()

    def _shutdown(signum, frame):
        logger.info("Received signal %s, finishing in-flight work", signum)
        worker.stop()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    worker.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
