"""
Command-line batch processing of load attempts.

Reads newline-delimited JSON load requests, evaluates them in order against
the velocity limits and writes one JSON response per non-duplicate request.

    velocity-limits input.txt output.txt
    velocity-limits input.txt output.txt --in-memory
"""

import argparse
import logging
import sys
from typing import List, Optional

from sqlalchemy.orm import Session

from velocity_limits.config import settings
from velocity_limits.domain.exceptions import InvalidLoadRequestError
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.infrastructure.database.repositories import LoadRecordRepository
from velocity_limits.infrastructure.database.session import build_engine, init_db
from velocity_limits.infrastructure.memory import InMemoryAggregateStore
from velocity_limits.infrastructure.observability.logging import setup_logging
from velocity_limits.io import read_load_requests, write_load_responses
from velocity_limits.service import BatchResult, process_batch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="velocity-limits",
        description="Accept or reject fund loads against daily and weekly velocity limits",
    )
    parser.add_argument("input", help="File with one JSON load request per line")
    parser.add_argument("output", help="File to write JSON load responses to")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy database URL (default: %(default)s)",
    )
    parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Keep load history in memory instead of a database",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def run(input_path: str, output_path: str, database_url: str, in_memory: bool) -> BatchResult:
    """Evaluate every request in input_path and write the responses"""
    requests = read_load_requests(input_path)

    if in_memory:
        result = process_batch(requests, VelocityEvaluator(InMemoryAggregateStore()))
    else:
        engine = build_engine(database_url)
        init_db(engine)
        with Session(engine) as db:
            result = process_batch(requests, VelocityEvaluator(LoadRecordRepository(db)))
        engine.dispose()

    written = write_load_responses(result.responses, output_path)
    logging.info(
        f"Processed {len(requests)} load requests",
        extra={
            "responses": written,
            "duplicates": result.duplicates,
            "skipped": len(result.skipped),
        },
    )
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout may be redirected into output pipelines; keep logs on stderr
    setup_logging(args.log_level, stream=sys.stderr)

    try:
        run(args.input, args.output, args.database_url, args.in_memory)
    except OSError as e:
        logging.error(f"I/O error: {e}")
        return 1
    except InvalidLoadRequestError as e:
        logging.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
