"""JSON-lines reader for load requests and writer for load responses"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import ValidationError

from velocity_limits.api.v1.schemas import LoadRequestSchema, LoadResponseSchema
from velocity_limits.domain.exceptions import InvalidLoadRequestError
from velocity_limits.domain.models import LoadRequest, LoadResponse

PathLike = Union[str, Path]


def parse_load_request(line: str) -> LoadRequest:
    """
    Parse one JSON line into a LoadRequest.

    Raises:
        InvalidLoadRequestError: Malformed JSON or invalid field values
    """
    try:
        return LoadRequestSchema.model_validate_json(line).to_domain()
    except ValidationError as e:
        raise InvalidLoadRequestError(f"Invalid load request: {e}") from e


def read_load_requests(path: PathLike) -> List[LoadRequest]:
    """Read newline-delimited load requests; blank lines are skipped"""
    logging.info(f"Reading load requests from {path}")

    requests = []
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                requests.append(parse_load_request(line))
            except InvalidLoadRequestError as e:
                raise InvalidLoadRequestError(f"{path}:{line_no}: {e}") from e

    logging.info(f"Read {len(requests)} load requests")
    return requests


def format_load_response(response: LoadResponse) -> str:
    return LoadResponseSchema.from_domain(response).model_dump_json()


def write_load_responses(responses: Iterable[LoadResponse], path: PathLike) -> int:
    """Write one JSON object per line, without a newline after the last one"""
    lines = [format_load_response(r) for r in responses]
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
    return len(lines)
