# src/combinator/core/request.py
import logging
from typing import TextIO

import pydantic

from combinator.config import EXPECTED_INPUT
from combinator.errors import InputError
from combinator.models import Request

log = logging.getLogger("combinator.request")


def read_request_blob(stream: TextIO) -> str:
    """
    Reads the whole input channel once.
    Real pipes are decoded as UTF-8 regardless of the locale; in-memory text
    streams are read as they are.
    """
    buffer = getattr(stream, "buffer", None)
    try:
        if buffer is None:
            return stream.read()
        return buffer.read().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InputError(f"Input is not valid UTF-8: {e}") from e
    except OSError as e:
        raise InputError(f"Failed to read from stdin: {e}") from e


def decode_request(blob: str) -> Request:
    """
    Parses the JSON request blob.
    Unknown fields are ignored; `workspaceRoot` is accepted as an alias.
    """
    if not blob or not blob.strip():
        raise InputError(
            f"No input provided. Expected JSON on stdin like: {EXPECTED_INPUT}"
        )

    log.debug("Input JSON: %s", blob.strip())

    try:
        request = Request.model_validate_json(blob)
    except pydantic.ValidationError as e:
        raise InputError(_describe(e)) from e

    log.debug("Parsed input: paths=%s, workspace_root=%s", request.paths, request.workspace_root)
    return request


def _describe(error: pydantic.ValidationError) -> str:
    problems = error.errors()
    kinds = {p["type"] for p in problems}

    if "json_invalid" in kinds:
        return f"Failed to parse JSON input. Expected format: {EXPECTED_INPUT}"

    for p in problems:
        if tuple(p["loc"]) == ("paths",) and p["type"] in ("missing", "too_short"):
            return f"No paths provided in input JSON. Expected format: {EXPECTED_INPUT}"

    details = "; ".join(
        f"{'.'.join(str(part) for part in p['loc']) or '<root>'}: {p['msg']}" for p in problems
    )
    return f"Invalid request ({details}). Expected format: {EXPECTED_INPUT}"
