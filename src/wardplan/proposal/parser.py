# src/wardplan/proposal/parser.py
from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from wardplan.errors import ProposalError
from wardplan.schemas.models import ExternalProposal

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n(.*?)```", re.DOTALL)


def extract_json(text: str) -> Any:
    """
    @brief
    Extract the first JSON object from free-form model output.

    @details
    A fenced ```json block wins. Otherwise every balanced {...} span is tried
    in order and the first one that decodes is returned, so prose such as
    "use {braces}" before the real answer is skipped. Braces inside JSON
    strings are ignored while balancing.

    @raises
        ProposalError
            No JSON object found, or no candidate decodes.
    """
    if not isinstance(text, str) or not text.strip():
        raise ProposalError(
            message="Empty proposal text",
            source="parser.extract_json",
            suggested_action="Check that the proposal source returned content.",
        )

    m = _FENCED_JSON.search(text)
    candidates = [m.group(1).strip()] if m else list(_balanced_objects(text))
    if not candidates:
        raise ProposalError(
            message="No valid JSON found in proposal",
            source="parser.extract_json",
            suggested_action="Ask the source to answer with a single JSON object.",
        )

    last_error: json.JSONDecodeError | None = None
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug("Skipping undecodable candidate: %.40r", candidate)
            last_error = e

    raise ProposalError(
        message=f"Proposal JSON does not decode: {last_error}",
        source="parser.extract_json",
        suggested_action="Ask the source to answer with a single JSON object.",
    ) from last_error


def _balanced_objects(text: str) -> Iterator[str]:
    depth = 0
    start: int | None = None
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and start is not None:
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                yield text[start : i + 1]
                start = None


def parse_proposal(text: str) -> ExternalProposal:
    """
    @brief
    Turn untrusted proposal text into an ExternalProposal.

    @details
    Only the shape is checked here (an object with an `assignments` list of
    {nurseName, assignedRooms}); whether names and rooms make sense is the
    assignment validator's job. Entries without a usable name are kept
    with `nurse_name=None` so the validator can report them.

    @raises
        ProposalError
            Text holds no JSON object or the object has the wrong shape.
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ProposalError(
            message=f"Proposal root must be an object, got {type(data).__name__}",
            source="parser.parse_proposal",
            suggested_action="Return {\"assignments\": [...], \"warnings\": [...]}.",
        )

    try:
        proposal = ExternalProposal.model_validate(data)
    except ValidationError as e:
        raise ProposalError(
            message=f"Invalid proposal structure: {e}",
            source="parser.parse_proposal",
            suggested_action="Each assignment needs nurseName and assignedRooms.",
        ) from e

    logger.debug("Parsed proposal with %d nurse entries", len(proposal.assignments))
    return proposal


__all__ = ["extract_json", "parse_proposal"]
