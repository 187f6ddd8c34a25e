# src/wardplan/proposal/fallback.py
"""
External proposal path with a deterministic safety net.

The caller owns the transport (HTTP client, LLM SDK, ...) and passes it in as
a callable `(system_prompt, user_prompt) -> str`. Whatever comes back goes
through the parser and the assignment validator; any failure along the way
hands the request to the scheduling engine instead.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from wardplan.engine.engine import SchedulingEngine
from wardplan.errors import ProposalError, WardplanError
from wardplan.proposal.parser import parse_proposal
from wardplan.proposal.prompt import build_prompts
from wardplan.schemas.models import Config, Room, SchedulingResult
from wardplan.validator.validator import validate_external_proposal

logger = logging.getLogger(__name__)

ProposalSource = Callable[[str, str], str]

FALLBACK_NOTICE = "Used fallback algorithm instead"


def request_proposal(
    source: ProposalSource,
    system_prompt: str,
    user_prompt: str,
    max_attempts: int = 3,
    backoff_seconds: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    @brief
    Call the proposal source, retrying failed calls with exponential backoff.

    @details
    Exceptions raised by the source and empty answers count as failed
    attempts. The delay starts at `backoff_seconds` and doubles after each
    failure; no delay follows the last attempt.

    @raises
        ProposalError
            Every attempt failed; the message carries the last reason.
    """
    last_reason = "No response from proposal source"
    for attempt in range(1, max_attempts + 1):
        try:
            text = source(system_prompt, user_prompt)
        except Exception as e:  # transport errors are caller-defined
            last_reason = str(e) or type(e).__name__
        else:
            if text and text.strip():
                return text
            last_reason = "No response from proposal source"

        if attempt < max_attempts:
            wait = backoff_seconds * 2 ** (attempt - 1)
            logger.warning(
                "Proposal attempt %d/%d failed (%s), retrying in %.1fs",
                attempt,
                max_attempts,
                last_reason,
                wait,
            )
            sleep(wait)

    raise ProposalError(
        message=last_reason,
        source="fallback.request_proposal",
        suggested_action="Check the proposal source or rely on the scheduling engine.",
    )


def schedule_with_proposal(
    nurse_names: Sequence[str],
    rooms: Sequence[Room],
    source: ProposalSource,
    cfg: Config | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SchedulingResult:
    """
    @brief
    Plan a shift from an external proposal, falling back to the engine.

    @details
    (1) empty floor short-circuits to the engine result, the source is not called;
    (2) prompts are built and the source is called with retries;
    (3) the answer is parsed and validated against the roster and the rooms;
        unoccupied rooms cannot be claimed but stay in the result;
    (4) on any failure the engine result is returned with the failure reason
        and FALLBACK_NOTICE in front of its warnings.

    A proposal that parses is returned even when it breaks policy; its
    warnings say so.

    @raises
        ConfigError
            Roster size outside 5, 6 or 7 (raised before the source is called).
    """
    cfg = cfg or Config()
    engine = SchedulingEngine(cfg)
    occupied = [r for r in rooms if r.is_occupied]

    # (1) Nothing to ask for
    if not occupied:
        return engine.generate(nurse_names, rooms)

    # (2) Prompts validate the roster, so ConfigError propagates from here
    system_prompt, user_prompt = build_prompts(
        nurse_names, occupied, cfg.prioritize_continuity
    )

    try:
        text = request_proposal(
            source,
            system_prompt,
            user_prompt,
            max_attempts=cfg.proposal.max_attempts,
            backoff_seconds=cfg.proposal.backoff_seconds,
            sleep=sleep,
        )
        # (3) Parse and validate
        proposal = parse_proposal(text)
        return validate_external_proposal(
            nurse_names, rooms, proposal.assignments, proposal.warnings
        )
    except WardplanError as e:
        reason = e.message
    except Exception as e:  # unexpected parser/validator failure, still fall back
        logger.exception("Unexpected failure in proposal path")
        reason = str(e) or type(e).__name__

    # (4) Deterministic fallback
    logger.warning("Proposal scheduling failed (%s), falling back to engine", reason)
    fallback = engine.generate(nurse_names, rooms)
    return fallback.model_copy(
        update={
            "warnings": [f"AI scheduling failed: {reason}", FALLBACK_NOTICE, *fallback.warnings],
            "success": False,
            "source": "fallback",
        }
    )


__all__ = ["FALLBACK_NOTICE", "ProposalSource", "request_proposal", "schedule_with_proposal"]
