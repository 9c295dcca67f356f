"""
Dict-in, dict-out entry point.

Wraps the orchestrator for callers that speak the camelCase JSON contract,
such as an HTTP handler or the command line.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .core.errors import InputError
from .core.settings import EngineConfig
from .schemas import parse_request
from .solvers.adaptive_solver import optimize

logger = logging.getLogger(__name__)


def optimize_request(
    payload: Mapping[str, Any], config: Optional[EngineConfig] = None
) -> Dict[str, Any]:
    """
    Optimize a route described by a request payload.

    Malformed payloads never raise; they produce
    ``{"success": False, "message": ...}``.

    Args:
        payload: Request in the camelCase contract
        config: Engine configuration (defaults to EngineConfig())

    Returns:
        Result in the camelCase output contract
    """
    try:
        places, start, settings = parse_request(payload)
    except InputError as exc:
        logger.info("Rejected route request: %s", exc)
        return {"success": False, "message": str(exc)}
    return optimize(places, start, settings, config).to_dict()
