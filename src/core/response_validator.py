import logging
from typing import Optional

import httpx

from contracts.probe_config import ProbeConfiguration

logger = logging.getLogger(__name__)


def validate_status(config: ProbeConfiguration, status_code: int) -> bool:
    return config.success_criteria.accepts(status_code)


def validate_body(config: ProbeConfiguration, body: str) -> bool:
    for pattern in config.fail_if_matches_regexp:
        if pattern.search(body):
            logger.debug(f"Body matched fail_if_matches_regexp {pattern.pattern!r}")
            return False
    for pattern in config.fail_if_not_matches_regexp:
        if not pattern.search(body):
            logger.debug(f"Body did not match fail_if_not_matches_regexp {pattern.pattern!r}")
            return False
    return True


async def validate_response(
    config: ProbeConfiguration, response: httpx.Response, body: Optional[str] = None
) -> bool:
    """
    Decide whether a probe response counts as a success.

    The status code is checked first; the body is only read (when not
    supplied) if the status code is accepted.

    Args:
        config (ProbeConfiguration): The module's probe configuration.
        response (httpx.Response): The target's response.
        body (Optional[str]): The already-read response text, if any.

    Returns:
        bool: True if both status and body checks pass.
    """
    if not validate_status(config, response.status_code):
        logger.debug(f"Status code {response.status_code} rejected")
        return False
    if body is None:
        await response.aread()
        body = response.text
    return validate_body(config, body)
