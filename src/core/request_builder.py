import logging
from typing import NamedTuple

import httpx

from contracts.probe_config import BODYLESS_METHODS, ProbeConfiguration
from core.errors import BodyNotAllowed, InvalidTarget, InvalidTargetScheme, TargetNotAllowed

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http://", "https://")


class OutboundRequest(NamedTuple):
    """
    A probe request ready to send, with the redirect policy to send it under.
    """

    request: httpx.Request
    follow_redirects: bool


def is_target_allowed(config: ProbeConfiguration, normalized_target: str) -> bool:
    """
    Check a lower-cased target against the module's allow-list. An empty
    allow-list allows everything.
    """
    if not config.allowed_targets:
        return True
    for rule in config.allowed_targets:
        if isinstance(rule, str):
            if rule == normalized_target:
                return True
        elif rule.search(normalized_target):
            return True
    return False


def build_request(config: ProbeConfiguration, target: str) -> OutboundRequest:
    """
    Build the outbound request for a probe. No network I/O happens here.

    The scheme and allow-list checks run on the lower-cased target while the
    request itself is sent to the target as given.

    Args:
        config (ProbeConfiguration): The module's probe configuration.
        target (str): The target URL from the query string.

    Returns:
        OutboundRequest: The request and its redirect policy.

    Raises:
        BodyNotAllowed: If a body is configured for GET or HEAD.
        InvalidTargetScheme: If the target is not an http(s) URL.
        TargetNotAllowed: If the target matches no allow-list entry.
        InvalidTarget: If the target cannot be parsed as a URL.
    """
    if config.body and config.method in BODYLESS_METHODS:
        raise BodyNotAllowed(config.method.value)

    normalized_target = target.lower()
    if not normalized_target.startswith(ALLOWED_SCHEMES):
        raise InvalidTargetScheme(target)
    if not is_target_allowed(config, normalized_target):
        logger.warning(f"Target {target} rejected by allow-list")
        raise TargetNotAllowed(target)

    kwargs = {}
    if config.headers:
        kwargs["headers"] = dict(config.headers)
    if config.body:
        kwargs["content"] = config.body
    try:
        request = httpx.Request(config.method.value, target, **kwargs)
    except httpx.InvalidURL as e:
        logger.warning(f"Target {target} is not a valid URL: {e}")
        raise InvalidTarget(target) from e
    if not request.url.host:
        raise InvalidTarget(target)
    return OutboundRequest(request=request, follow_redirects=config.follow_redirects)
