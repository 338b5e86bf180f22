"""Centralized courier gateway provider, owner of the process-global client.

API routes and CLI commands obtain the action gateway from HERE so that a
single httpx connection pool is shared. Tests override the gateway through
set_action_gateway() instead of patching call sites.
"""

import asyncio
import logging

from ndrdesk.cli.config import GatewayConfig
from ndrdesk.services.action_gateway import ActionGateway
from ndrdesk.services.delhivery_client import DelhiveryActionGateway

logger = logging.getLogger(__name__)

_action_gateway: ActionGateway | None = None
_action_gateway_lock = asyncio.Lock()


def build_action_gateway(config: GatewayConfig | None = None) -> DelhiveryActionGateway:
    """Build a DelhiveryActionGateway from gateway configuration.

    Args:
        config: Gateway section of the loaded config. Defaults apply when None.

    Returns:
        A new gateway instance (client opened lazily on first call).
    """
    cfg = config or GatewayConfig()
    if not cfg.api_token:
        logger.warning(
            "No courier API token configured; requests to %s will be rejected",
            cfg.base_url,
        )
    return DelhiveryActionGateway(
        api_token=cfg.api_token,
        base_url=cfg.base_url,
        timeout=cfg.timeout_seconds,
    )


async def get_action_gateway(config: GatewayConfig | None = None) -> ActionGateway:
    """Get or create the process-global action gateway.

    Safe under concurrent first use via double-checked locking.

    Args:
        config: Gateway configuration used if the gateway is not built yet.

    Returns:
        The shared ActionGateway instance.
    """
    global _action_gateway
    if _action_gateway is not None:
        return _action_gateway
    async with _action_gateway_lock:
        if _action_gateway is None:
            _action_gateway = build_action_gateway(config)
            logger.info("Action gateway singleton initialized")
    return _action_gateway


def set_action_gateway(gateway: ActionGateway | None) -> None:
    """Replace the process-global gateway (None clears it)."""
    global _action_gateway
    _action_gateway = gateway


async def shutdown_action_gateway() -> None:
    """Close and clear the process-global gateway, if any."""
    global _action_gateway
    gateway = _action_gateway
    _action_gateway = None
    close = getattr(gateway, "close", None)
    if close is not None:
        await close()
        logger.info("Action gateway closed")
