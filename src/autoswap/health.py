"""RPC endpoint health probe."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

HEALTH_REQUEST = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "getHealth",
    "params": [],
}


async def check_rpc_health(
    rpc_url: str,
    timeout: float = 10.0,
    client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """Probe a Solana JSON-RPC endpoint with a single getHealth call.

    The endpoint is healthy only if the response ``result`` is ``"ok"``.
    Network errors and malformed responses count as unhealthy. No retries.

    Args:
        rpc_url: JSON-RPC endpoint
        timeout: Request timeout in seconds
        client: Optional HTTP client to reuse

    Returns:
        True if the endpoint reports healthy
    """
    try:
        if client is not None:
            response = await client.post(rpc_url, json=HEALTH_REQUEST, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as http:
                response = await http.post(rpc_url, json=HEALTH_REQUEST)

        if response.status_code != 200:
            logger.warning(f"RPC health check HTTP {response.status_code} from {rpc_url}")
            return False

        data = response.json()
        healthy = isinstance(data, dict) and data.get("result") == "ok"
        if not healthy:
            logger.warning(f"RPC endpoint {rpc_url} not healthy: {data}")
        return healthy

    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.warning(f"RPC health check failed for {rpc_url}: {e}")
        return False
