"""Acquire a WRAP token using credentials from the environment.

Set AZURE_SERVICEBUS_NAMESPACE and AZURE_SERVICEBUS_ACCESS_KEY first.
"""

import asyncio
import logging
import sys

from acswrap import WrapService


async def main(scope_uri: str):
    logging.basicConfig(level=logging.INFO)

    async with WrapService() as service:
        error, token_result, response = await service.acquire_token(scope_uri)

    if error is not None:
        status = response.status_code if response is not None else "n/a"
        print(f"❌ Token request failed ({status}): {error}")
        return 1

    print(f"✅ Token acquired, expires at {token_result.expires_at}")
    print(f"🔑 Authorization: {token_result.authorization_header()[:40]}...")
    return 0


if __name__ == "__main__":
    scope = sys.argv[1] if len(sys.argv) > 1 else "http://localhost/"
    sys.exit(asyncio.run(main(scope)))
