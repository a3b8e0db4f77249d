"""Callback-style token acquisition with a per-call timeout."""

import asyncio

from acswrap import WrapService


def on_token(error, token_result, response):
    if error:
        print(f"❌ {type(error).__name__}: {error}")
    else:
        print(f"✅ Token valid for {token_result.expires_in}s")


async def main():
    service = WrapService()
    task = service.wrap_access_token("http://localhost/", {"timeout": 10}, on_token)
    await task
    await service.aclose()


if __name__ == "__main__":
    asyncio.run(main())
