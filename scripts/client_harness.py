"""Simple client harness that creates a topic, publishes a few typed messages and reads them back.

Run against a local gateway: python scripts/client_harness.py [base_url]
"""
import asyncio
import sys
import uuid

import httpx

BASE = "http://127.0.0.1:8080"


async def run(base: str = BASE):
    topic = f"harness-{uuid.uuid4().hex[:8]}"
    async with httpx.AsyncClient(base_url=base, timeout=30.0) as client:
        r = await client.post(f"/create/{topic}")
        print("create", r.status_code, r.text)

        messages = [
            {"type": "new_user", "content": {"name": "Ada", "email": "ada@example.com", "phone": "555-0100"}},
            {"type": "new_payment", "content": {"id": "p-1", "amount": 1200, "status": "settled"}},
            # rejected: status missing
            {"type": "new_payment", "content": {"id": "p-2", "amount": 10}},
            # rejected: unknown type
            {"type": "new_order", "content": {"id": "o-1"}},
        ]
        for msg in messages:
            r = await client.post(f"/publish/{topic}", json=msg)
            print("publish", msg["type"], r.status_code, r.text)

        r = await client.get("/topics")
        print(r.text)

        async with client.stream("GET", f"/messages/{topic}") as resp:
            async for line in resp.aiter_lines():
                if line:
                    print(line)


if __name__ == '__main__':
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else BASE))
