"""Smoke check for a running payment intent API instance."""

import argparse
import asyncio
import time

import httpx


CHECKS = [
    ("GET", "/", None, 200),
    ("GET", "/health", None, 200),
    ("GET", "/test", None, 200),
    ("POST", "/create-payment-intent", {"amount": 0}, 400),
    ("GET", "/does-not-exist", None, 404),
]


async def send_one(client: httpx.AsyncClient, base_url: str, method: str, path: str, payload):
    """Send one request and return (status_code, latency_ms, body)."""

    started = time.perf_counter()
    try:
        resp = await client.request(method, f"{base_url}{path}", json=payload)
        latency = (time.perf_counter() - started) * 1000
        return resp.status_code, latency, resp.text
    except httpx.HTTPError as exc:
        latency = (time.perf_counter() - started) * 1000
        return 599, latency, str(exc)


async def run(base_url: str, amount: float | None, currency: str) -> int:
    """Run every check and print one line per request; return failure count."""

    checks = list(CHECKS)
    if amount is not None:
        # Creates a real payment intent, so only run against test-mode keys.
        checks.append(("POST", "/create-payment-intent", {"amount": amount, "currency": currency}, 200))

    failures = 0
    async with httpx.AsyncClient(timeout=10.0) as client:
        for method, path, payload, expected in checks:
            status, latency, body = await send_one(client, base_url, method, path, payload)
            ok = status == expected
            failures += 0 if ok else 1
            print(f"{'ok  ' if ok else 'FAIL'} {method} {path} status={status} expected={expected} latency_ms={latency:.2f}")
            if not ok:
                print(f"     body={body[:200]}")

    print(f"checks={len(checks)}")
    print(f"failures={failures}")
    return failures


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--amount", type=float, default=None, help="also create a payment intent for this amount")
    parser.add_argument("--currency", default="eur")
    args = parser.parse_args()
    raise SystemExit(1 if asyncio.run(run(args.base_url, args.amount, args.currency)) else 0)
