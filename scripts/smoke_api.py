"""
Smoke test against a running tip triage service
"""

import asyncio

import httpx


SAMPLE_REQUEST = {
    "tip": {
        "tip_id": "smoke-1",
        "case_id": "case-smoke",
        "content": (
            "I saw a girl matching the poster near the Berri-UQAM metro entrance "
            "around 3pm yesterday. She wore a red jacket and carried a blue backpack."
        ),
        "location": "Berri-UQAM metro, Montreal",
        "latitude": 45.5153,
        "longitude": -73.5610,
    },
    "case_context": {
        "id": "case-smoke",
        "priority_level": "p1_high",
        "last_seen_latitude": 45.5017,
        "last_seen_longitude": -73.5673,
        "last_seen_date": "2026-01-15T10:00:00Z",
    },
}


async def smoke_api():
    """Exercise service endpoints"""

    base_url = "http://localhost:8001"

    print("Testing Tip Triage API...")
    print("=" * 50)

    async with httpx.AsyncClient(timeout=30.0) as client:
        print("\n1. Health check...")
        response = await client.get(f"{base_url}/health")
        print(f"Status: {response.status_code}")
        print(f"Response: {response.json()}")

        print("\n2. Verify endpoint...")
        response = await client.post(f"{base_url}/verify", json=SAMPLE_REQUEST)
        print(f"Status: {response.status_code}")
        data = response.json()
        print(f"Score: {data.get('overall_score')} -> {data.get('priority_bucket')} ({data.get('verification_status')})")
        print(f"Summary: {data.get('summary')}")

        print("\n3. Mismatched case id...")
        bad = {**SAMPLE_REQUEST, "tip": {**SAMPLE_REQUEST["tip"], "case_id": "other-case"}}
        response = await client.post(f"{base_url}/verify", json=bad)
        print(f"Status: {response.status_code} (expected 422)")

        print("\n4. Metrics...")
        response = await client.get(f"{base_url}/metrics")
        print(f"Response: {response.json()}")

    print("\n" + "=" * 50)
    print("Smoke test completed")


if __name__ == "__main__":
    asyncio.run(smoke_api())
