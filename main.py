"""
NOTE: Smoke test against the real remote model. Requires GITHUB_TOKEN (a GitHub Personal Access Token with Models access)
NOTE: The single-shot inquiries run concurrently. Each one still classifies first and responds second
NOTE: The orchestrator is shared, the AppContext inside each call is per-request
"""

import asyncio
from customer_service.agents import AgentFactory
from customer_service.config import AgentSettings
from customer_service.db import MockDB
from customer_service.orchestrator import InquiryOrchestrator


async def main():
    settings = AgentSettings.from_env()
    if not settings.has_token:
        print("ERROR: GITHUB_TOKEN environment variable is not set!")
        print("Please set your GitHub Personal Access Token:")
        print("  export GITHUB_TOKEN=github_pat_xxxxxxxxxx")
        return

    orchestrator = InquiryOrchestrator(AgentFactory(settings), MockDB())

    requests = [
        {"customer_id": "CUST-001", "message": "I want to track my order ORD-12345. Can you help me?"},
        {"customer_id": "CUST-001", "message": "Can you recommend some good wireless headphones?"},
    ]

    results = await asyncio.gather(
        *(orchestrator.process(r["message"], r["customer_id"]) for r in requests)
    )

    for i, result in enumerate(results):
        print(f"--- Test Case {i} ---")
        print(f"--- Customer: '{requests[i]['message']}' ---")
        print(f"Response: {result}")
        print("--------------------------------")

    print("--- Streaming Response ---")
    print("Response: ", end="", flush=True)
    async for chunk in orchestrator.process_stream("What products do you have in stock?", "CUST-001"):
        print(chunk, end="", flush=True)
    print()


if __name__ == "__main__":
    asyncio.run(main())
