"""Replace the configured assistant's system prompt with the contents of a file.

Usage:
    python scripts/update_assistant_prompt.py prompts/system_prompt.txt
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from vapi_gateway.config import settings
from vapi_gateway.services.credentials import Credentials
from vapi_gateway.services.transport import VapiTransport
from vapi_gateway.services.vapi_service import VapiService


async def update_prompt(prompt_path: Path) -> None:
    system_prompt = prompt_path.read_text(encoding="utf-8").strip()
    if not system_prompt:
        raise SystemExit(f"{prompt_path} is empty")

    service = VapiService(
        Credentials.from_settings(settings),
        VapiTransport(settings.vapi_base_url, timeout=settings.vapi_timeout),
    )
    if not service.initialized:
        raise SystemExit("Missing VAPI_PRIVATE_KEY, VAPI_PUBLIC_KEY or VAPI_ASSISTANT_ID")

    try:
        assistant = await service.get_assistant()
        model = assistant.get("model", {})
        await service.update_assistant({
            "model": {
                "model": model.get("model", "gpt-4o"),
                "provider": model.get("provider", "openai"),
                "messages": [{"role": "system", "content": system_prompt}],
                "tools": model.get("tools", []),
            }
        })
    finally:
        await service.close()

    print(f"System prompt for {assistant.get('name', settings.vapi_assistant_id)} updated.")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        raise SystemExit(__doc__)
    asyncio.run(update_prompt(Path(sys.argv[1])))
