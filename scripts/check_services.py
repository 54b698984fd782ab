"""Check configuration and connectivity before starting the server.

Usage:
    python scripts/check_services.py
"""

from __future__ import annotations

import asyncio
import importlib
from pathlib import Path

from dotenv import load_dotenv

if Path(".env").exists():
    load_dotenv(".env")
else:
    load_dotenv(".env.example")

from vapi_gateway.config import settings  # noqa: E402
from vapi_gateway.models.base import create_db_engine, create_session_factory
from vapi_gateway.services.credentials import Credentials
from vapi_gateway.services.health import HealthAggregator, check_datastore
from vapi_gateway.services.transport import VapiTransport
from vapi_gateway.services.vapi_service import VapiService

REQUIRED_PACKAGES = ["fastapi", "httpx", "pydantic_settings", "sqlalchemy", "structlog", "uvicorn"]


async def main() -> int:
    print("1. Environment:")
    print(f"- SERVER_PORT: {settings.server_port}")
    print(f"- APP_ENV: {settings.app_env}")
    print(f"- VAPI_PRIVATE_KEY present: {bool(settings.vapi_private_key)}")
    print(f"- VAPI_PUBLIC_KEY present: {bool(settings.vapi_public_key)}")
    print(f"- VAPI_ASSISTANT_ID present: {bool(settings.vapi_assistant_id)}")
    print(f"- DATABASE_URL present: {bool(settings.database_url)}")

    print("\n2. Vapi:")
    service = VapiService(
        Credentials.from_settings(settings),
        VapiTransport(settings.vapi_base_url, timeout=settings.vapi_timeout),
    )
    try:
        vapi_status = await HealthAggregator(service).check()
    finally:
        await service.close()
    print(f"- {vapi_status.status}: {vapi_status.message or vapi_status.assistantName}")

    print("\n3. Database:")
    session_factory = None
    if settings.database_url:
        session_factory = create_session_factory(create_db_engine(settings.database_url))
    db_status = check_datastore(session_factory)
    print(f"- {db_status.status}{': ' + db_status.message if db_status.message else ''}")

    print("\n4. Packages:")
    missing = 0
    for package in REQUIRED_PACKAGES:
        try:
            importlib.import_module(package)
            print(f"- {package}: OK")
        except ImportError:
            missing += 1
            print(f"- {package}: missing")

    healthy = vapi_status.status == "healthy" or db_status.status == "healthy"
    return 0 if healthy and not missing else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
