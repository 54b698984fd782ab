"""Run the gateway with uvicorn: `python -m vapi_gateway`."""

import uvicorn

from vapi_gateway.config import settings


def main() -> None:
    uvicorn.run(
        "vapi_gateway.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level,
        reload=settings.app_env == "development",
    )


if __name__ == "__main__":
    main()
