"""Backend entrypoint. Starts uvicorn with host/port from settings."""
import uvicorn

from fund_monitor.config.settings import get_settings
from fund_monitor.main import app


def main() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
