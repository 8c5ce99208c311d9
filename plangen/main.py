import os

import uvicorn

from plangen.core.app_factory import create_app
from plangen.core.config import settings

app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured log setup."""
    uvicorn.run(
        "plangen.main:app",
        host=os.environ.get("APP_HOST", "127.0.0.1"),
        port=int(os.environ.get("APP_PORT", "8000")),
        reload=settings.app.debug,
        log_config=None,
    )


if __name__ == "__main__":
    run()
