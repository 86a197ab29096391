import uvicorn

from app.core.config import settings
from app.utils.logging import setup_logging

if __name__ == "__main__":
    setup_logging(settings.log_file)
    uvicorn.run(
        "app.main:app", host=settings.host, port=settings.port, log_config=None, log_level=None
    )
