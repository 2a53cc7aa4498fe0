"""Entry point: python -m storage_cleaner"""

import uvicorn
from .config import settings


def main():
    uvicorn.run(
        "storage_cleaner.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
