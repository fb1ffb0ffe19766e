"""Run the API server: python -m insightboard"""

import uvicorn

from insightboard.core.config import get_settings
from insightboard.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
