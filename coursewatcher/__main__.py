"""
Run the server for the course in COURSEWATCHER_COURSE_PATH (default: current directory).

    python -m coursewatcher
"""
import uvicorn

from coursewatcher.config import settings
from coursewatcher.main import create_app


def main():
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
