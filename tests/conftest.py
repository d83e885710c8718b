import pytest
from pathlib import Path
from typing import Generator
from fastapi.testclient import TestClient

from coursewatcher.config import Settings
from coursewatcher.database import Store
from coursewatcher.main import create_app
from coursewatcher.models import Video
from coursewatcher.services.library import LibraryService
from coursewatcher.services.notes import NotesService
from coursewatcher.services.progress import ProgressService
from coursewatcher.services.scanner import CourseScanner


def touch_video(path: Path, content: bytes = b"") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


# 1. COURSE ON DISK
@pytest.fixture(scope="function")
def course_dir(tmp_path) -> Path:
    """
    A small course:
        01. Introduction.mp4
        02. Getting Started.mp4
        Module 1 - Basics/01. First Lesson.mp4
        Module 1 - Basics/02. Second Lesson.mp4
    """
    course = tmp_path / "course"
    touch_video(course / "01. Introduction.mp4", b"dummy content")
    touch_video(course / "02. Getting Started.mp4", b"dummy content")
    touch_video(course / "Module 1 - Basics" / "01. First Lesson.mp4")
    touch_video(course / "Module 1 - Basics" / "02. Second Lesson.mp4")
    return course


@pytest.fixture(scope="function")
def course_settings(course_dir) -> Settings:
    return Settings(course_path=course_dir)


# 2. STORE FIXTURE
@pytest.fixture(scope="function")
def store(course_settings) -> Generator:
    """
    Opens a fresh database inside the course's data folder for every test.
    """
    db = Store(course_settings).initialize()
    yield db

    # Cleanup
    db.close()


# 3. SERVICE FIXTURES
@pytest.fixture(scope="function")
def scanner(store, course_settings) -> CourseScanner:
    return CourseScanner(store, course_settings)


@pytest.fixture(scope="function")
def library(store) -> LibraryService:
    return LibraryService(store)


@pytest.fixture(scope="function")
def progress(store, course_settings) -> ProgressService:
    return ProgressService(store, course_settings)


@pytest.fixture(scope="function")
def notes(store) -> NotesService:
    return NotesService(store)


@pytest.fixture(scope="function")
def scanned(scanner) -> dict:
    """Runs the initial scan and returns its summary"""
    return scanner.scan()


@pytest.fixture(scope="function")
def video_id(store, scanned):
    """Lookup helper: video id by filename"""

    def _lookup(filename: str) -> int:
        video = store.session.query(Video).filter(Video.filename == filename).one()
        return video.id

    return _lookup


# 4. CLIENT FIXTURE
@pytest.fixture(scope="function")
def client(course_settings) -> Generator:
    """
    TestClient running the full lifespan: opens the store and scans the course.
    Do not combine with the `store` fixture; a course can only be opened once.
    """
    app = create_app(course_settings)

    with TestClient(app) as c:
        yield c
