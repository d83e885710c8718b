from typing import ClassVar
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: ClassVar[str] = "CourseWatcher"
    version: ClassVar[str] = "1.0.0"

    # Directory holding the course videos (and the data folder)
    course_path: Path = Path(".")

    # --- SERVER ---
    host: str = "127.0.0.1"
    port: int = 3000

    # --- STORAGE ---
    # The data folder lives inside the course so the whole thing can be copied around
    data_folder_name: str = ".coursewatcher"
    db_filename: str = "database.sqlite"

    # --- SCANNING ---
    video_extensions: list[str] = [".mp4", ".webm", ".ogv", ".ogg"]
    scan_on_startup: bool = True

    # 90% watched = completed
    completion_threshold: float = Field(default=0.9, gt=0, le=1)

    # --- LOGGING ---
    log_level: str = "INFO"
    log_file: str = "coursewatcher.log"

    model_config = SettingsConfigDict(env_file=".env",
                                      env_prefix="COURSEWATCHER_",
                                      extra="ignore",
                                      env_ignore_empty=True,
                                      case_sensitive=False,
                                      )

    @property
    def data_folder(self) -> Path:
        return Path(self.course_path) / self.data_folder_name

    @property
    def db_path(self) -> Path:
        return self.data_folder / self.db_filename

    @property
    def log_dir(self) -> Path:
        return self.data_folder / "logs"

    @property
    def lock_path(self) -> Path:
        return self.data_folder / "coursewatcher.lock"


settings = Settings()
