from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
import os
import time
import logging

from sqlalchemy.orm import Session

from coursewatcher.config import Settings, settings as default_settings
from coursewatcher.core.exceptions import NotFoundError
from coursewatcher.core.naming import extract_sort_order, has_extension, parse_filename
from coursewatcher.database import Store
from coursewatcher.models import Module, Video, VideoStatus


@dataclass
class DiscoveredVideo:
    path: str
    filename: str
    title: str
    sort_order: int
    # None = course root
    module_name: Optional[str] = None
    module_path: Optional[str] = None


class CourseScanner:
    """Finds video files under a course directory and records them in the store"""

    def __init__(self, store: Store, settings: Settings = default_settings):
        self.store = store
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.module_cache: Dict[str, Module] = {}

    def scan(self, root_path=None) -> dict:
        """
        Discover videos and merge them into the database in one transaction.
        Existing rows only get their title refreshed; progress is never touched
        and rows for vanished files are kept.
        """
        root = Path(root_path if root_path is not None else self.settings.course_path).resolve()

        if not root.is_dir():
            raise NotFoundError(f"Course directory {root}")

        start_time = time.time()
        self.logger.info(f"Scanning {root} for videos...")

        skipped: List[dict] = []
        discovered = self.find_videos(root, skipped)

        # Stable sort: equal keys keep discovery order
        discovered.sort(key=lambda v: v.sort_order)

        self.module_cache = {}
        added, existing = self.store.run_atomic(lambda db: self._reconcile(db, discovered))

        summary = {
            "total": len(discovered),
            "added": added,
            "already_present": existing,
            "skipped": skipped,
        }

        elapsed = round(time.time() - start_time, 2)
        self.logger.info(
            f"Found {summary['total']} videos ({added} new, {existing} existing, "
            f"{len(skipped)} folders skipped) in {elapsed}s"
        )
        return summary

    def find_videos(self, root: Path, skipped: Optional[List[dict]] = None) -> List[DiscoveredVideo]:
        """
        Walk the tree under root and collect video files.
        Unreadable folders are skipped (and reported in `skipped`) instead of failing the scan.
        """
        root = Path(root)
        videos: List[DiscoveredVideo] = []
        data_folder = self.settings.data_folder_name

        def on_error(err: OSError):
            self.logger.warning(f"Skipping unreadable folder {err.filename}: {err.strerror or err}")
            if skipped is not None:
                skipped.append({"path": str(err.filename), "reason": err.strerror or str(err)})

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            # Never descend into our own data folder; sort for a predictable walk
            dirnames[:] = sorted(d for d in dirnames if d != data_folder)

            for filename in sorted(filenames):
                if not has_extension(filename, self.settings.video_extensions):
                    continue

                full_path = Path(dirpath) / filename
                videos.append(self._describe(root, full_path))

        return videos

    @staticmethod
    def _describe(root: Path, full_path: Path) -> DiscoveredVideo:
        title, sort_order = parse_filename(full_path.name)
        parts = full_path.relative_to(root).parts

        video = DiscoveredVideo(
            path=str(full_path),
            filename=full_path.name,
            title=title,
            sort_order=sort_order,
        )

        # Group by the top level folder; files directly in root have no module
        if len(parts) > 1:
            video.module_name = parts[0]
            video.module_path = str(root / parts[0])

        return video

    def _reconcile(self, db: Session, discovered: List[DiscoveredVideo]):
        added = 0
        existing_count = 0

        # Pre-fetch known videos in one query instead of one lookup per file
        existing_map = {v.path: v for v in db.query(Video).all()}

        for found in discovered:
            existing = existing_map.get(found.path)

            if existing:
                # Title rules may have changed since the last scan
                existing.title = found.title
                existing_count += 1
                continue

            module = self.get_or_create_module(db, found.module_path, found.module_name)

            video = Video(
                path=found.path,
                filename=found.filename,
                title=found.title,
                module_id=module.id if module else None,
                sort_order=found.sort_order,
                status=VideoStatus.UNWATCHED.value,
                position=0,
                duration=0,
            )
            db.add(video)
            existing_map[found.path] = video
            added += 1

        db.flush()
        return added, existing_count

    def get_or_create_module(self, db: Session, path: Optional[str], name: Optional[str]) -> Optional[Module]:
        if path is None:
            return None

        if path in self.module_cache:
            return self.module_cache[path]

        module = db.query(Module).filter(Module.path == path).first()

        if not module:
            module = Module(name=name, path=path, sort_order=extract_sort_order(name))
            db.add(module)
            db.flush()
            self.logger.debug(f"Created module: {name}")

        self.module_cache[path] = module
        return module
