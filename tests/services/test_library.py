import pytest

from coursewatcher.core.exceptions import NotFoundError
from tests.conftest import touch_video

INTRO = "01. Introduction.mp4"
STARTED = "02. Getting Started.mp4"
FIRST = "01. First Lesson.mp4"
SECOND = "02. Second Lesson.mp4"


def _filenames(group):
    return [v.filename for v in group["videos"]]


def test_list_modules_root_first(library, scanned):
    groups = library.list_modules_with_videos()

    assert [g["name"] for g in groups] == ["Videos", "Module 1 - Basics"]
    assert groups[0]["id"] is None
    assert _filenames(groups[0]) == [INTRO, STARTED]
    assert _filenames(groups[1]) == [FIRST, SECOND]


@pytest.mark.parametrize("sort_mode,root_order", [
    ("name", [INTRO, STARTED]),
    ("name_desc", [STARTED, INTRO]),
    ("date", [INTRO, STARTED]),
    ("date_desc", [STARTED, INTRO]),
    ("bogus", [INTRO, STARTED]),
    (None, [INTRO, STARTED]),
])
def test_list_modules_sort_modes(library, scanned, sort_mode, root_order):
    groups = library.list_modules_with_videos(sort_mode)
    assert _filenames(groups[0]) == root_order


def test_no_root_group_without_root_videos(tmp_path):
    from coursewatcher.config import Settings
    from coursewatcher.database import Store
    from coursewatcher.services.library import LibraryService
    from coursewatcher.services.scanner import CourseScanner

    course = tmp_path / "course"
    touch_video(course / "02 - Later" / "a.mp4")
    touch_video(course / "01 - Sooner" / "b.mp4")
    settings = Settings(course_path=course)

    with Store(settings) as db:
        CourseScanner(db, settings).scan()
        groups = LibraryService(db).list_modules_with_videos()

    assert [g["name"] for g in groups] == ["01 - Sooner", "02 - Later"]


def test_empty_library(library):
    assert library.list_modules_with_videos() == []


def test_get_by_id(library, video_id):
    video = library.get_by_id(video_id(FIRST))

    assert video.title == "01. First Lesson"
    assert video.module.name == "Module 1 - Basics"


def test_get_by_id_missing(library, scanned):
    with pytest.raises(NotFoundError) as exc_info:
        library.get_by_id(9999)

    assert exc_info.value.status_code == 404


def test_adjacent_in_root(library, video_id):
    intro, started = video_id(INTRO), video_id(STARTED)

    assert library.get_adjacent(intro) == {"prev": None, "next": started}
    assert library.get_adjacent(started) == {"prev": intro, "next": None}


def test_adjacent_stays_inside_module(library, video_id):
    first, second = video_id(FIRST), video_id(SECOND)

    assert library.get_adjacent(first) == {"prev": None, "next": second}
    assert library.get_adjacent(second) == {"prev": first, "next": None}


def test_adjacent_single_video_module(library, scanner, course_dir, video_id):
    touch_video(course_dir / "Module 2" / "only.mp4")
    scanner.scan()

    assert library.get_adjacent(video_id("only.mp4")) == {"prev": None, "next": None}


def test_adjacent_missing_video(library, scanned):
    with pytest.raises(NotFoundError):
        library.get_adjacent(9999)


def test_queue(library, video_id):
    assert [v.filename for v in library.get_queue(video_id(INTRO))] == [STARTED]
    assert [v.filename for v in library.get_queue(video_id(FIRST))] == [SECOND]
    assert library.get_queue(video_id(SECOND)) == []


def test_search_is_case_insensitive(library, scanned):
    results = library.search("INTRODUCTION")

    assert len(results) == 1
    assert results[0]["filename"] == INTRO
    assert results[0]["module_name"] == "Videos"


def test_search_reports_module_name(library, scanned):
    results = library.search("lesson")

    assert [r["filename"] for r in results] == [FIRST, SECOND]
    assert {r["module_name"] for r in results} == {"Module 1 - Basics"}


def test_search_no_match(library, scanned):
    assert library.search("nonexistent") == []


@pytest.mark.parametrize("query", ["", "   ", None])
def test_search_blank_query(library, scanned, query):
    assert library.search(query) == []


def test_search_keeps_surrounding_whitespace(library, scanned):
    assert library.search("Intro ") == []
    assert [r["filename"] for r in library.search(" Lesson")] == [FIRST, SECOND]


def test_search_wildcards_are_literal(library, scanner, course_dir):
    touch_video(course_dir / "03. 100% Done.mp4")
    scanner.scan()

    assert [r["filename"] for r in library.search("%")] == ["03. 100% Done.mp4"]
    assert library.search("_") == []


def test_stats_empty(library):
    assert library.stats() == {
        "total": 0,
        "completed": 0,
        "in_progress": 0,
        "unwatched": 0,
        "percent_complete": 0,
    }


def test_stats(library, progress, video_id):
    progress.record_position(video_id(INTRO), 540, 600)
    progress.record_position(video_id(FIRST), 60, 600)

    assert library.stats() == {
        "total": 4,
        "completed": 1,
        "in_progress": 1,
        "unwatched": 2,
        "percent_complete": 25,
    }


def test_stats_percent_rounds_half_up(library, progress, scanner, course_dir, video_id):
    for n in range(3, 7):
        touch_video(course_dir / f"0{n}. Extra.mp4")
    scanner.scan()

    progress.mark_completed(video_id(INTRO))

    stats = library.stats()
    assert stats["total"] == 8
    # 100 * 1 / 8 == 12.5
    assert stats["percent_complete"] == 13
    assert stats["unwatched"] + stats["in_progress"] + stats["completed"] == stats["total"]
