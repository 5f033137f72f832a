"""Defaults and user-adjustable report options."""
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".prep_meter" / "records.db")

# user_settings keys
RANKING_SIZE = "ranking_size"
DOUBT_WINDOW_DAYS = "doubt_window_days"
REPORT_TITLE = "report_title"
DEFAULT_RANGE_DAYS = "default_range_days"


@dataclass
class ReportOptions:
    title: str = "Study Report"
    ranking_size: int = 5
    doubt_window_days: int = 1
    default_range_days: int = 7


def load_report_options(db_path: str) -> ReportOptions:
    """Build options from the settings table, falling back to the defaults."""
    from prep_meter.db import get_setting

    defaults = ReportOptions()
    return ReportOptions(
        title=get_setting(db_path, REPORT_TITLE, defaults.title),
        ranking_size=int(get_setting(db_path, RANKING_SIZE, str(defaults.ranking_size))),
        doubt_window_days=int(get_setting(db_path, DOUBT_WINDOW_DAYS, str(defaults.doubt_window_days))),
        default_range_days=int(get_setting(db_path, DEFAULT_RANGE_DAYS, str(defaults.default_range_days))),
    )
