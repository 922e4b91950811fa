"""HabitDay core library — day state store, mutations and metrics.

Public API re-exports for convenient imports:
    from habitday import HabitTracker, load_history, commit, day_progress, ...
"""

# Workspace & paths
from habitday.workspace import (
    workspace_root,
    get_user_timezone,
    today_str,
    history_path,
    corrupt_history_path,
    settings_path,
)

# File I/O
from habitday.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
)

# Configuration & logging
from habitday.settings import Settings, load_settings
from habitday.logger import setup_logging

# Errors
from habitday.errors import (
    HabitDayError,
    CorruptHistoryError,
    PersistenceError,
)

# Models
from habitday.models import (
    HabitRecord,
    DaySnapshot,
    HistoryStore,
)
from habitday.template import DEFAULT_SECTIONS, default_snapshot

# Store
from habitday.store import (
    load_history,
    open_history,
    save_history,
    snapshot_for,
    commit,
)

# Mutations
from habitday.mutations import (
    next_habit_id,
    toggle,
    add_habit,
    delete_habit,
    rename_habit,
    rename_section,
    delete_section,
    add_section,
    reset_day,
    set_notes,
)

# Metrics
from habitday.metrics import (
    percent,
    day_progress,
    filter_history,
    history_series,
    progress_lines,
    chart_ready,
)

# Session
from habitday.tracker import HabitTracker
