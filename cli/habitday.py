#!/usr/bin/env python3
"""HabitDay TUI — single-screen habit tracker powered by Textual."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from habitday import (
    HabitTracker,
    HistoryStore,
    PersistenceError,
    load_settings,
    mutations,
    save_history,
    setup_logging,
    workspace_root,
)
from habitday.models import DaySnapshot, HabitRecord

logger = logging.getLogger("habitday.tui")

SAVE_GROUP = "save"


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#progress {
    height: 1;
    padding: 0 1;
    text-style: bold;
}

.section-block {
    height: auto;
    margin: 1 0 0 0;
    border: round $primary-background-darken-2;
}

.section-head {
    height: auto;
}

.section-name {
    width: 1fr;
    text-style: bold;
}

.habit-row {
    height: auto;
}

.habit-row Checkbox {
    width: auto;
    min-width: 4;
    height: auto;
    padding: 0 1 0 0;
}

.habit-done .habit-title {
    opacity: 50%;
}

.habit-title {
    width: 1fr;
}

.delete-button {
    width: 5;
    min-width: 5;
}

#notes-area {
    height: 6;
    min-height: 4;
}

.filter-row {
    height: auto;
}

.filter-row Input {
    width: 1fr;
}

#history-table {
    height: 1fr;
}

ConfirmDelete {
    align: center middle;
}

#confirm-box {
    width: 50;
    height: auto;
    padding: 1 2;
    border: thick $error;
    background: $panel;
}

#confirm-buttons {
    height: auto;
    margin: 1 0 0 0;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class HabitRow(Horizontal):
    """A single habit: done checkbox + editable title + delete button."""

    def __init__(self, section: str, habit: HabitRecord, **kwargs) -> None:
        super().__init__(**kwargs)
        self.section = section
        self.habit_id = habit.id
        self.habit_title = habit.title
        self.habit_done = habit.done

    def compose(self) -> ComposeResult:
        yield Checkbox(value=self.habit_done, classes="habit-check")
        yield Input(value=self.habit_title, classes="habit-title")
        yield Button("✕", variant="error", classes="delete-button delete-habit")

    def on_mount(self) -> None:
        self.add_class("habit-row")
        if self.habit_done:
            self.add_class("habit-done")


class SectionBlock(Vertical):
    """One section: editable name, its habits, and a new-habit input."""

    def __init__(self, name: str, habits: list[HabitRecord], **kwargs) -> None:
        super().__init__(**kwargs)
        self.section = name
        self.habits = habits

    def compose(self) -> ComposeResult:
        yield Horizontal(
            Input(value=self.section, classes="section-name"),
            Button("✕", variant="error", classes="delete-button delete-section"),
            classes="section-head",
        )
        for habit in self.habits:
            yield HabitRow(self.section, habit)
        yield Input(placeholder="New habit (Enter to add)", classes="new-habit")

    def on_mount(self) -> None:
        self.add_class("section-block")


class ConfirmDelete(ModalScreen[bool]):
    """Explicit confirm/cancel before a section is removed."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, section: str) -> None:
        super().__init__()
        self.section = section

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label("Delete section?", classes="section-title"),
            Static(f'Really delete section "{self.section}" and all of its habits?'),
            Horizontal(
                Button("Cancel", id="cancel"),
                Button("Delete", variant="error", id="delete"),
                id="confirm-buttons",
            ),
            id="confirm-box",
        )

    @on(Button.Pressed, "#delete")
    def _confirm(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#cancel")
    def _cancel(self) -> None:
        self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)


# ── Main app ───────────────────────────────────────────────────


class HabitDayApp(App):
    """HabitDay — daily habit checklist with history."""

    TITLE = "HabitDay"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("r", "reset_day", "Reset day"),
        Binding("h", "refresh_history", "History"),
        Binding("t", "focus_notes", "Notes"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, root: Path | None = None, day: str | None = None) -> None:
        super().__init__()
        self.root = root if root is not None else workspace_root()
        self.tracker = HabitTracker.open(self.root, day, persist=False)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            VerticalScroll(
                Label("Day", classes="section-title"),
                Input(value=self.tracker.day, placeholder="YYYY-MM-DD (Enter to open)", id="date-input"),
                Static(id="progress"),
                Vertical(id="sections-list"),
                Input(placeholder="New section name (Enter to add)", id="new-section"),
                Label("What to improve tomorrow?", classes="section-title"),
                TextArea(id="notes-area"),
                id="left-pane",
                can_focus=False,
            ),
            Vertical(
                Label("History", classes="section-title"),
                Horizontal(
                    Input(placeholder="From", id="filter-start"),
                    Input(placeholder="To", id="filter-end"),
                    classes="filter-row",
                ),
                DataTable(id="history-table"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Date", "Done")
        if self.tracker.load_error is not None:
            self.notify(
                f"{self.tracker.load_error}. Started with an empty history.",
                title="History unreadable",
                severity="error",
                timeout=10,
            )
        self._open_day(self.tracker.day)

    # ── Rendering ──────────────────────────────────────────────

    def _open_day(self, day: str) -> None:
        """Select a date, persist it, and redraw everything."""
        self.tracker.select_date(day, persist=False)
        self._persist(self.tracker.history)
        self.query_one("#notes-area", TextArea).load_text(self.tracker.snapshot.notes)
        self._rebuild_sections()

    def _rebuild_sections(self) -> None:
        """(Re)build the section blocks from the active snapshot."""
        sections_list = self.query_one("#sections-list", Vertical)
        sections_list.remove_children()
        for name, habits in self.tracker.snapshot.sections.items():
            sections_list.mount(SectionBlock(name, habits))
        self._refresh_status()

    def _refresh_status(self) -> None:
        progress = self.tracker.progress
        self.query_one("#progress", Static).update(f"Day progress: {progress}%")
        self.sub_title = f"{self.tracker.day}  [{progress}%]"
        self.action_refresh_history()

    def _snapshot(self) -> DaySnapshot:
        return self.tracker.snapshot

    # ── Persistence ────────────────────────────────────────────

    def _persist(self, history: HistoryStore) -> None:
        """Save in the background; the in-memory state is already updated."""
        self._save_worker(history)

    @work(thread=True, group=SAVE_GROUP)
    def _save_worker(self, history: HistoryStore) -> None:
        try:
            save_history(history, self.root)
        except PersistenceError as e:
            self.call_from_thread(
                self.notify, str(e), title="Save failed", severity="error"
            )

    def _change(self, mutation, *args, rebuild: bool = False) -> None:
        self._persist(self.tracker.stage(mutation, *args))
        if rebuild:
            self._rebuild_sections()
        else:
            self._refresh_status()

    # ── Date & history ─────────────────────────────────────────

    @on(Input.Submitted, "#date-input")
    def _on_date_submitted(self, event: Input.Submitted) -> None:
        day = event.value.strip()
        if not day:
            return
        self._open_day(day)

    @on(Input.Changed, "#filter-start")
    @on(Input.Changed, "#filter-end")
    def _on_filter_change(self, event: Input.Changed) -> None:
        self.action_refresh_history()

    def action_refresh_history(self) -> None:
        start = self.query_one("#filter-start", Input).value.strip() or None
        end = self.query_one("#filter-end", Input).value.strip() or None
        table: DataTable = self.query_one("#history-table", DataTable)
        table.clear()
        labels, values = self.tracker.series(start, end)
        for day, value in zip(labels, values):
            table.add_row(day, f"{value}%")

    # ── Habits ─────────────────────────────────────────────────

    @on(Checkbox.Changed, ".habit-check")
    def _on_habit_toggle(self, event: Checkbox.Changed) -> None:
        row = event.checkbox.parent
        if not isinstance(row, HabitRow):
            return
        habit = self._snapshot().find(row.section, row.habit_id)
        if habit is None or habit.done == event.value:
            return
        if event.value:
            row.add_class("habit-done")
        else:
            row.remove_class("habit-done")
        self._change(mutations.toggle, row.section, row.habit_id)

    @on(Input.Changed, ".habit-title")
    def _on_habit_title_change(self, event: Input.Changed) -> None:
        row = event.input.parent
        if not isinstance(row, HabitRow):
            return
        habit = self._snapshot().find(row.section, row.habit_id)
        if habit is None or habit.title == event.value:
            return
        self._change(mutations.rename_habit, row.section, row.habit_id, event.value)

    @on(Button.Pressed, ".delete-habit")
    def _on_habit_delete(self, event: Button.Pressed) -> None:
        row = event.button.parent
        if isinstance(row, HabitRow):
            self._change(mutations.delete_habit, row.section, row.habit_id, rebuild=True)

    @on(Input.Submitted, ".new-habit")
    def _on_new_habit(self, event: Input.Submitted) -> None:
        block = event.input.parent
        if not isinstance(block, SectionBlock) or not event.value.strip():
            return
        self._change(mutations.add_habit, block.section, event.value, rebuild=True)

    # ── Sections ───────────────────────────────────────────────

    @on(Input.Submitted, ".section-name")
    def _on_section_rename(self, event: Input.Submitted) -> None:
        block = event.input.parent.parent if event.input.parent else None
        if not isinstance(block, SectionBlock):
            return
        new_name = event.value
        if not new_name.strip() or new_name == block.section:
            event.input.value = block.section
            return
        self._change(mutations.rename_section, block.section, new_name, rebuild=True)

    @on(Button.Pressed, ".delete-section")
    def _on_section_delete(self, event: Button.Pressed) -> None:
        block = event.button.parent.parent if event.button.parent else None
        if not isinstance(block, SectionBlock):
            return
        section = block.section

        def _confirmed(ok: bool | None) -> None:
            if not ok:
                return
            logger.info("Deleting section %r on %s", section, self.tracker.day)
            self._change(mutations.delete_section, section, rebuild=True)

        self.push_screen(ConfirmDelete(section), _confirmed)

    @on(Input.Submitted, "#new-section")
    def _on_new_section(self, event: Input.Submitted) -> None:
        if not event.value.strip():
            return
        self._change(mutations.add_section, event.value, rebuild=True)
        event.input.value = ""

    # ── Notes & actions ────────────────────────────────────────

    @on(TextArea.Changed, "#notes-area")
    def _on_notes_change(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text == self._snapshot().notes:
            return
        self._change(mutations.set_notes, text)

    def action_reset_day(self) -> None:
        self._change(mutations.reset_day, rebuild=True)
        self.query_one("#notes-area", TextArea).load_text("")

    def action_focus_notes(self) -> None:
        self.query_one("#notes-area", TextArea).focus()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    async def action_quit(self) -> None:
        """Let pending background saves finish, then save once more and exit."""
        await self.workers.wait_for_complete(
            [w for w in self.workers if w.group == SAVE_GROUP]
        )
        try:
            self.tracker.save()
        except PersistenceError as e:
            logger.error("Final save failed: %s", e)
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="habitday", description="Daily habit tracker")
    parser.add_argument("--root", type=Path, default=None, help="workspace directory (default: $HABITDAY_ROOT or ~/habitday)")
    parser.add_argument("--day", default=None, help="date to open (default: today)")
    args = parser.parse_args(argv)

    root = (args.root or workspace_root()).expanduser().resolve()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Workspace not usable: {root} ({e})")
        sys.exit(1)

    setup_logging(load_settings(root), root)
    app = HabitDayApp(root=root, day=args.day)
    app.run()


if __name__ == "__main__":
    main()
