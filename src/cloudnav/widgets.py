from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import ListItem, Static
from rich.text import Text

from .datamodels import ALL_CATEGORIES, Category, Link, SyncStatus

STATUS_LABELS = {
    SyncStatus.IDLE: "",
    SyncStatus.SAVING: "[b blue]⟳ Saving…[/]",
    SyncStatus.SAVED: "[b green]✔ Saved[/]",
    SyncStatus.ERROR: "[b red]✖ Sync error[/]",
}


# --- UI Widgets ---
class CategoryListItem(ListItem):
    def __init__(self, category_id: str, name: str, count: int):
        super().__init__()
        self.category_id = category_id
        self.category_name = name
        self.count = count

    @classmethod
    def all_links(cls, count: int) -> CategoryListItem:
        return cls(ALL_CATEGORIES, "All links", count)

    @classmethod
    def for_category(cls, category: Category, count: int) -> CategoryListItem:
        return cls(category.id, category.name, count)

    def compose(self) -> ComposeResult:
        with Horizontal(classes="category-row"):
            yield Static(self.category_name, classes="category-name")
            yield Static(str(self.count), classes="category-count")


class LinkItem(ListItem):
    def __init__(self, link: Link, category_name: str):
        super().__init__()
        self.link = link
        self.category_name = category_name

    def compose(self) -> ComposeResult:
        with Vertical(classes="link-container"):
            with Horizontal(classes="link-header"):
                yield Static(Text(self.link.title), classes="link-title")
                yield Static(Text(self.category_name), classes="link-category")
            yield Static(Text(self.link.description or self.link.url), classes="link-detail")


class StatusBar(Static):
    sync_status = reactive(SyncStatus.IDLE)
    connected = reactive(False)
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        label = STATUS_LABELS.get(self.sync_status, "")
        if label:
            status_items.append(label)

        status_items.append("[green]Connected[/]" if self.connected else "[yellow]Offline mode[/]")

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_sync_status(self, sync_status: SyncStatus) -> None:
        self.update_display()

    def watch_connected(self, connected: bool) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class EmptyListItem(ListItem):
    def __init__(self, message: str):
        super().__init__(disabled=True)
        self.message = message

    def compose(self) -> ComposeResult:
        yield Static(Text(self.message, style="italic"), classes="empty-message")
