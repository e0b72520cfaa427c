from __future__ import annotations

import os
import webbrowser
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.worker import Worker, WorkerState
from textual.widgets import Header, Input, ListView, Rule, Static

from .config import UI_DEFAULTS, logger
from .controller import BookmarkStore
from .datamodels import ALL_CATEGORIES, Link
from .importer import ImportParseError
from .messages import DocumentChanged, LoginRequested, LoginSucceeded, SyncStatusChanged
from .screens import ConfirmScreen, ImportScreen, LinkFormScreen, LoginScreen
from .suggestions import SuggestionService
from .themes import load_themes, mode_for_theme_name, theme_name_for_mode
from .widgets import CategoryListItem, EmptyListItem, LinkItem, StatusBar


class CloudNavApp(App):
    TITLE = "CloudNav"
    SUB_TITLE = "Bookmarks, synced"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_link", "Add"),
        Binding("e", "edit_link", "Edit"),
        Binding("d", "delete_link", "Delete"),
        Binding("i", "import_bookmarks", "Import"),
        Binding("l", "login", "Sign in"),
        Binding("t", "toggle_theme", "Theme"),
        Binding("o", "open_link", "Open"),
        Binding("left", "nav_left", "Navigate Left", show=False),
        Binding("right", "nav_right", "Navigate Right", show=False),
        Binding("ctrl+l", "toggle_left_pane", "Toggle Categories"),
        Binding("/", "focus_search", "Search"),
    ]

    def __init__(
        self,
        store: BookmarkStore,
        suggestions: SuggestionService,
        theme_mode: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.store = store
        self.suggestions = suggestions
        self.config = config or {}
        self._theme_mode = theme_mode or store.theme_mode or "light"
        self.selected_category = ALL_CATEGORIES
        self.search_query = ""

        store.subscribe("document_changed", lambda _doc: self.post_message(DocumentChanged()))
        store.subscribe("status_changed", lambda status: self.post_message(SyncStatusChanged(status)))
        store.subscribe("login_requested", lambda: self.post_message(LoginRequested()))
        store.subscribe("login_succeeded", lambda: self.post_message(LoginSucceeded()))

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="left"):
                yield Static("Categories", classes="pane-title")
                yield ListView(id="categories-list")
            yield Rule(orientation="vertical")
            with Vertical(id="right"):
                yield Input(placeholder="Search your bookmarks...", id="search")
                yield Static("", id="welcome")
                yield ListView(id="links-list")
        yield StatusBar()

    def on_mount(self) -> None:
        for theme in load_themes().values():
            self.register_theme(theme)
        self.theme = theme_name_for_mode(self._theme_mode)

        status_bar = self.query_one(StatusBar)
        status_bar.connected = self.store.session.authenticated
        status_bar.set_keybindings(
            self.config.get("ui", {}).get(
                "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
            )
        )
        self.run_worker(self.store.initialize, name="document_loader", thread=True)
        self.query_one("#links-list", ListView).focus()

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "document_loader":
            return
        if event.state is WorkerState.SUCCESS:
            self.query_one(StatusBar).connected = self.store.session.authenticated
        elif event.state is WorkerState.ERROR:
            logger.error("Document loader failed: %s", event.worker.error)
            self.notify("Could not load bookmarks.", severity="error")

    # --- controller events ---
    def on_document_changed(self, message: DocumentChanged) -> None:
        self.refresh_categories()
        self.refresh_links()

    def on_sync_status_changed(self, message: SyncStatusChanged) -> None:
        status_bar = self.query_one(StatusBar)
        status_bar.sync_status = message.status
        status_bar.connected = self.store.session.authenticated

    def on_login_requested(self, message: LoginRequested) -> None:
        self.query_one(StatusBar).connected = False
        self.action_login()

    def on_login_succeeded(self, message: LoginSucceeded) -> None:
        self.query_one(StatusBar).connected = True
        self.refresh_links()
        self.notify("Signed in. Changes will sync.")

    # --- views ---
    def refresh_categories(self) -> None:
        view = self.query_one("#categories-list", ListView)
        view.clear()
        counts = self.store.category_counts()
        items = [CategoryListItem.all_links(len(self.store.document.links))]
        items.extend(
            CategoryListItem.for_category(cat, counts.get(cat.id, 0))
            for cat in self.store.document.categories
        )
        for item in items:
            view.append(item)
        for index, item in enumerate(items):
            if item.category_id == self.selected_category:
                view.index = index
                break

    def refresh_links(self) -> None:
        document = self.store.document
        welcome = self.query_one("#welcome", Static)
        if self.selected_category == ALL_CATEGORIES and not self.search_query.strip():
            mode = "synced" if self.store.session.authenticated else "local mode"
            welcome.update(
                f"You have {len(document.links)} links in "
                f"{len(document.categories)} categories ({mode})."
            )
            welcome.display = True
        else:
            welcome.display = False

        links = self.store.filter_links(self.search_query, self.selected_category)
        view = self.query_one("#links-list", ListView)
        view.clear()
        if not links:
            view.append(EmptyListItem("No matching links. Press 'a' to add one."))
            return
        for link in links:
            view.append(LinkItem(link, document.category_name(link.category_id)))

    def _highlighted_link(self) -> Optional[Link]:
        item = self.query_one("#links-list", ListView).highlighted_child
        if isinstance(item, LinkItem):
            return self.store.document.find_link(item.link.id)
        return None

    # --- input handling ---
    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search":
            self.search_query = event.value
            self.refresh_links()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self.query_one("#links-list", ListView).focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id == "categories-list":
            if isinstance(event.item, CategoryListItem):
                self.selected_category = event.item.category_id
                self.refresh_links()
        elif event.list_view.id == "links-list":
            if isinstance(event.item, LinkItem):
                webbrowser.open(event.item.link.url)

    # --- actions ---
    def _ensure_session(self) -> bool:
        if self.store.session.authenticated:
            return True
        self.action_login()
        return False

    def action_login(self) -> None:
        if isinstance(self.screen, LoginScreen):
            return
        self.push_screen(LoginScreen(self.store))

    def action_add_link(self) -> None:
        if not self._ensure_session():
            return

        def on_saved(fields: Optional[Dict[str, Any]]) -> None:
            if fields:
                self.store.add_link(**fields)

        self.push_screen(
            LinkFormScreen(self.store.document.categories, self.suggestions), on_saved
        )

    def action_edit_link(self) -> None:
        link = self._highlighted_link()
        if link is None or not self._ensure_session():
            return

        def on_saved(fields: Optional[Dict[str, Any]]) -> None:
            if fields:
                self.store.edit_link(link.id, **fields)

        self.push_screen(
            LinkFormScreen(self.store.document.categories, self.suggestions, link), on_saved
        )

    def action_delete_link(self) -> None:
        link = self._highlighted_link()
        if link is None or not self._ensure_session():
            return

        def on_confirmed(confirmed: bool) -> None:
            if confirmed:
                self.store.delete_link(link.id)

        self.push_screen(ConfirmScreen(f"Delete '{link.title}'?"), on_confirmed)

    def action_import_bookmarks(self) -> None:
        if not self._ensure_session():
            return

        def on_path(path: Optional[str]) -> None:
            if not path:
                return
            try:
                count = self.store.import_file(os.path.expanduser(path))
            except ImportParseError as e:
                logger.error("Import of %s failed: %s", path, e)
                self.notify(
                    "Import failed. Make sure this is an exported bookmarks HTML file.",
                    severity="error",
                )
                return
            if count is not None:
                self.notify(f"Imported {count} bookmarks.")

        self.push_screen(ImportScreen(), on_path)

    def action_open_link(self) -> None:
        link = self._highlighted_link()
        if link is not None:
            webbrowser.open(link.url)

    def action_toggle_theme(self) -> None:
        mode = self.store.toggle_theme(mode_for_theme_name(self.theme))
        self._theme_mode = mode
        self.theme = theme_name_for_mode(mode)

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_toggle_left_pane(self) -> None:
        left_pane = self.query_one("#left")
        left_pane.display = not left_pane.display

    def action_nav_left(self) -> None:
        if self.query_one("#links-list").has_focus:
            self.query_one("#categories-list").focus()

    def action_nav_right(self) -> None:
        if self.query_one("#categories-list").has_focus:
            self.query_one("#links-list").focus()
