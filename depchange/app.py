import logging
from typing import Dict, List, Optional

from rich.markup import escape
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Label, LoadingIndicator, Markdown, Tree

from depchange.__version__ import __version__
from depchange.core.compare import TreeDiff, VersionChange, diff_trees
from depchange.core.model import Dep, render
from depchange.core.version import Version, VersionDiff
from depchange.sources import load_tree

# Log Configuration
logging.basicConfig(
    filename="debug.log",
    level=logging.DEBUG,
    filemode="w",
    format="%(asctime)s - %(levelname)s - %(message)s",
)

SEVERITY_COLORS = {
    VersionDiff.MAJOR: "red",
    VersionDiff.MINOR: "yellow",
    VersionDiff.PATCH: "green",
}


def change_label(change: VersionChange) -> str:
    color = SEVERITY_COLORS[change.diff]
    arrow = "↘" if change.is_rollback else "→"
    return (
        f"[{color}]({change.diff.label}) {escape(change.id)}[/] "
        f"[dim]{escape(str(change.old))}[/] {arrow} [b]{escape(str(change.new))}[/]"
    )


def version_label(dep_id: str, version: Version, marker: str) -> str:
    """Leaf for an added (+) or removed (-) module."""
    return f"[blue]({marker}) {escape(dep_id)}[/] [dim]{escape(str(version))}[/]"


class DependencyScreen(ModalScreen):
    """Modal showing the resolved subtree of one dependency."""

    DEFAULT_CSS = """
    DependencyScreen {
        align: center middle;
        background: rgba(0, 0, 0, 0.8);
    }
    #dialog {
        padding: 0 1;
        width: 85%;
        height: 85%;
        border: heavy $primary;
        background: $surface;
        layout: vertical;
    }
    #title {
        text-align: center;
        text-style: bold;
        background: $primary;
        color: white;
        width: 100%;
        padding: 1;
    }
    #content-scroll {
        height: 1fr;
        margin: 1 0;
        overflow-y: auto;
        scrollbar-gutter: stable;
    }
    #close-btn {
        width: 100%;
        dock: bottom;
    }
    """

    def __init__(self, change: VersionChange, dep: Optional[Dep]) -> None:
        super().__init__()
        self.change = change
        self.dep = dep

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(f"{escape(str(self.change))}", id="title"),
            VerticalScroll(
                Markdown(self._build_report()),
                id="content-scroll"
            ),
            Button("Close (Esc)", variant="primary", id="close-btn"),
            id="dialog",
        )

    def _build_report(self) -> str:
        md_output = [
            f"# {self.change.id}\n",
            f"**{self.change.diff.label} update**: `{self.change.old}` → `{self.change.new}`\n",
        ]
        if self.change.is_rollback:
            md_output.append("_This is a rollback._\n")

        if self.dep is None:
            md_output.append("_Not present in the new dependency tree._")
        elif not self.dep.children:
            md_output.append("_No dependencies of its own._")
        else:
            md_output.append("### Dependencies\n")
            md_output.append(f"```\n{render(self.dep)}\n```")

        return "\n".join(md_output)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss()

    def key_escape(self) -> None:
        self.dismiss()


class ChangeReportApp(App):
    TITLE = "depchange"
    SUB_TITLE = f"v{__version__}"

    DEFAULT_CSS = """
    Screen { layout: vertical; }

    #info-bar {
        height: 3;
        dock: top;
        background: $surface;
        border-bottom: solid $primary;
        align: left middle;
        padding: 0 1;
    }

    .info-label {
        width: auto;
        height: 1;
        padding: 0 2;
        color: $text;
    }

    #tree-container {
        height: 1fr;
        border: none;
        margin: 0 1;
    }
    Tree { padding: 1; background: $surface; }

    #loading-container { height: 100%; align: center middle; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("l", "expand_node", "Expand"),
        Binding("h", "collapse_node", "Collapse"),
        Binding("space", "toggle_node", "Toggle"),
        Binding("m", "toggle_filter", "Major Only"),
    ]

    show_only_major: bool = False
    release: str = "..."

    def __init__(self, old_path: str, new_path: str) -> None:
        super().__init__()
        self.old_path = old_path
        self.new_path = new_path
        self.new_root: Optional[Dep] = None
        self.report: Optional[TreeDiff] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="info-bar"):
            yield Label(f"[b]Release:[/b] [cyan]{self.release}[/]", id="lbl-release", classes="info-label")
            yield Label("[b]Changed:[/b] [blue]0[/]", id="lbl-total", classes="info-label")
            yield Label("[b]Major:[/b] [red]0[/]", id="lbl-major", classes="info-label")
            yield Label("[b]Minor:[/b] [yellow]0[/]", id="lbl-minor", classes="info-label")
            yield Label("[b]Patch:[/b] [green]0[/]", id="lbl-patch", classes="info-label")

        with Container(id="main-area"):
            with Container(id="loading-container"):
                yield LoadingIndicator()
                yield Label("Loading snapshots...", id="status-label")

            with Container(id="tree-container"):
                yield Tree("Changes", id="change-tree")

        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#tree-container").display = False
        self.load_report()

    # --- ACTIONS ---

    def action_cursor_down(self) -> None:
        self.query_one("#change-tree").action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#change-tree").action_cursor_up()

    def action_expand_node(self) -> None:
        tree = self.query_one("#change-tree")
        if tree.cursor_node:
            tree.cursor_node.expand()

    def action_collapse_node(self) -> None:
        tree = self.query_one("#change-tree")
        node = tree.cursor_node
        if node:
            if node.is_expanded:
                node.collapse()
            elif node.parent:
                tree.select_node(node.parent)
                node.parent.collapse()

    def action_toggle_node(self) -> None:
        tree = self.query_one("#change-tree")
        if tree.cursor_node:
            tree.cursor_node.toggle()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        change = event.node.data
        if isinstance(change, VersionChange):
            self.push_screen(DependencyScreen(change, self.new_root.find(change.id)))

    def action_toggle_filter(self) -> None:
        self.show_only_major = not self.show_only_major

        status = "enabled" if self.show_only_major else "disabled"
        severity = "warning" if self.show_only_major else "information"
        msg = "Showing major updates only." if self.show_only_major else "Showing all updates."

        self.notify(f"Filter {status}: {msg}", severity=severity)

        if self.report:
            self.render_report(self.report)

    # --- LOGIC ---

    def update_status(self, msg: str) -> None:
        self.query_one("#status-label", Label).update(msg)

    def update_dashboard_ui(self) -> None:
        report = self.report
        total = len(report.changes) if report else 0
        counts = {diff: report.count(diff) if report else 0 for diff in VersionDiff}

        self.query_one("#lbl-release", Label).update(f"[b]Release:[/b] [cyan]{escape(self.release)}[/]")
        self.query_one("#lbl-total", Label).update(f"[b]Changed:[/b] [blue]{total}[/]")
        self.query_one("#lbl-major", Label).update(f"[b]Major:[/b] [red]{counts[VersionDiff.MAJOR]}[/]")
        self.query_one("#lbl-minor", Label).update(f"[b]Minor:[/b] [yellow]{counts[VersionDiff.MINOR]}[/]")
        self.query_one("#lbl-patch", Label).update(f"[b]Patch:[/b] [green]{counts[VersionDiff.PATCH]}[/]")

    def show_error(self, message: str) -> None:
        self.query_one("#status-label", Label).update(f"[bold red]Fatal Error:[/]\n{escape(message)}")
        self.query_one("LoadingIndicator").display = False

    @work(thread=False)
    async def load_report(self) -> None:
        try:
            logging.info("Worker started.")
            self.update_status(f"Reading {self.old_path}...")
            old_root = load_tree(self.old_path)

            self.update_status(f"Reading {self.new_path}...")
            new_root = load_tree(self.new_path)

            self.release = f"{old_root.version} → {new_root.version}"
            self.update_status("Comparing trees...")
            self.new_root = new_root
            self.report = diff_trees(old_root, new_root)

            self.update_dashboard_ui()
            self.render_report(self.report)

        except Exception as e:
            logging.exception("Fatal error in worker:")
            self.show_error(str(e))

    def render_report(self, report: TreeDiff) -> None:
        tree = self.query_one("#change-tree")
        tree.clear()
        tree.root.label = f"📂 {escape(str(self.new_root))}"
        tree.root.expand()

        def add_changes(title: str, changes: List[VersionChange]) -> None:
            if self.show_only_major:
                changes = [c for c in changes if c.diff == VersionDiff.MAJOR]
            if not changes:
                return
            branch = tree.root.add(f"[b]{title}[/b] [dim]↳[/] {len(changes)}", expand=True)
            for change in changes:
                branch.add_leaf(change_label(change), data=change)

        def add_versions(title: str, versions: Dict[str, Version], marker: str) -> None:
            if self.show_only_major or not versions:
                return
            branch = tree.root.add(f"[b]{title}[/b] [dim]↳[/] {len(versions)}", expand=False)
            for dep_id in sorted(versions):
                branch.add_leaf(version_label(dep_id, versions[dep_id], marker))

        add_changes("Direct", report.direct)
        add_changes("Transitive", report.transitive)
        add_versions("Added", report.added, "+")
        add_versions("Removed", report.removed, "-")

        if report.is_empty():
            tree.root.add_leaf("[dim]No dependency changes.[/]")

        self.query_one("#loading-container").display = False
        self.query_one("#tree-container").display = True
        tree.focus()
