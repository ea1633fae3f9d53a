"""Interactive Fluxon scratchpad with live completion."""

from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.catalog import CatalogError, CatalogStore
from ..core.config import Settings
from ..core.provider import CompletionProvider
from ..core.types import CompletionCandidate
from ..core.user_functions import UserFunctionExtractor, split_lines
from .completer import FluxonCompleter

REPL_DOCUMENT_ID = "repl"


def candidates_table(candidates: list[CompletionCandidate]) -> Table:
    """Render candidates as a rich table in ranked order."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Label", style="cyan")
    table.add_column("Insert")
    table.add_column("Detail", style="dim")
    table.add_column("Sort", style="dim")
    for candidate in candidates:
        table.add_row(candidate.label, candidate.insert_text, candidate.detail, candidate.sort_text)
    return table


class ConsoleApp:
    """Line-by-line Fluxon editor using prompt_toolkit for auto-completion.

    Every entered line is appended to an in-memory document that is re-scanned
    for user functions, so functions declared earlier complete on later lines.
    """

    def __init__(
        self,
        cfg: Settings,
        store: CatalogStore,
        extractor: UserFunctionExtractor,
        provider: CompletionProvider,
        initial_file: Path | None = None,
    ):
        self._config = cfg
        self.store = store
        self.extractor = extractor
        self.console = Console()
        self.lines: list[str] = []
        self.running = True

        if initial_file is not None:
            self.lines = split_lines(initial_file.read_text(encoding="utf-8"))
            self._rescan()

        self.prompt_style = Style.from_dict({
            "prompt": "ansicyan bold",
            "completion-menu": "bg:default",
            "completion-menu.completion": "bg:default fg:#bbbbbb",
            "completion-menu.completion.current": "bg:#5fafff fg:#202020 bold",
            "completion-menu.meta.completion": "bg:#202020 fg:#bbbbbb",
            "completion-menu.meta.completion.current": "bg:#202020 #5fafff",
        })
        self.prompt_session: PromptSession[str] = PromptSession(
            completer=FluxonCompleter(provider, REPL_DOCUMENT_ID),
            style=self.prompt_style,
            complete_while_typing=True,
        )

    def _rescan(self) -> None:
        self.extractor.update_cache(REPL_DOCUMENT_ID, "\n".join(self.lines))

    def _print_banner(self) -> None:
        banner = Text()
        banner.append("Fluxon Assist", style="bold white")
        banner.append(" - completion scratchpad", style="dim")
        self.console.print(Panel(banner, border_style="blue", padding=(1, 2)))

        if self.store.is_loaded():
            self.console.print(f"[dim]Catalog: {self.store.active_path}[/dim]")
        else:
            self.console.print("[yellow]No catalog loaded; only keywords will be offered after /refresh.[/yellow]")
        self._print_help()

    def _print_help(self) -> None:
        help_text = Text()
        help_text.append("/refresh [path]", style="cyan")
        help_text.append(" - Reload the function catalog\n", style="white")
        help_text.append("/functions", style="cyan")
        help_text.append(" - List user functions declared so far\n", style="white")
        help_text.append("/show", style="cyan")
        help_text.append(" - Print the document\n", style="white")
        help_text.append("/help", style="cyan")
        help_text.append(" - Show this help\n", style="white")
        help_text.append("/exit", style="cyan")
        help_text.append(" - Exit\n", style="white")
        help_text.append("Any other input is appended to the document.", style="dim")
        self.console.print(Panel(help_text, title="Help", border_style="dim"))

    def handle_command(self, command: str) -> bool:
        """Handle a slash command. Returns False when the app should exit."""
        parts = command.strip().split(maxsplit=1)
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else None

        if cmd in ("/exit", "/quit"):
            print_formatted_text(HTML("<ansiyellow>Exiting...</ansiyellow>"))
            return False

        if cmd == "/refresh":
            path = arg if arg is not None else self._config.resolved_catalog_path()
            try:
                self.store.reload(self._config.resolve_path(path))
            except CatalogError as e:
                print_formatted_text(HTML(f"<ansired>Failed to refresh catalog: {e}</ansired>"))
            else:
                print_formatted_text(HTML("<ansigreen>Catalog refreshed successfully</ansigreen>"))
        elif cmd == "/functions":
            functions = self.extractor.get_cached(REPL_DOCUMENT_ID)
            if not functions:
                self.console.print("[dim]No user functions declared yet.[/dim]")
            for fn in functions:
                flags = " async" if fn.is_async else " sync" if fn.is_sync else ""
                self.console.print(f"[cyan]{fn.name}[/cyan]/{fn.arity}{flags}  [dim]line {fn.span.line + 1}[/dim]")
        elif cmd == "/show":
            for number, line in enumerate(self.lines, start=1):
                self.console.print(f"[dim]{number:>4}[/dim] {line}", highlight=False)
        elif cmd == "/help":
            self._print_help()
        else:
            print_formatted_text(HTML(f"<ansired>Unknown command: {cmd}</ansired>"))
        return True

    def handle_line(self, line: str) -> bool:
        if line.strip().startswith("/"):
            return self.handle_command(line)
        self.lines.append(line)
        self._rescan()
        return True

    def run(self) -> None:
        self._print_banner()
        while self.running:
            try:
                line = self.prompt_session.prompt(HTML("<prompt>fluxon> </prompt>"))
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            self.running = self.handle_line(line)
