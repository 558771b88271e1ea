"""Colored console output of process trees."""

from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from proctree.models import ProcessRecord, RenderInstruction

SEPARATOR_WIDTH = 50


@dataclass(slots=True)
class TreePrintConfig:
    """Styles for each part of a tree line, as rich style names."""

    process_name: str = "blue"
    pid: str = "green"
    user_name: str = "magenta"
    start_time: str = "green"
    text: str = "grey70"
    tree_line: str = "red"
    error: str = "red"


class TreePresenter:
    """Writes render instructions to a rich console, one line per process."""

    def __init__(
        self,
        console: Console | None = None,
        config: TreePrintConfig | None = None,
        error_console: Console | None = None,
    ) -> None:
        """
        Initialize TreePresenter.

        Args:
            console: Where tree lines go. Default: stdout.
            config: Styles for each part of a line.
            error_console: Where fatal errors go. Default: stderr.
        """
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)
        self._config = config or TreePrintConfig()

    @property
    def config(self) -> TreePrintConfig:
        """Get the style configuration."""
        return self._config

    def format_node(
        self,
        branch_prefix: str,
        record: ProcessRecord,
        start_time_text: str,
        owner_text: str,
    ) -> Text:
        """Build the styled text for one process line."""
        config = self._config
        return Text.assemble(
            (branch_prefix, config.tree_line),
            (record.name, config.process_name),
            (" (User: ", config.text),
            (owner_text, config.user_name),
            (", PID: ", config.text),
            (str(record.pid), config.pid),
            (", Started: ", config.text),
            (start_time_text, config.start_time),
            (")", config.text),
        )

    def render_node(
        self,
        branch_prefix: str,
        record: ProcessRecord,
        start_time_text: str,
        owner_text: str,
    ) -> None:
        """Write one process line."""
        line = self.format_node(branch_prefix, record, start_time_text, owner_text)
        self._console.print(line, soft_wrap=True)

    def render_tree(self, lines: Iterable[RenderInstruction]) -> None:
        """Write every line of one traversal in order."""
        for line in lines:
            self.render_node(line.branch_prefix, line.record, line.start_time_text, line.owner_text)

    def render_separator(self) -> None:
        """Write the divider drawn between trees."""
        self._console.print("-" * SEPARATOR_WIDTH, markup=False)

    def render_not_found(self, process_name: str) -> None:
        """Report that no process matched."""
        self._console.print(f"Process '{process_name}' not found.", markup=False)

    def render_error(self, message: str) -> None:
        """Report a fatal error on the error console."""
        self._error_console.print(Text(f"proctree: {message}", style=self._config.error), soft_wrap=True)
