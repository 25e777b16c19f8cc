"""Rich tree renderer for inspecting object graphs."""

from typing import Any, Optional, Set

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from .events.kinds import ObservableKind, is_reactive, observable_kind


class RichTreeRenderer:
    """Renders entities and collections as a Rich tree."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the Rich tree renderer."""
        self.console = console or Console()

    def build(self, value: Any, label: Optional[str] = None) -> Tree:
        """Build a tree for ``value`` without printing it."""
        tree = Tree(self._label(value, label))
        self._populate(tree, value, {id(value)})
        return tree

    def render(self, value: Any, label: Optional[str] = None) -> None:
        """Print the tree for ``value``."""
        self.console.print(self.build(value, label))

    def _populate(self, node: Tree, value: Any, seen: Set[int]) -> None:
        kind = observable_kind(value)
        if kind is ObservableKind.ENTITY:
            children = list(value.to_dict().items())
        elif kind is ObservableKind.COLLECTION:
            children = [(f"[{index}]", item) for index, item in enumerate(value)]
        else:
            return

        for key, child in children:
            if is_reactive(child) and id(child) in seen:
                node.add(Text(f"{key}: {type(child).__name__} (cycle)", style="bold red"))
                continue

            branch = node.add(self._label(child, key))
            if is_reactive(child):
                seen.add(id(child))
                self._populate(branch, child, seen)
                seen.discard(id(child))

    @staticmethod
    def _label(value: Any, key: Optional[str]) -> Text:
        prefix = f"{key}: " if key is not None else ""
        kind = observable_kind(value)

        if kind is ObservableKind.ENTITY:
            return Text(f"{prefix}{type(value).__name__}", style="bold cyan")
        if kind is ObservableKind.COLLECTION:
            return Text(f"{prefix}{type(value).__name__} [{len(value)} items]", style="bold magenta")

        text = Text(prefix)
        text.append(repr(value), style="green")
        return text
