"""Indentation-keyed stack of open Ruby namespaces."""


class NamespaceStack:
    """Tracks which class/module bodies are open while scanning a file.

    Each entry remembers the indent column of its opening line; a closing
    ``end`` at that same column closes exactly that entry.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[list[str], int]] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def current(self) -> str:
        """Return the ``::``-joined path of all open namespaces."""
        return "::".join(part for parts, _ in self._entries for part in parts)

    def path_for(self, name: str) -> str:
        """Return the path ``name`` would have if opened now."""
        current = self.current
        return f"{current}::{name}" if current else name

    def push(self, name: str, indent: int) -> str:
        """Open ``name`` (which may itself be ``A::B``) and return the new path."""
        self._entries.append((name.lstrip(":").split("::"), indent))
        return self.current

    def pop_at(self, indent: int) -> bool:
        """Close the innermost namespace if it was opened at ``indent``."""
        if self._entries and self._entries[-1][1] == indent:
            self._entries.pop()
            return True
        return False

    def clear(self) -> None:
        self._entries.clear()
