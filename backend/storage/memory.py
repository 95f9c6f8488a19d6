"""In-memory catalog namespace.

Nothing survives the process. Used by tests and by
GAMEVAULT_STORAGE_BACKEND=memory.
"""


class InMemoryNamespace:
    """Dict-backed slot storage; several namespaces may share one dict."""

    def __init__(self, name: str = "gamevault-games", slots: dict[str, str] | None = None) -> None:
        self.name = name
        self._slots: dict[str, str] = slots if slots is not None else {}

    async def read(self) -> str | None:
        return self._slots.get(self.name)

    async def write(self, payload: str) -> None:
        self._slots[self.name] = payload
