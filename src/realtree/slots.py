"""Fixed-size table of named expression slots."""

from __future__ import annotations

from collections.abc import Iterator

from .ast import SLOT_COUNT, Node, SlotId


class SlotTable:
    """Exactly ``SLOT_COUNT`` slots, each empty or holding one expression tree.

    Slot ids are validated on construction, so no operation here can fail.
    Storing a tree replaces whatever the slot held before.
    """

    def __init__(self) -> None:
        self._slots: list[Node | None] = [None] * SLOT_COUNT

    def get(self, slot: SlotId) -> Node | None:
        return self._slots[slot.index]

    def set(self, slot: SlotId, node: Node) -> None:
        self._slots[slot.index] = node

    def clear_all(self) -> None:
        for index in range(SLOT_COUNT):
            self._slots[index] = None

    def occupied(self) -> Iterator[tuple[SlotId, Node]]:
        for index, node in enumerate(self._slots):
            if node is not None:
                yield SlotId(index), node

    def __len__(self) -> int:
        return sum(1 for node in self._slots if node is not None)
