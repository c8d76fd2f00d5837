import logging
from collections import deque
from typing import Deque, List
from signal_grid.kernel.commands import Command

logger = logging.getLogger(__name__)

class CommandQueue:
    """Operator commands waiting for the start of the next tick."""

    def __init__(self):
        self._pending: Deque[Command] = deque()

    def add(self, command: Command):
        self._pending.append(command)

    def drain(self) -> List[Command]:
        batch = list(self._pending)
        self._pending.clear()
        return batch

    def apply_all(self, kernel) -> int:
        # Commands queued while this batch runs wait for the following tick
        batch = self.drain()
        for command in batch:
            command.execute(kernel)
        if batch:
            logger.debug("Applied %d command(s) before tick %d", len(batch), kernel.state.tick_id)
        return len(batch)

    def discard(self) -> int:
        dropped = len(self._pending)
        if dropped:
            logger.info("Discarding %d queued command(s)", dropped)
        self._pending.clear()
        return dropped

    def __len__(self) -> int:
        return len(self._pending)
