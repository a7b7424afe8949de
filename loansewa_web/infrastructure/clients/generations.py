"""Request generation tracking so late responses cannot overwrite fresher ones"""

from collections import OrderedDict
from typing import Hashable


class RequestGenerations:
    """
    Monotonic fetch counter per key.

    Each fetch calls begin() before issuing its request and checks
    is_current() once the response arrives; a response whose generation has
    been superseded is discarded by the caller.

    Counters live in this process only and the least recently used keys are
    forgotten past max_keys.
    """

    def __init__(self, max_keys: int = 1024) -> None:
        self.max_keys = max_keys
        self._latest: "OrderedDict[Hashable, int]" = OrderedDict()

    def begin(self, key: Hashable) -> int:
        generation = self._latest.pop(key, 0) + 1
        self._latest[key] = generation
        while len(self._latest) > self.max_keys:
            self._latest.popitem(last=False)
        return generation

    def is_current(self, key: Hashable, generation: int) -> bool:
        return self._latest.get(key) == generation

    def latest(self, key: Hashable) -> int:
        return self._latest.get(key, 0)


history_generations = RequestGenerations()
