"""Multi-step tab navigation gated by per-tab validation."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

# (tab index, show_errors) -> whether every checked field in the tab is valid
TabValidator = Callable[[int, bool], bool]


class TabController:
    """Keeps exactly one tab active; moves between tabs only through explicit actions."""

    def __init__(self, tabs: Sequence[str], validate_tab: TabValidator) -> None:
        if not tabs:
            raise ValueError("A form needs at least one tab")
        self.tabs: List[str] = list(tabs)
        self._validate_tab = validate_tab
        self.active = 0

    @property
    def active_id(self) -> str:
        return self.tabs[self.active]

    @property
    def is_first(self) -> bool:
        return self.active == 0

    @property
    def is_last(self) -> bool:
        return self.active == len(self.tabs) - 1

    def index_of(self, tab: int | str) -> int:
        if isinstance(tab, str):
            return self.tabs.index(tab)
        if not 0 <= tab < len(self.tabs):
            raise IndexError(f"Aba inexistente: {tab}")
        return tab

    def _show(self, index: int) -> None:
        if index != self.active:
            logger.debug("Tab %s -> %s", self.tabs[self.active], self.tabs[index])
        self.active = index

    def next(self) -> bool:
        if not self._validate_tab(self.active, True):
            return False
        if self.is_last:
            return False
        self._show(self.active + 1)
        return True

    def prev(self) -> bool:
        if self.is_first:
            return False
        self._show(self.active - 1)
        return True

    def jump_to(self, tab: int | str) -> bool:
        """Shows ``tab`` when every earlier tab validates; otherwise shows the first failing one."""

        target = self.index_of(tab)
        for index in range(target):
            if not self._validate_tab(index, False):
                self._show(index)
                return False
        self._show(target)
        return True

    def first_invalid(self, show_errors: bool = True) -> Optional[int]:
        """Validates every tab (so all offending fields get marked) and returns the first failing one."""

        first: Optional[int] = None
        for index in range(len(self.tabs)):
            if not self._validate_tab(index, show_errors) and first is None:
                first = index
        return first

    def reset(self) -> None:
        self.active = 0
