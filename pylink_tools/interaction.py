"""
interaction.py - What the user currently has selected in the editor.
"""
from __future__ import annotations

from typing import Any

from configs.link_models import Joint


class Selection:
    """Holds the single selected object (joint, link or compound link)."""

    def __init__(self, selected: Any = None):
        self._selected = selected

    def select(self, obj: Any) -> None:
        self._selected = obj

    def get_selected_object(self) -> Any:
        return self._selected

    def clear(self) -> None:
        self._selected = None

    def forget_joint(self, joint: Joint) -> None:
        """Mechanism removal listener: drop the selection if it is this joint."""
        if isinstance(self._selected, Joint) and self._selected.id == joint.id:
            self._selected = None
