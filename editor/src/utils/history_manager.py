"""
Undo/Redo History for Overlay Composer

Linear stack of scene snapshots. The entry at current_index is the state the
scene is in; undo steps back one entry, redo steps forward, and recording a
new entry after an undo discards the redo branch.

Scene snapshots reference immutable node tuples, so entries keep them as
given rather than deep-copying.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from constants import MAX_HISTORY


@dataclass(frozen=True)
class HistoryEntry:
	"""One recorded scene state"""
	state: Any
	description: str = ""


class HistoryManager:
	"""Bounded undo/redo stack with change listeners"""

	def __init__(self, max_history=MAX_HISTORY):
		"""
		Args:
			max_history: Number of entries kept; the oldest are dropped first
		"""
		self._logger = logging.getLogger('History')
		self.max_history = max(1, int(max_history))
		self.history: List[HistoryEntry] = []
		self.current_index = -1  # -1 until the first state is recorded
		self._listeners: List[Callable[[bool, bool], None]] = []

	# ========================================
	# Recording and stepping
	# ========================================

	def save_state(self, state_data, description=""):
		"""
		Record a state as the new current entry

		Args:
			state_data: Scene snapshot
			description: Label shown for undo/redo of this change
		"""
		del self.history[self.current_index + 1:]
		self.history.append(HistoryEntry(state_data, description))
		overflow = len(self.history) - self.max_history
		if overflow > 0:
			del self.history[:overflow]
		self.current_index = len(self.history) - 1

		self._notify_listeners()
		self._logger.debug(f"Recorded '{description}' ({self.current_index + 1}/{len(self.history)})")

	def undo(self):
		"""
		Step back one entry

		Returns:
			The state to restore, or None at the oldest entry
		"""
		if not self.can_undo():
			return None
		return self._step(-1)

	def redo(self):
		"""
		Step forward one entry

		Returns:
			The state to restore, or None at the newest entry
		"""
		if not self.can_redo():
			return None
		return self._step(1)

	def _step(self, delta):
		self.current_index += delta
		entry = self.history[self.current_index]
		self._notify_listeners()
		self._logger.debug(f"{'Redo' if delta > 0 else 'Undo'} -> '{entry.description}' (index {self.current_index})")
		return entry.state

	def can_undo(self):
		return self.current_index > 0

	def can_redo(self):
		return self.current_index < len(self.history) - 1

	def clear(self):
		"""Forget every entry"""
		self.history = []
		self.current_index = -1
		self._notify_listeners()

	# ========================================
	# Descriptions
	# ========================================

	@property
	def current_state(self) -> Optional[Any]:
		if self.current_index < 0:
			return None
		return self.history[self.current_index].state

	def get_current_description(self):
		if self.current_index < 0:
			return ""
		return self.history[self.current_index].description

	def get_undo_description(self):
		"""Label of the change undo would revert"""
		return self.history[self.current_index].description if self.can_undo() else ""

	def get_redo_description(self):
		"""Label of the change redo would reapply"""
		return self.history[self.current_index + 1].description if self.can_redo() else ""

	def descriptions(self) -> List[str]:
		"""All entry labels, oldest first"""
		return [entry.description for entry in self.history]

	# ========================================
	# Listeners
	# ========================================

	def add_listener(self, callback):
		"""
		Args:
			callback: Called as callback(can_undo, can_redo) after every change
		"""
		self._listeners.append(callback)

	def remove_listener(self, callback):
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify_listeners(self):
		for callback in self._listeners:
			try:
				callback(self.can_undo(), self.can_redo())
			except Exception:
				self._logger.exception("History listener failed")
