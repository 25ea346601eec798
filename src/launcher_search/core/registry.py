"""Action registry - the live tree of registered actions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from launcher_search.core.action import Action, ActionSpec

if TYPE_CHECKING:
    from launcher_search.storage.history_store import UsageHistoryStore

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when a registry mutation would leave the tree inconsistent."""


class UnknownParentError(RegistryError):
    """Raised when an action names a parent that is not registered."""

    def __init__(self, action_id: str, parent_id: str) -> None:
        super().__init__(f"Action {action_id!r} has unknown parent {parent_id!r}")
        self.action_id = action_id
        self.parent_id = parent_id


class ActionRegistry:
    """
    Registered actions and their parent/child links.

    Mutations are copy-on-write: each batch builds a new id -> Action map
    and publishes it with a single assignment, so a list obtained from
    :meth:`snapshot` is never affected by later changes. Writers are
    serialized by a lock; readers never block.

    Usage history is not owned here. Registration only seeds the history
    store for actions that declare initial usage and have none persisted.
    """

    def __init__(self, history_store: UsageHistoryStore | None = None) -> None:
        self._history_store = history_store
        self._actions: dict[str, Action] = {}
        self._write_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions

    def get(self, action_id: str) -> Action | None:
        return self._actions.get(action_id)

    def snapshot(self) -> list[Action]:
        """All actions in registration order."""
        return list(self._actions.values())

    def roots(self) -> list[Action]:
        """Actions without a parent, in registration order."""
        return [a for a in self._actions.values() if a.parent_id is None]

    def children(self, action_id: str) -> list[Action]:
        """Direct children of an action, in registration order."""
        actions = self._actions
        action = actions.get(action_id)
        if action is None:
            return []
        return [actions[c] for c in action.children if c in actions]

    def descendants(self, action_id: str) -> list[Action]:
        """All actions below ``action_id``, depth-first, excluding itself."""
        actions = self._actions
        result: list[Action] = []
        root = actions.get(action_id)
        if root is None:
            return result

        stack = list(reversed(root.children))
        while stack:
            child = actions.get(stack.pop())
            if child is None:
                continue
            result.append(child)
            stack.extend(reversed(child.children))
        return result

    def ancestors(self, action_id: str) -> list[Action]:
        """
        Chain of parents of an action.

        Returns:
            Top-most registered ancestor first, the action itself excluded;
            empty for roots and unknown ids
        """
        actions = self._actions
        chain: list[Action] = []
        current = actions.get(action_id)
        seen = {action_id}
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            parent = actions.get(current.parent_id)
            if parent is None:
                break
            chain.append(parent)
            seen.add(parent.id)
            current = parent
        chain.reverse()
        return chain

    def register(self, specs: Iterable[ActionSpec]) -> list[Action]:
        """
        Register a batch of actions.

        Specs are applied in order, so a parent declared earlier in the same
        batch is valid. Re-registering an id replaces the action and keeps
        its children.

        Args:
            specs: Action declarations

        Returns:
            The registered actions, in batch order

        Raises:
            UnknownParentError: If a parent id is not registered; nothing
                from the batch is committed
            RegistryError: If an action would become its own ancestor
        """
        specs = list(specs)
        with self._write_lock:
            actions = dict(self._actions)
            registered: list[Action] = []

            for spec in specs:
                parent_id = spec.parent_id
                if parent_id is not None:
                    if parent_id not in actions:
                        raise UnknownParentError(spec.id, parent_id)
                    if parent_id == spec.id or spec.id in {
                        a.id for a in _ancestor_chain(actions, parent_id)
                    }:
                        raise RegistryError(f"Action {spec.id!r} cannot be its own ancestor")

                previous = actions.get(spec.id)
                children = previous.children if previous is not None else ()
                action = Action.from_spec(spec, children=children)

                if previous is not None and previous.parent_id != parent_id:
                    _unlink_child(actions, previous.parent_id, spec.id)
                actions[spec.id] = action
                if parent_id is not None and (previous is None or previous.parent_id != parent_id):
                    parent = actions[parent_id]
                    actions[parent_id] = parent.with_children((*parent.children, spec.id))

                registered.append(action)

            self._actions = actions

        self._seed_history(specs)
        logger.debug("Registered %d actions (%d total)", len(registered), len(self._actions))
        return [self._actions[a.id] for a in registered]

    def unregister(self, action_ids: Iterable[str]) -> list[str]:
        """
        Remove actions and all their descendants.

        Usage history is kept so re-registration resumes it. Unknown ids
        are ignored.

        Returns:
            Ids actually removed
        """
        with self._write_lock:
            actions = dict(self._actions)
            removed: list[str] = []

            for action_id in action_ids:
                action = actions.get(action_id)
                if action is None:
                    continue

                _unlink_child(actions, action.parent_id, action_id)
                for doomed in [action_id, *_subtree_ids(actions, action_id)]:
                    if actions.pop(doomed, None) is not None:
                        removed.append(doomed)

            self._actions = actions

        if removed:
            logger.debug("Unregistered %d actions", len(removed))
        return removed

    def _seed_history(self, specs: list[ActionSpec]) -> None:
        if self._history_store is None:
            return
        for spec in specs:
            if spec.has_seed_usage:
                self._history_store.seed(spec.id, spec.seed_record())


def _unlink_child(actions: dict[str, Action], parent_id: str | None, child_id: str) -> None:
    if parent_id is None:
        return
    parent = actions.get(parent_id)
    if parent is None or child_id not in parent.children:
        return
    actions[parent_id] = parent.with_children(tuple(c for c in parent.children if c != child_id))


def _subtree_ids(actions: dict[str, Action], action_id: str) -> list[str]:
    result: list[str] = []
    root = actions.get(action_id)
    if root is None:
        return result
    stack = list(root.children)
    while stack:
        child_id = stack.pop()
        child = actions.get(child_id)
        if child is None:
            continue
        result.append(child_id)
        stack.extend(child.children)
    return result


def _ancestor_chain(actions: dict[str, Action], action_id: str) -> list[Action]:
    chain: list[Action] = []
    current = actions.get(action_id)
    seen: set[str] = set()
    while current is not None and current.id not in seen:
        chain.append(current)
        seen.add(current.id)
        current = actions.get(current.parent_id) if current.parent_id else None
    return chain
