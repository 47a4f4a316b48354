"""
CalendarBridge: seed and tear down calendar state around automated test runs.

The bridge negotiates access to events or reminders, inserts batches of
items, and removes everything in a date window. Each batch is all or
nothing: items are staged one by one and committed once, and the first
failure discards everything staged so far.

Every public operation returns a ``concurrent.futures.Future`` that resolves
exactly once. Failures are reported in the result, never raised through
the future.
"""

import logging
import threading
from concurrent.futures import Executor, Future, InvalidStateError, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from .core.exceptions import (
    AuthorizationDenied, CalendarBridgeError, NotAuthorizedError,
    StoreCommitFailure, StoreFetchFailure, StoreOpenFailure, StoreRemoveFailure,
    StoreSaveFailure, UnsupportedItemForCategory
)
from .core.models import (
    AccessResult, AuthorizationStatus, CalendarItem, DateWindow, EventItem,
    EventSpan, ItemCategory, OperationResult, ReminderItem
)
from .store.base import CalendarStore, StoreProvider


class CalendarBridge:
    """Owns one store handle and applies batched changes to it."""

    def __init__(self, provider: StoreProvider,
                 span: EventSpan = EventSpan.FUTURE_EVENTS,
                 window: Optional[DateWindow] = None,
                 executor: Optional[Executor] = None,
                 bound_reminders: bool = False,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            provider: Source of store handles and authorization status
            span: Span applied to event saves and removals
            window: Removal window; defaults to one year either side of now
            executor: Serial context that observes and replaces the store
                handle. When omitted the bridge owns a single worker thread.
            bound_reminders: Also restrict reminder removal to the window
                (by due date); reminders without one are left alone
            logger: Logger to use instead of the module logger
        """
        self.logger = logger or logging.getLogger(__name__)
        self.provider = provider
        self.span = span
        self.window = window or DateWindow.default()
        self.bound_reminders = bound_reminders

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="cal-bridge"
        )
        self._store: Optional[CalendarStore] = None
        self._store_lock = threading.Lock()

    @classmethod
    def from_config(cls, config, provider: StoreProvider,
                    executor: Optional[Executor] = None) -> 'CalendarBridge':
        """Build a bridge from a ``BridgeConfig``."""
        return cls(
            provider,
            span=config.span,
            window=config.window(),
            executor=executor,
            bound_reminders=config.bound_reminders,
        )

    @property
    def store(self) -> Optional[CalendarStore]:
        """The current store handle, or None before the first authorization."""
        with self._store_lock:
            return self._store

    def _install_store(self, store: CalendarStore) -> None:
        with self._store_lock:
            self._store = store

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Authorization

    def authorization_status(self, category: ItemCategory) -> AuthorizationStatus:
        return self.provider.authorization_status(category)

    def authorized(self, category: ItemCategory) -> bool:
        """Whether the host app may use ``category``. Does not touch the store handle."""
        return self.authorization_status(category) is AuthorizationStatus.AUTHORIZED

    def request_access(self, category: ItemCategory) -> 'Future[AccessResult]':
        """
        Obtain a store handle for ``category``.

        Already authorized: a fresh handle is installed and the returned
        future is complete on return. Otherwise the store prompts; its answer
        is handled on the bridge's executor, and only a grant replaces the
        current handle.
        """
        future: Future = Future()

        try:
            if self.authorized(category):
                store = self.provider.open_store()
                self._install_store(store)
                self.logger.debug("Already authorized for %ss", category.value)
                future.set_result(AccessResult(True, None, store))
                return future

            prompter = self.provider.open_store()
        except Exception as e:
            error = _wrap(e, StoreOpenFailure)
            self.logger.error("Could not open calendar store: %s", error)
            future.set_result(AccessResult(False, error, None))
            return future

        def answered(granted: bool, error: Optional[Exception]):
            try:
                self._executor.submit(self._finish_access, future, category, granted, error)
            except Exception as e:
                self.logger.error("Could not schedule access answer: %s", e)
                _resolve(future, AccessResult(False, _wrap(e, CalendarBridgeError), None))

        self.logger.info("Requesting access to %ss", category.value)
        try:
            prompter.request_access(category, answered)
        except Exception as e:
            self.logger.error("Access request for %ss failed: %s", category.value, e)
            _resolve(future, AccessResult(False, e, None))
        return future

    def _finish_access(self, future: Future, category: ItemCategory,
                       granted: bool, error: Optional[Exception]) -> None:
        if not granted:
            self.logger.warning("Access to %ss was denied", category.value)
            future.set_result(AccessResult(
                False, error or AuthorizationDenied(f"Access to {category.value}s denied"), None
            ))
            return

        try:
            store = self.provider.open_store()
        except Exception as e:
            error = _wrap(e, StoreOpenFailure)
            self.logger.error("Could not open calendar store: %s", error)
            future.set_result(AccessResult(False, error, None))
            return

        self._install_store(store)
        self.logger.info("Access to %ss granted", category.value)
        future.set_result(AccessResult(True, error, store))

    # Batches

    def add_all(self, items: Sequence[CalendarItem],
                category: ItemCategory) -> 'Future[OperationResult]':
        """Save ``items`` and commit once; nothing is applied if any item fails."""
        future: Future = Future()
        items = list(items)
        self._submit(future, StoreSaveFailure, self._run_batch, future, items, category, self._save)
        return future

    def remove_all(self, category: ItemCategory) -> 'Future[OperationResult]':
        """Remove every ``category`` item in the window and commit once."""
        future: Future = Future()
        self._submit(future, StoreFetchFailure, self._fetch_then_remove, future, category)
        return future

    def _submit(self, future: Future, failure_type, fn, *args) -> None:
        """Run ``fn`` on the executor; anything it raises fails ``future``."""
        def task():
            try:
                fn(*args)
            except Exception as e:
                self.logger.exception("Unexpected error in %s", getattr(fn, '__name__', fn))
                _resolve(future, OperationResult.failed(_wrap(e, failure_type)))

        try:
            self._executor.submit(task)
        except Exception as e:
            self.logger.error("Could not schedule bridge operation: %s", e)
            _resolve(future, OperationResult.failed(_wrap(e, failure_type)))

    def _save(self, store: CalendarStore, item: CalendarItem, category: ItemCategory) -> None:
        if isinstance(item, EventItem) and category is ItemCategory.EVENT:
            store.save(item, span=self.span, commit=False)
        elif isinstance(item, ReminderItem) and category is ItemCategory.REMINDER:
            store.save(item, commit=False)
        else:
            raise UnsupportedItemForCategory(item, category)

    def _remove(self, store: CalendarStore, item: CalendarItem, category: ItemCategory) -> None:
        if isinstance(item, EventItem) and category is ItemCategory.EVENT:
            store.remove(item, span=self.span, commit=False)
        elif isinstance(item, ReminderItem) and category is ItemCategory.REMINDER:
            store.remove(item, commit=False)
        else:
            raise UnsupportedItemForCategory(item, category)

    def _abort(self, future: Future, store: CalendarStore, error: Exception) -> None:
        """Discard staged changes and fail ``future`` with the batch error."""
        try:
            store.rollback()
        except Exception:
            self.logger.exception("Rollback after failed batch also failed")
        future.set_result(OperationResult.failed(error))

    def _run_batch(self, future: Future, items: List[CalendarItem],
                   category: ItemCategory,
                   stage: Callable[[CalendarStore, CalendarItem, ItemCategory], None]) -> None:
        store = self.store
        if store is None:
            future.set_result(OperationResult.failed(
                NotAuthorizedError("No calendar store; request access first")
            ))
            return

        failure_type = StoreSaveFailure if stage == self._save else StoreRemoveFailure
        for index, item in enumerate(items):
            try:
                stage(store, item, category)
            except Exception as e:
                if not isinstance(e, CalendarBridgeError):
                    self.logger.exception("Unexpected store error staging '%s'", getattr(item, 'title', item))
                error = _wrap(e, failure_type)
                self.logger.error("Batch aborted at item %d of %d: %s", index + 1, len(items), error)
                self._abort(future, store, error)
                return

        if not items:
            future.set_result(OperationResult.ok())
            return

        try:
            store.commit()
        except Exception as e:
            error = _wrap(e, StoreCommitFailure)
            self.logger.error("Commit of %d %s(s) failed: %s", len(items), category.value, error)
            self._abort(future, store, error)
            return

        self.logger.debug("Committed %d %s(s)", len(items), category.value)
        future.set_result(OperationResult.ok())

    def _fetch_then_remove(self, future: Future, category: ItemCategory) -> None:
        store = self.store
        if store is None:
            future.set_result(OperationResult.failed(
                NotAuthorizedError("No calendar store; request access first")
            ))
            return

        def fetched(items: Optional[List[ReminderItem]], error: Optional[Exception] = None):
            if error is not None:
                error = _wrap(error, StoreFetchFailure)
                self.logger.error("Fetching reminders failed: %s", error)
                _resolve(future, OperationResult.failed(error))
                return
            items = list(items or [])
            if self.bound_reminders:
                items = [r for r in items if self.window.contains(r.due_date)]
            self._submit(future, StoreRemoveFailure, self._run_batch,
                         future, items, category, self._remove)

        events: List[CalendarItem] = []
        try:
            if category is ItemCategory.EVENT:
                predicate = store.predicate_for_events(self.window.start, self.window.end)
                store.enumerate_events(predicate, events.append)
            else:
                store.fetch_reminders(store.predicate_for_reminders(), fetched)
        except Exception as e:
            if not isinstance(e, CalendarBridgeError):
                self.logger.exception("Unexpected store error fetching %ss", category.value)
            error = _wrap(e, StoreFetchFailure)
            self.logger.error("Fetching %ss failed: %s", category.value, error)
            _resolve(future, OperationResult.failed(error))
            return

        if category is ItemCategory.EVENT:
            # EventKit matches events overlapping the window; keep only those starting in it.
            in_window = [e for e in events if self.window.contains(e.start)]
            self._run_batch(future, in_window, category, self._remove)


def _wrap(error: Exception, failure_type) -> CalendarBridgeError:
    """Return ``error`` unchanged if it is ours, else a ``failure_type`` caused by it."""
    if isinstance(error, CalendarBridgeError):
        return error
    wrapped = failure_type(str(error))
    wrapped.__cause__ = error
    return wrapped


def _resolve(future: Future, result) -> None:
    """Complete ``future`` unless something already did."""
    try:
        future.set_result(result)
    except InvalidStateError:
        pass
