"""
Reading library manager.

Offline first: the last server snapshot is restored from the store at
construction. In guest mode every mutation stays in local storage under its
own key and the network is never touched; signed-in mutations go to the
server and are always followed by a fresh library fetch.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import List, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.core.session import SessionState
from gread_client.models import Book, LibraryItem, LibraryStatus
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager, utcnow


class LibraryManager(CachedManager):
    cache_keys = (PreferenceKeys.LIBRARY_ITEMS, PreferenceKeys.LIBRARY_LOAD_TIME)

    def __init__(self, api: GReadApiClient, store: PreferenceStore, session: SessionState) -> None:
        super().__init__(api, store)
        self.session = session
        self.items: List[LibraryItem] = []
        self.is_loading = False
        self.last_load_time: Optional[datetime] = None
        self._has_loaded_once = False
        self._load_lock = asyncio.Lock()
        self._load_from_cache()

    @property
    def has_loaded_once(self) -> bool:
        return self._has_loaded_once

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_library_if_needed(self) -> None:
        if self._has_loaded_once:
            self._logger.debug("Library already loaded, skipping reload")
            return
        await self.load_library()

    async def load_library(self, *, force: bool = False) -> None:
        """Refresh `items`. Failures are logged and leave the current items in place.

        A plain call is dropped while another load is running. With ``force``
        the call waits for that load and then fetches again, so the result
        reflects every mutation made before it.
        """
        if self.is_loading and not force:
            self._logger.debug("Library already loading, skipping duplicate request")
            return

        if self.session.is_guest_mode:
            self.items = self._guest_items()
            self.last_load_time = utcnow()
            self._has_loaded_once = True
            return

        async with self._load_lock:
            self.is_loading = True
            try:
                items = await self.api.get_library()
            except ApiError as e:
                self._logger.error("Error loading library: %s", e)
                return
            finally:
                self.is_loading = False

            self.items = items
            self.last_load_time = utcnow()
            self._has_loaded_once = True
            self._logger.info("Loaded %d library items", len(items))
            self._save_to_cache()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_book(self, book_id: int, book: Optional[Book] = None) -> None:
        if self.session.is_guest_mode:
            self._guest_add(book_id, book)
            return
        await self.api.add_to_library(book_id)
        await self.load_library(force=True)

    async def remove_book(self, book_id: int) -> None:
        if self.session.is_guest_mode:
            self._guest_remove(book_id)
            return
        await self.api.remove_from_library(book_id)
        await self.load_library(force=True)

    async def update_progress(self, book_id: int, current_page: int) -> None:
        if self.session.is_guest_mode:
            self._guest_update_progress(book_id, current_page)
            return
        await self.api.update_reading_progress(book_id, current_page)
        await self.load_library(force=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def filtered_items(self, status: Optional[str] = None, search: Optional[str] = None) -> List[LibraryItem]:
        wanted = status.value if isinstance(status, LibraryStatus) else status
        needle = (search or "").strip().lower()
        result = []
        for item in self.items:
            if wanted and item.effective_status != wanted:
                continue
            if needle:
                book = item.book
                haystack = " ".join(filter(None, [book.title if book else None, book.author if book else None]))
                if needle not in haystack.lower():
                    continue
            result.append(item)
        return result

    # ------------------------------------------------------------------
    # Guest storage
    # ------------------------------------------------------------------

    def _guest_items(self) -> List[LibraryItem]:
        return self.store.get_model(PreferenceKeys.GUEST_LIBRARY_ITEMS, List[LibraryItem]) or []

    def _save_guest_items(self, items: List[LibraryItem]) -> None:
        self.store.set_model(PreferenceKeys.GUEST_LIBRARY_ITEMS, items)
        self.items = items
        self.last_load_time = utcnow()

    def _guest_add(self, book_id: int, book: Optional[Book]) -> None:
        items = self._guest_items()
        if any(item.book_id == book_id for item in items):
            self._logger.debug("Book %s already in guest library", book_id)
            return
        # Server ids are positive; local placeholders count down from -1
        placeholder_id = min([0] + [item.id for item in items]) - 1
        items.append(
            LibraryItem(
                id=placeholder_id,
                user_id=0,
                book=book or Book(id=book_id, title=""),
                status=LibraryStatus.WANT_TO_READ.value,
                current_page=0,
                progress_percentage=0.0,
                date_added=utcnow().isoformat(),
            )
        )
        self._save_guest_items(items)

    def _guest_remove(self, book_id: int) -> None:
        items = [item for item in self._guest_items() if item.book_id != book_id]
        self._save_guest_items(items)

    def _guest_update_progress(self, book_id: int, current_page: int) -> None:
        items = self._guest_items()
        for index, item in enumerate(items):
            if item.book_id != book_id:
                continue
            page = max(0, current_page)
            total = item.book.total_pages if item.book else None
            if total and total > 0:
                percentage = min(100.0, page / total * 100.0)
                if page >= total:
                    status = LibraryStatus.COMPLETED.value
                elif page > 0:
                    status = LibraryStatus.READING.value
                else:
                    status = item.status
            else:
                percentage = item.progress_percentage
                status = LibraryStatus.READING.value if page > 0 else item.status
            items[index] = item.model_copy(
                update={"current_page": page, "progress_percentage": percentage, "status": status}
            )
            self._save_guest_items(items)
            return
        self._logger.warning("Book %s is not in the guest library", book_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        self.items = []
        self._has_loaded_once = False
        self.last_load_time = None
        self._drop_keys()

    def _save_to_cache(self) -> None:
        self.store.set_model(PreferenceKeys.LIBRARY_ITEMS, self.items)
        self._write_time(PreferenceKeys.LIBRARY_LOAD_TIME, self.last_load_time)

    def _load_from_cache(self) -> None:
        cached = self.store.get_model(PreferenceKeys.LIBRARY_ITEMS, List[LibraryItem])
        if cached is not None:
            # A restored snapshot must not prevent a fresh server load
            self.items = cached
            self._logger.debug("Loaded %d library items from cache", len(cached))
        self.last_load_time = self._read_time(PreferenceKeys.LIBRARY_LOAD_TIME)
