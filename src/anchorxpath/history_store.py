from __future__ import annotations

import json
import sqlite3
import threading
import time
from dataclasses import asdict
from pathlib import Path
from typing import Callable

from .errors import HistoryStoreError
from .models import HistoryItem

MAX_HISTORY_ITEMS = 50


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    """Most recent generated selectors, newest first, capped at ``MAX_HISTORY_ITEMS``."""

    def __init__(
        self,
        base_dir: Path | None = None,
        *,
        clock: Callable[[], int] = _epoch_millis,
        limit: int = MAX_HISTORY_ITEMS,
    ) -> None:
        root = base_dir or (Path.home() / ".anchorxpath")
        root.mkdir(parents=True, exist_ok=True)
        self.db_path = root / "history.db"
        self.json_path = root / "history.json"
        self.limit = limit
        self._clock = clock
        self._lock = threading.Lock()
        self._use_sqlite = self._initialize_sqlite()
        if not self._use_sqlite:
            self._initialize_json()

    def _initialize_sqlite(self) -> bool:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cur = conn.cursor()
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS history (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        selector TEXT NOT NULL,
                        page_url TEXT NOT NULL,
                        icon_url TEXT NOT NULL,
                        timestamp INTEGER NOT NULL,
                        inner_text TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
            return True
        except sqlite3.Error:
            return False

    def _initialize_json(self) -> None:
        if self.json_path.exists():
            return
        self._write_json([])

    def save_item(
        self,
        selector: str,
        page_url: str,
        icon_url: str = "",
        inner_text: str = "",
    ) -> HistoryItem:
        item = HistoryItem(
            selector=selector,
            page_url=page_url,
            icon_url=icon_url,
            timestamp=int(self._clock()),
            inner_text=inner_text,
        )
        with self._lock:
            if self._use_sqlite:
                try:
                    self._save_sqlite(item)
                    return item
                except sqlite3.Error:
                    self._use_sqlite = False
                    self._initialize_json()
            items = [item, *self._read_json()][: self.limit]
            self._write_json(items)
        return item

    def _save_sqlite(self, item: HistoryItem) -> None:
        with sqlite3.connect(self.db_path) as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO history (selector, page_url, icon_url, timestamp, inner_text)
                VALUES (?, ?, ?, ?, ?)
                """,
                (item.selector, item.page_url, item.icon_url, item.timestamp, item.inner_text),
            )
            cur.execute(
                """
                DELETE FROM history
                WHERE id NOT IN (
                    SELECT id FROM history ORDER BY timestamp DESC, id DESC LIMIT ?
                )
                """,
                (self.limit,),
            )
            conn.commit()

    def get_items(self) -> list[HistoryItem]:
        with self._lock:
            if self._use_sqlite:
                try:
                    with sqlite3.connect(self.db_path) as conn:
                        cur = conn.cursor()
                        cur.execute(
                            """
                            SELECT selector, page_url, icon_url, timestamp, inner_text
                            FROM history
                            ORDER BY timestamp DESC, id DESC
                            """
                        )
                        return [
                            HistoryItem(
                                selector=str(row[0]),
                                page_url=str(row[1]),
                                icon_url=str(row[2]),
                                timestamp=int(row[3]),
                                inner_text=str(row[4]),
                            )
                            for row in cur.fetchall()
                        ]
                except sqlite3.Error:
                    self._use_sqlite = False
                    self._initialize_json()
            return self._read_json()

    def remove_item(self, timestamp: int) -> None:
        with self._lock:
            if self._use_sqlite:
                try:
                    with sqlite3.connect(self.db_path) as conn:
                        conn.execute("DELETE FROM history WHERE timestamp = ?", (int(timestamp),))
                        conn.commit()
                    return
                except sqlite3.Error:
                    self._use_sqlite = False
                    self._initialize_json()
            items = [item for item in self._read_json() if item.timestamp != int(timestamp)]
            self._write_json(items)

    def clear(self) -> None:
        with self._lock:
            if self._use_sqlite:
                try:
                    with sqlite3.connect(self.db_path) as conn:
                        conn.execute("DELETE FROM history")
                        conn.commit()
                    return
                except sqlite3.Error:
                    self._use_sqlite = False
                    self._initialize_json()
            self._write_json([])

    def _read_json(self) -> list[HistoryItem]:
        if not self.json_path.exists():
            return []
        try:
            payload = json.loads(self.json_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise HistoryStoreError(f"History file {self.json_path} is corrupted.") from exc
        entries = payload.get("history", []) if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            raise HistoryStoreError(f"History file {self.json_path} has an unexpected layout.")
        items: list[HistoryItem] = []
        for raw in entries:
            if not isinstance(raw, dict):
                raise HistoryStoreError(f"History file {self.json_path} holds a malformed entry: {raw!r}")
            try:
                timestamp = int(raw.get("timestamp", 0))
            except (TypeError, ValueError) as exc:
                raise HistoryStoreError(f"History file {self.json_path} holds a bad timestamp.") from exc
            items.append(
                HistoryItem(
                    selector=str(raw.get("selector", "")),
                    page_url=str(raw.get("page_url", "")),
                    icon_url=str(raw.get("icon_url", "")),
                    timestamp=timestamp,
                    inner_text=str(raw.get("inner_text", "")),
                )
            )
        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items

    def _write_json(self, items: list[HistoryItem]) -> None:
        payload = {"history": [asdict(item) for item in items]}
        self.json_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
