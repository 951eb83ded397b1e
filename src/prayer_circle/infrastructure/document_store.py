"""JSON-based document store."""

import asyncio
import copy
import json
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from prayer_circle.services.ports import (
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentStoreError,
    DocumentStorePort,
    Increment,
    TransactionPort,
)

logger = logging.getLogger(__name__)

_DATETIME_KEY = "$date"

Collections = dict[str, dict[str, dict[str, Any]]]


def _new_id() -> str:
    return uuid.uuid4().hex[:20]


def _encode(value: Any) -> Any:
    """JSON'a çevrilemeyen değerler için (datetime)."""
    if isinstance(value, datetime):
        return {_DATETIME_KEY: value.isoformat()}
    raise TypeError(f"JSON'a çevrilemeyen değer: {value!r}")


def _decode(obj: dict[str, Any]) -> Any:
    if len(obj) == 1 and _DATETIME_KEY in obj:
        return datetime.fromisoformat(obj[_DATETIME_KEY])
    return obj


def _resolve(value: Any, current: Any, now: datetime) -> Any:
    """Alan dönüşümlerini mevcut değere uygula."""
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, Increment):
        return (current or 0) + value.amount
    if isinstance(value, ArrayUnion):
        items = list(current or [])
        for item in value.values:
            if item not in items:
                items.append(item)
        return items
    if isinstance(value, ArrayRemove):
        return [item for item in (current or []) if item not in value.values]
    if isinstance(value, dict):
        existing = current if isinstance(current, dict) else {}
        return {key: _resolve(item, existing.get(key), now) for key, item in value.items()}
    return copy.deepcopy(value)


def _lookup(document: dict[str, Any], path: str) -> Any:
    value: Any = document
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _apply_update(document: dict[str, Any], data: dict[str, Any], now: datetime) -> None:
    """Noktalı alan yollarıyla belgeyi yerinde güncelle."""
    for path, value in data.items():
        *parents, leaf = path.split(".")
        target = document
        for key in parents:
            child = target.get(key)
            if not isinstance(child, dict):
                child = {}
                target[key] = child
            target = child
        target[leaf] = _resolve(value, target.get(leaf), now)


@dataclass(frozen=True)
class _Write:
    kind: str  # "set" | "update" | "delete" | "delete_collection"
    collection: str
    doc_id: str = ""
    data: dict[str, Any] | None = None


def _apply_write(staged: Collections, write: _Write, now: datetime) -> None:
    if write.kind == "delete_collection":
        staged.pop(write.collection, None)
        return
    docs = staged.setdefault(write.collection, {})
    if write.kind == "set":
        docs[write.doc_id] = _resolve(write.data or {}, None, now)
    elif write.kind == "update":
        if write.doc_id not in docs:
            raise DocumentNotFoundError(f"Belge yok: {write.collection}/{write.doc_id}")
        document = copy.deepcopy(docs[write.doc_id])
        _apply_update(document, write.data or {}, now)
        docs[write.doc_id] = document
    elif write.kind == "delete":
        docs.pop(write.doc_id, None)
    else:
        raise ValueError(f"Bilinmeyen yazma türü: {write.kind}")


class _JsonTransaction(TransactionPort):
    """Yazmaları biriktirir; commit JsonDocumentStore tarafından yapılır."""

    def __init__(self, store: "JsonDocumentStore") -> None:
        self._store = store
        self.writes: list[_Write] = []

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        return self._store._snapshot(collection, doc_id)

    def set(self, collection: str, doc_id: str | None, data: dict[str, Any]) -> str:
        doc_id = doc_id or _new_id()
        self.writes.append(_Write("set", collection, doc_id, data))
        return doc_id

    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.writes.append(_Write("update", collection, doc_id, data))

    def delete(self, collection: str, doc_id: str) -> None:
        self.writes.append(_Write("delete", collection, doc_id))

    def delete_collection(self, collection: str) -> int:
        self.writes.append(_Write("delete_collection", collection))
        return self._store._count(collection)


class JsonDocumentStore(DocumentStorePort):
    """Belgeleri bellekte tutan, her commit'te JSON dosyasına yazan depo.

    ``file_path`` verilmezse yalnızca bellekte çalışır (testler, geçici kurulumlar).
    Yazmalar tek bir kilitle sıralanır; yeni durum önce diske yazılır,
    sonra bellekte görünür hale gelir.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        """
        Initialize store.

        Args:
            file_path: JSON dosyası yolu (None ise sadece bellek)
        """
        self._file_path = file_path
        self._collections: Collections = {}
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> Path | None:
        """Veri dosyası yolu."""
        return self._file_path

    @property
    def is_persistent(self) -> bool:
        """Veriler diske yazılıyor mu?"""
        return self._file_path is not None

    async def load(self) -> None:
        """Dosyadan verileri yükle."""
        if self._file_path is None:
            return
        if not self._file_path.exists():
            logger.info(f"Veri dosyası bulunamadı, boş depo ile başlanıyor: {self._file_path}")
            return

        try:
            async with aiofiles.open(self._file_path, encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise DocumentStoreError(f"Veri dosyası okunamadı: {e}") from e

        try:
            data = json.loads(content, object_hook=_decode) if content.strip() else {}
        except json.JSONDecodeError as e:
            raise DocumentStoreError(f"Veri dosyası geçersiz JSON: {e}") from e

        self._collections = data
        logger.info(f"Veriler yüklendi: {self._file_path}")

    async def _flush(self, collections: Collections) -> None:
        if self._file_path is None:
            return

        parent = self._file_path.parent
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            if not parent.exists():
                parent.mkdir(parents=True, exist_ok=True)
                logger.info(f"Veri dizini oluşturuldu: {parent}")
            payload = json.dumps(collections, default=_encode, ensure_ascii=False, indent=2)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self._file_path)
        except OSError as e:
            logger.error(f"Veriler kaydedilirken hata: {e}")
            raise DocumentStoreError(f"Veriler kaydedilemedi: {e}") from e

    async def _commit(self, writes: list[_Write]) -> None:
        """Yazmaları hep ya da hiç uygula. Kilit çağıran tarafından tutulur."""
        now = datetime.now(UTC)
        staged = {name: dict(docs) for name, docs in self._collections.items()}
        for write in writes:
            _apply_write(staged, write, now)
        # Boş kalan koleksiyonlar dosyada tutulmaz
        staged = {name: docs for name, docs in staged.items() if docs}
        await self._flush(staged)
        self._collections = staged

    async def _write(self, *writes: _Write) -> None:
        async with self._lock:
            await self._commit(list(writes))

    def _count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    def _snapshot(self, collection: str, doc_id: str) -> DocumentSnapshot:
        document = self._collections.get(collection, {}).get(doc_id)
        return DocumentSnapshot(id=doc_id, data=copy.deepcopy(document))

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Belge oku."""
        return self._snapshot(collection, doc_id)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Yeni belge ekle."""
        doc_id = _new_id()
        await self._write(_Write("set", collection, doc_id, data))
        logger.debug(f"Belge eklendi: {collection}/{doc_id}")
        return doc_id

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Belgeyi güncelle."""
        await self._write(_Write("update", collection, doc_id, data))

    async def delete(self, collection: str, doc_id: str) -> None:
        """Belgeyi sil."""
        await self._write(_Write("delete", collection, doc_id))

    async def delete_collection(self, collection: str) -> int:
        """Koleksiyonu boşalt."""
        count = self._count(collection)
        if count:
            await self._write(_Write("delete_collection", collection))
        return count

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[DocumentSnapshot]:
        """Eşitlik filtresiyle belgeleri listele."""
        filters = filters or {}
        return [
            DocumentSnapshot(id=doc_id, data=copy.deepcopy(document))
            for doc_id, document in self._collections.get(collection, {}).items()
            if all(_lookup(document, path) == value for path, value in filters.items())
        ]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[TransactionPort]:
        """Transaction başlat."""
        async with self._lock:
            txn = _JsonTransaction(self)
            yield txn
            await self._commit(txn.writes)
            logger.debug(f"Transaction commit edildi ({len(txn.writes)} yazma)")
