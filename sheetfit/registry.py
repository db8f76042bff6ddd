"""
sheetfit/registry.py — Per-document key → asset-handle map.

The first resolve() of a key registers its payload with the Document Model;
every later resolve() of the same key returns that handle and ignores the
payload it was given (first write wins, payloads are never compared).
Append-only: nothing is evicted for the lifetime of the document.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Union

from .model import DocumentModel
from .models import FileFormat, ImageFormat, ResourceKind

logger = logging.getLogger(__name__)


class ResourceRegistry:
    def __init__(self, document: DocumentModel, kind: ResourceKind) -> None:
        self._document = document
        self.kind = kind
        self._handles: Dict[str, Any] = {}

    def resolve(
        self,
        key: str,
        kind: ResourceKind,
        payload: bytes,
        fmt: Union[ImageFormat, FileFormat, None] = None,
    ) -> Any:
        if kind is not self.kind:
            raise ValueError(f"{self.kind.value} registry cannot resolve a {kind.value} resource")

        if key in self._handles:
            logger.debug("Reusing %s asset for key %r", self.kind.value, key)
            return self._handles[key]

        if kind is ResourceKind.IMAGE:
            handle = self._document.register_binary_asset(payload, fmt)
        else:
            handle = self._document.register_object_package(payload, key)

        self._handles[key] = handle
        logger.debug("Registered %s asset %r -> %r (%d bytes)", self.kind.value, key, handle, len(payload))
        return handle

    def get(self, key: str) -> Optional[Any]:
        return self._handles.get(key)

    def keys(self):
        return self._handles.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)
