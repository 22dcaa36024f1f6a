"""Shared test fixtures."""

from __future__ import annotations

import pytest

from sharing_cart.models import CartItem
from sharing_cart.renderers.tree import TreeRenderer
from sharing_cart.services.capabilities import RESTORE_ACTIVITY, RESTORE_COURSE, StaticCapabilityChecker
from sharing_cart.services.file_store import StoredFile
from sharing_cart.services.icons import IconResolver
from sharing_cart.services.strings import StringCatalog

WWWROOT = "http://moodle.test"


class FakeFileStore:
    """File store backed by a dict, no filesystem involved."""

    def __init__(self, files: dict[str, StoredFile] | None = None):
        self.files = dict(files or {})
        self.requested: list[str] = []

    def get(self, filename: str) -> StoredFile:
        self.requested.append(filename)
        if filename not in self.files:
            raise FileNotFoundError(filename)
        return self.files[filename]


@pytest.fixture
def file_store():
    return FakeFileStore(
        {
            "backup-1.mbz": StoredFile(
                contextid=5,
                component="user",
                filearea="backup",
                itemid=None,
                filepath="/",
                filename="backup-1.mbz",
            )
        }
    )


@pytest.fixture
def make_renderer(file_store):
    """Build a TreeRenderer; all required capabilities granted by default."""

    def _make(granted=(RESTORE_COURSE, RESTORE_ACTIVITY), **kwargs) -> TreeRenderer:
        return TreeRenderer(
            capability_checker=StaticCapabilityChecker(granted),
            strings=StringCatalog(),
            files=file_store,
            icons=IconResolver(WWWROOT),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_item():
    def _make(**overrides) -> CartItem:
        values = {
            "id": 1,
            "modname": "forum",
            "modtext": "Forum A",
            "fileid": 10,
            "filename": "backup-1.mbz",
            "coursefullname": "Course A",
        }
        values.update(overrides)
        return CartItem(**values)

    return _make
