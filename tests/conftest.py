import pytest

from authenta.storage.repository import ArtifactRepository, VaultItemRepository
from authenta.storage.store import MemoryDocumentStore
from authenta.utils.config import get_settings
from authenta.utils.dataModels import Identity
from authenta.vault.session import VaultSession


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def owner():
    return Identity(uid="user-1", email="owner@example.com", name="Owner")


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def artifacts(store):
    return ArtifactRepository(store)


@pytest.fixture
def vault_items(store):
    return VaultItemRepository(store)


@pytest.fixture
def session(owner):
    with VaultSession(owner) as s:
        yield s
