import asyncio

import pytest

from authenta.crypto.text_cipher import decrypt_text
from authenta.utils.errors import CorruptOrWrongKey, NotFound, VaultLocked
from authenta.vault.access import Gate
from authenta.vault.credentials import CredentialVault
from authenta.vault.session import VaultSession

from helpers import make_source, store_artifact


@pytest.fixture
def gated(artifacts, owner):
    artifact, _ = store_artifact(artifacts, owner, make_source("claims.pdf"), gate=Gate.for_password("blade-pw"))
    return artifact


def test_add_list_reveal(vault_items, artifacts, session, gated):
    session.unlock_vault("master-1")
    vault = CredentialVault(vault_items, artifacts, session)

    item = asyncio.run(vault.add_entry(gated.id, "blade-pw"))
    assert item.id
    assert item.file_id == gated.id
    assert item.file_name == "claims.pdf"
    assert item.file_hash == gated.hash
    assert "blade-pw" not in item.encrypted_password
    assert decrypt_text(item.encrypted_password, "master-1") == "blade-pw"

    [listed] = asyncio.run(vault.list_entries())
    assert listed.id == item.id
    assert asyncio.run(vault.reveal(listed)) == "blade-pw"
    assert session.revealed_secret(item.id) == "blade-pw"


def test_locked_vault_refuses_work(vault_items, artifacts, session, gated):
    vault = CredentialVault(vault_items, artifacts, session)
    with pytest.raises(VaultLocked):
        asyncio.run(vault.add_entry(gated.id, "blade-pw"))


def test_other_master_password_cannot_reveal(vault_items, artifacts, owner, gated):
    with VaultSession(owner) as first:
        first.unlock_vault("master-1")
        item = asyncio.run(CredentialVault(vault_items, artifacts, first).add_entry(gated.id, "blade-pw"))

    with VaultSession(owner) as second:
        second.unlock_vault("master-2")
        vault = CredentialVault(vault_items, artifacts, second)
        with pytest.raises(CorruptOrWrongKey):
            asyncio.run(vault.reveal(item))
        assert second.revealed_secret(item.id) is None


def test_hide_and_delete(vault_items, artifacts, session, gated):
    session.unlock_vault("master-1")
    vault = CredentialVault(vault_items, artifacts, session)
    item = asyncio.run(vault.add_entry(gated.id, "blade-pw"))
    asyncio.run(vault.reveal(item))

    vault.hide(item.id)
    assert session.revealed_secret(item.id) is None

    asyncio.run(vault.delete_entry(item.id))
    assert asyncio.run(vault.list_entries()) == []
    with pytest.raises(NotFound):
        asyncio.run(vault_items.get_item(item.id))


def test_entry_for_missing_artifact(vault_items, artifacts, session):
    session.unlock_vault("master-1")
    with pytest.raises(NotFound):
        asyncio.run(CredentialVault(vault_items, artifacts, session).add_entry("missing", "pw"))


def test_locking_clears_revealed_secrets(vault_items, artifacts, session, gated):
    session.unlock_vault("master-1")
    vault = CredentialVault(vault_items, artifacts, session)
    item = asyncio.run(vault.add_entry(gated.id, "blade-pw"))
    asyncio.run(vault.reveal(item))

    session.lock_vault()
    assert session.revealed_secret(item.id) is None
    with pytest.raises(VaultLocked):
        asyncio.run(vault.reveal(item))
