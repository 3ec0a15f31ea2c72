from unittest.mock import MagicMock

import pytest

from account_console.models import Account, Certification
from account_console.store import AccountStore, bind_actions


@pytest.mark.unit
def test_set_visible_accounts_replaces_and_dedupes(address, other_address):
    store = AccountStore()
    store.set_visible_accounts([address, address, "", other_address])
    assert store.visible_accounts == [address, other_address]

    store.set_visible_accounts([other_address])
    assert store.visible_accounts == [other_address]
    assert store.is_visible(address) is False


@pytest.mark.unit
def test_unchanged_visible_set_does_not_notify(address):
    store = AccountStore()
    store.set_visible_accounts([address])
    listener = MagicMock()
    store.subscribe(listener)

    store.set_visible_accounts([address])

    listener.assert_not_called()


@pytest.mark.unit
def test_subscribe_and_unsubscribe(address):
    store = AccountStore()
    listener = MagicMock()
    unsubscribe = store.subscribe(listener)

    store.set_accounts([Account(address=address)])
    assert listener.call_count == 1

    unsubscribe()
    unsubscribe()
    store.set_accounts([])
    assert listener.call_count == 1


@pytest.mark.unit
def test_net_version_notifies_only_on_change():
    store = AccountStore(net_version="42")
    listener = MagicMock()
    store.subscribe(listener)

    store.set_net_version("42")
    listener.assert_not_called()

    store.set_net_version("1")
    assert store.net_version == "1"
    listener.assert_called_once()


@pytest.mark.unit
def test_snapshots_are_copies(store, address):
    accounts = store.accounts
    accounts.pop(address)
    assert address in store.accounts


@pytest.mark.unit
def test_listener_errors_do_not_propagate():
    store = AccountStore()
    store.subscribe(MagicMock(side_effect=RuntimeError("boom")))
    second = MagicMock()
    store.subscribe(second)

    store.set_net_version("1")

    second.assert_called_once()


@pytest.mark.unit
def test_new_error_reaches_error_listeners():
    store = AccountStore()
    listener = MagicMock()
    store.subscribe_errors(listener)
    error = ValueError("Connection error: refused")

    store.new_error(error)

    listener.assert_called_once_with(error)
    assert store.errors == [error]


@pytest.mark.unit
def test_bind_actions_routes_to_store_and_fetcher(address):
    store = AccountStore()
    fetcher = MagicMock()
    actions = bind_actions(store, fetcher)

    actions.set_visible_accounts([address])
    actions.fetch_certifiers()
    actions.fetch_certifications(address)

    assert store.visible_accounts == [address]
    fetcher.fetch_certifiers.assert_called_once_with()
    fetcher.fetch_certifications.assert_called_once_with(address)


@pytest.mark.unit
def test_certifications_only_merge_for_visible_address(address, other_address):
    store = AccountStore()
    store.set_visible_accounts([other_address])
    listener = MagicMock()
    store.subscribe(listener)
    record = Certification(name="smsverification")

    assert store.set_certifications_if_visible(address, [record]) is False
    assert address not in store.certifications
    listener.assert_not_called()

    assert store.set_certifications_if_visible(other_address, [record]) is True
    assert store.certifications[other_address] == [record]
    listener.assert_called_once()
