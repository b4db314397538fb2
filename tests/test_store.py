import pytest

from infra_app.store import EntityStore


def test_replace_swaps_whole_collection_and_keeps_old_snapshot():
    store = EntityStore(orders=[{'id': 'OS-24001'}])
    antes = store.orders

    nova = store.replace('orders', [{'id': 'OS-24002'}] + list(antes))

    assert isinstance(nova, tuple)
    assert store.orders == nova
    assert [o['id'] for o in store.orders] == ['OS-24002', 'OS-24001']
    assert antes == ({'id': 'OS-24001'},)


def test_collections_are_immutable_tuples():
    store = EntityStore(tasks=[{'id': 1}])
    with pytest.raises(AttributeError):
        store.tasks.append({'id': 2})


def test_unknown_collection_raises_key_error():
    store = EntityStore()
    with pytest.raises(KeyError):
        store.replace('pedidos', [])
    with pytest.raises(KeyError):
        store.get('pedidos')
    with pytest.raises(AttributeError):
        store.pedidos


def test_loader_is_called_once_per_collection():
    chamadas = []

    def loader(nome):
        chamadas.append(nome)
        return [{'id': 1}]

    store = EntityStore(loader=loader)
    assert not store.loaded('assets')
    assert store.assets == ({'id': 1},)
    assert store.assets == ({'id': 1},)
    assert store.loaded('assets')
    assert chamadas == ['assets']


def test_collection_without_loader_starts_empty():
    assert EntityStore().notifications == ()
