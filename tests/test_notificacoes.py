import pytest

from infra_app.notificacoes import emit, mark_read
from infra_app.store import EntityStore


@pytest.fixture
def store():
    return EntityStore(notifications=[
        {'id': 'n-antiga', 'type': 'other', 'title': 'Aviso', 'message': 'Teste', 'link_id': None,
         'date': '2024-01-01T09:00:00-03:00', 'read': False, 'user_initials': 'AL'},
    ])


def test_emit_prepends_unread_notification(store):
    anterior = store.notifications

    notificacao = emit(store, 'new_os', 'Nova Ordem de Serviço', 'Bruno Costa criou a OS-24001 em Aldeota.',
                       link_id='OS-24001', actor_initials='BC')

    assert store.notifications[0] == notificacao
    assert len(store.notifications) == 2
    assert notificacao['read'] is False
    assert notificacao['type'] == 'new_os'
    assert notificacao['link_id'] == 'OS-24001'
    assert notificacao['user_initials'] == 'BC'
    assert notificacao['id'].startswith('notif-')
    assert notificacao['date']
    # a coleção anterior segue intacta
    assert anterior == store.notifications[1:]


def test_emit_generates_unique_ids(store):
    ids = {emit(store, 'other', 'T', 'M')['id'] for _ in range(20)}
    assert len(ids) == 20


def test_emit_rejects_unknown_kind(store):
    with pytest.raises(ValueError):
        emit(store, 'urgente', 'T', 'M')
    assert len(store.notifications) == 1


def test_mark_read_single_id_only_flips_that_one(store):
    nova = emit(store, 'finance', 'Novo Gasto Registrado', 'R$ 10,00 em Peças por Ana Lima.')
    original = store.notifications[1]

    alteradas = mark_read(store, nova['id'])

    assert alteradas == [nova['id']]
    estados = {n['id']: n['read'] for n in store.notifications}
    assert estados == {nova['id']: True, 'n-antiga': False}
    # o registro anterior não é alterado no lugar
    assert nova['read'] is False
    assert original['read'] is False


def test_mark_read_without_id_flips_all(store):
    emit(store, 'other', 'T', 'M')
    alteradas = mark_read(store)
    assert len(alteradas) == 2
    assert all(n['read'] for n in store.notifications)


def test_mark_read_unknown_id_is_noop(store):
    antes = store.notifications
    assert mark_read(store, 'nao-existe') == []
    assert store.notifications is antes


def test_mark_read_is_idempotent(store):
    mark_read(store)
    assert mark_read(store) == []
