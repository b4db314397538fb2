from datetime import date
from urllib.parse import quote

from infra_app.blueprints.relatorios import resumo_dashboard


# --- Categorias ---

def test_categories_seeded(tecnico):
    categorias = tecnico.get('/api/categorias').get_json()
    assert 'TI / Informática' in categorias
    assert 'Outros' in categorias


def test_admin_adds_category_without_duplicates(admin, tecnico):
    assert admin.post('/api/categorias', json={'name': 'Climatização'}).status_code == 201
    assert admin.post('/api/categorias', json={'name': 'climatização '}).status_code == 409
    assert tecnico.post('/api/categorias', json={'name': 'Ferramentas'}).status_code == 403
    assert 'Climatização' in tecnico.get('/api/categorias').get_json()


def test_removing_category_moves_assets_to_fallback(admin):
    admin.post('/api/bens', json={'asset_tag': 'MB-1', 'name': 'Geladeira', 'category': 'Refrigeração', 'unit': 'Aldeota'})

    assert admin.delete('/api/categorias/' + quote('Refrigeração')).status_code == 200
    assert 'Refrigeração' not in admin.get('/api/categorias').get_json()
    assert admin.get('/api/bens').get_json()[0]['category'] == 'Outros'

    assert admin.delete('/api/categorias/Outros').status_code == 409
    assert admin.delete('/api/categorias/Inexistente').status_code == 404


def test_category_with_slash_can_be_removed(admin):
    assert admin.delete('/api/categorias/' + quote('TI / Informática')).status_code == 200


# --- Notificações ---

def test_mark_single_and_all_read(admin, tecnico, nova_os):
    primeira = nova_os(tecnico)
    nova_os(tecnico)
    notificacoes = tecnico.get('/api/notificacoes').get_json()
    alvo = [n for n in notificacoes if n['link_id'] == primeira['id']][0]

    resp = tecnico.put(f"/api/notificacoes/{alvo['id']}/read")
    assert resp.get_json()['alteradas'] == [alvo['id']]
    estados = {n['id']: n['read'] for n in tecnico.get('/api/notificacoes').get_json()}
    assert estados[alvo['id']] is True
    assert list(estados.values()).count(False) == 1

    assert len(tecnico.get('/api/notificacoes?nao_lidas=1').get_json()) == 1
    tecnico.post('/api/notificacoes/marcar-lidas')
    assert tecnico.get('/api/notificacoes?nao_lidas=1').get_json() == []


def test_regular_user_mark_all_skips_finance(admin, tecnico, nova_os):
    ordem = nova_os(tecnico)
    tecnico.post('/api/despesas', json={'item': 'Peça', 'value': 10, 'linked_os_id': ordem['id']})

    tecnico.post('/api/notificacoes/marcar-lidas')

    pendentes = admin.get('/api/notificacoes?nao_lidas=1').get_json()
    assert [n['type'] for n in pendentes] == ['finance']


def test_hidden_notification_cannot_be_marked(admin, tecnico, nova_os):
    ordem = nova_os(tecnico)
    tecnico.post('/api/despesas', json={'item': 'Peça', 'value': 10, 'linked_os_id': ordem['id']})
    financeira = admin.get('/api/notificacoes').get_json()[0]
    assert tecnico.put(f"/api/notificacoes/{financeira['id']}/read").status_code == 404
    assert tecnico.put('/api/notificacoes/nao-existe/read').status_code == 404


# --- Tarefas ---

def test_tasks_are_personal(admin, tecnico, outro_tecnico, tecnico_id):
    resp = tecnico.post('/api/tarefas', json={'title': 'Ligar para o fornecedor', 'priority': 'high'})
    assert resp.status_code == 201
    tarefa = resp.get_json()
    assert tarefa['user_id'] == tecnico_id
    assert tarefa['completed'] is False

    assert outro_tecnico.get('/api/tarefas').get_json() == []
    assert outro_tecnico.post(f"/api/tarefas/{tarefa['id']}/toggle").status_code == 404
    assert len(admin.get('/api/tarefas').get_json()) == 1

    assert tecnico.post(f"/api/tarefas/{tarefa['id']}/toggle").get_json()['completed'] is True
    assert tecnico.put(f"/api/tarefas/{tarefa['id']}", json={'priority': 'urgente'}).status_code == 400
    assert tecnico.delete(f"/api/tarefas/{tarefa['id']}").status_code == 200
    assert tecnico.get('/api/tarefas').get_json() == []


# --- Fornecedores ---

def test_suppliers_admin_only_writes(admin, tecnico):
    resp = admin.post('/api/fornecedores', json={'name': 'Frio Norte', 'category': 'Refrigeração'})
    assert resp.status_code == 201
    fornecedor = resp.get_json()

    assert admin.post('/api/fornecedores', json={'name': 'frio norte'}).status_code == 409
    assert tecnico.post('/api/fornecedores', json={'name': 'Outro'}).status_code == 403
    assert tecnico.put(f"/api/fornecedores/{fornecedor['id']}", json={'name': 'X'}).status_code == 403
    assert [f['name'] for f in tecnico.get('/api/fornecedores').get_json()] == ['Frio Norte']

    assert admin.delete(f"/api/fornecedores/{fornecedor['id']}").status_code == 200
    assert tecnico.get('/api/fornecedores').get_json() == []


# --- Relatórios ---

def test_dashboard_summary_counts():
    ordens = [
        {'status': 'Aberta', 'unit': 'Aldeota'},
        {'status': 'Em Andamento', 'unit': 'Aldeota'},
        {'status': 'Aguardando', 'unit': 'Cambeba'},
        {'status': 'Concluída', 'unit': 'Cambeba'},
    ]
    despesas = [
        {'value': 100, 'date': '2024-05-02T10:00:00-03:00', 'unit': 'Aldeota'},
        {'value': 50.5, 'date': '2024-05-20T10:00:00-03:00', 'unit': 'Cambeba'},
        {'value': 999, 'date': '2024-04-20T10:00:00-03:00', 'unit': 'Aldeota'},
    ]
    resumo = resumo_dashboard(ordens, despesas, hoje=date(2024, 5, 25))

    assert resumo['total_abertas'] == 1
    assert resumo['total_em_andamento'] == 2
    assert resumo['total_concluidas'] == 1
    assert resumo['gastos_mes'] == 150.5
    assert resumo['volume_por_unidade']['Aldeota'] == 2
    assert resumo['gastos_por_mes'] == {'2024-04': 999.0, '2024-05': 150.5}

    por_unidade = resumo_dashboard(ordens, despesas, unidade='Cambeba', hoje=date(2024, 5, 25))
    assert por_unidade['gastos_mes'] == 50.5
    assert por_unidade['total_abertas'] == 0


def test_guest_summary_covers_all_records(convidado, tecnico, outro_tecnico, nova_os):
    nova_os(tecnico)
    nova_os(outro_tecnico)

    assert convidado.get('/api/relatorios/resumo').get_json()['total_abertas'] == 2
    assert tecnico.get('/api/relatorios/resumo').get_json()['total_abertas'] == 1
    assert convidado.get('/api/ordens').get_json() == []
