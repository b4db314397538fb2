# infra_app/blueprints/tarefas.py
from flask import Blueprint, g, jsonify

from ..auth import escrita_required, login_required
from ..constants import PRIORIDADES_TAREFA
from ..errors import ErroNaoEncontrado
from ..extensions import db
from ..formatacao import agora_iso
from ..models import TarefaPessoal
from ..serializers import serialize_tarefa
from ..utils import carregar_store, escolher, exigir_campos, ler_json
from ..visibilidade import visible_tasks

tarefas_bp = Blueprint('tarefas', __name__, url_prefix='/api/tarefas')


def _buscar_tarefa(tarefa_id):
    if not any(t['id'] == tarefa_id for t in visible_tasks(carregar_store().tasks, g.ator)):
        raise ErroNaoEncontrado('Tarefa não encontrada.')
    return db.session.get(TarefaPessoal, tarefa_id)


@tarefas_bp.route('', methods=['GET'])
@login_required
def listar_tarefas():
    return jsonify(visible_tasks(carregar_store().tasks, g.ator))


@tarefas_bp.route('', methods=['POST'])
@escrita_required
def criar_tarefa():
    dados = ler_json()
    exigir_campos(dados, 'title')
    tarefa = TarefaPessoal(
        user_id=g.ator['id'],
        title=dados['title'].strip(),
        description=dados.get('description'),
        due_date=dados.get('due_date'),
        completed=False,
        priority=escolher(dados.get('priority'), PRIORIDADES_TAREFA, 'priority', 'medium'),
        linked_os_id=dados.get('linked_os_id'),
        created_at=agora_iso(),
    )
    db.session.add(tarefa)
    db.session.commit()
    return jsonify(serialize_tarefa(tarefa)), 201


@tarefas_bp.route('/<int:tarefa_id>', methods=['PUT'])
@escrita_required
def editar_tarefa(tarefa_id):
    dados = ler_json()
    tarefa = _buscar_tarefa(tarefa_id)
    if 'title' in dados:
        exigir_campos(dados, 'title')
        tarefa.title = dados['title'].strip()
    tarefa.description = dados.get('description', tarefa.description)
    tarefa.due_date = dados.get('due_date', tarefa.due_date)
    tarefa.linked_os_id = dados.get('linked_os_id', tarefa.linked_os_id)
    if 'priority' in dados:
        tarefa.priority = escolher(dados['priority'], PRIORIDADES_TAREFA, 'priority')
    if 'completed' in dados:
        tarefa.completed = bool(dados['completed'])
    db.session.commit()
    return jsonify(serialize_tarefa(tarefa))


@tarefas_bp.route('/<int:tarefa_id>/toggle', methods=['POST'])
@escrita_required
def alternar_tarefa(tarefa_id):
    tarefa = _buscar_tarefa(tarefa_id)
    tarefa.completed = not tarefa.completed
    db.session.commit()
    return jsonify(serialize_tarefa(tarefa))


@tarefas_bp.route('/<int:tarefa_id>', methods=['DELETE'])
@escrita_required
def deletar_tarefa(tarefa_id):
    tarefa = _buscar_tarefa(tarefa_id)
    db.session.delete(tarefa)
    db.session.commit()
    return jsonify({'status': 'success'})
