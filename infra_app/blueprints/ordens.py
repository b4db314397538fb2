# infra_app/blueprints/ordens.py
import logging
import uuid

from flask import Blueprint, g, jsonify, request

from ..auth import escrita_required, login_required
from ..constants import (
    NOTIF_NOVA_OS, NOTIF_OS_CONCLUIDA, OS_ABERTA, OS_CONCLUIDA, PRIORIDADES_OS,
    PRIORIDADE_OS_PADRAO, STATUS_OS, TIPOS_OS, TIPO_OS_PADRAO, UNIDADES,
)
from ..errors import ErroConflito, ErroNaoEncontrado, ErroPermissao, ErroValidacao
from ..extensions import db
from ..formatacao import agora_iso
from ..models import OrdemServico, Usuario
from ..serializers import serialize_ordem
from ..utils import (
    carregar_store, escolher, exigir_campos, ler_json, proximo_codigo, registrar_notificacao,
)
from ..visibilidade import owner_for_new_order, visible_expenses, visible_orders

logger = logging.getLogger(__name__)

ordens_bp = Blueprint('ordens', __name__, url_prefix='/api/ordens')


def _entrada_historico(mensagem):
    return {'id': uuid.uuid4().hex, 'date': agora_iso(), 'message': mensagem}


def _registrar_historico(ordem, mensagem):
    # O histórico só cresce, sempre pelo início
    ordem.history = [_entrada_historico(mensagem)] + list(ordem.history or [])


def _buscar_ordem(os_id, para_edicao=False):
    """
    Carrega a OS se ela estiver entre as visíveis ao usuário. OS de outro
    dono responde como inexistente. OS arquivada não aceita alterações.
    """
    visiveis = visible_orders(carregar_store().orders, g.ator)
    if not any(o['id'] == os_id for o in visiveis):
        raise ErroNaoEncontrado('OS não encontrada ou sem permissão de acesso.')
    ordem = db.session.get(OrdemServico, os_id)
    if para_edicao and ordem.archived:
        raise ErroConflito(f"A {os_id} está arquivada e não pode ser alterada.")
    return ordem


def _validar_responsavel(owner_id):
    if not isinstance(owner_id, str) or not db.session.get(Usuario, owner_id):
        raise ErroValidacao('Responsável informado não existe.')
    return owner_id


def _aplicar_status(ordem, novo_status):
    """Troca o status registrando no histórico. Retorna True quando a OS foi concluída agora."""
    novo_status = escolher(novo_status, STATUS_OS, 'status')
    if novo_status == ordem.status:
        return False
    ordem.status = novo_status
    _registrar_historico(ordem, f"Status alterado para: {novo_status} ({g.ator['name']})")
    if novo_status == OS_CONCLUIDA:
        ordem.date_closed = agora_iso()
        return True
    ordem.date_closed = None
    return False


def _notificar_conclusao(ordem):
    registrar_notificacao(
        NOTIF_OS_CONCLUIDA, 'OS Concluída', f"{g.ator['name']} concluiu a {ordem.id}.",
        link_id=ordem.id, ator=g.ator,
    )


@ordens_bp.route('', methods=['GET'])
@login_required
def listar_ordens():
    ordens = visible_orders(carregar_store().orders, g.ator)
    arquivadas = request.args.get('arquivadas')
    if arquivadas is not None:
        incluir = arquivadas in ('1', 'true')
        ordens = [o for o in ordens if o['archived'] == incluir]
    return jsonify(ordens)


@ordens_bp.route('/<string:os_id>', methods=['GET'])
@login_required
def obter_ordem(os_id):
    store = carregar_store()
    ordens = visible_orders(store.orders, g.ator)
    ordem = next((o for o in ordens if o['id'] == os_id), None)
    if not ordem:
        raise ErroNaoEncontrado('OS não encontrada ou sem permissão de acesso.')
    despesas = [e for e in visible_expenses(store.expenses, ordens, g.ator) if e['linked_os_id'] == os_id]
    return jsonify({**ordem, 'expenses': despesas})


@ordens_bp.route('', methods=['POST'])
@escrita_required
def criar_ordem():
    dados = ler_json()
    exigir_campos(dados, 'title', 'unit')
    ator = g.ator

    owner_id = owner_for_new_order(dados.get('owner_id'), ator)
    if owner_id != ator['id']:
        _validar_responsavel(owner_id)

    status = escolher(dados.get('status'), STATUS_OS, 'status', OS_ABERTA)
    agora = agora_iso()
    nova_ordem = OrdemServico(
        id=proximo_codigo(OrdemServico, 'OS'),
        title=dados['title'].strip(),
        description=dados.get('description') or '',
        unit=escolher(dados['unit'], UNIDADES, 'unit'),
        status=status,
        priority=escolher(dados.get('priority'), PRIORIDADES_OS, 'priority', PRIORIDADE_OS_PADRAO),
        type=escolher(dados.get('type'), TIPOS_OS, 'type', TIPO_OS_PADRAO),
        owner_id=owner_id,
        date_opened=agora,
        date_forecast=dados.get('date_forecast'),
        date_closed=agora if status == OS_CONCLUIDA else None,
        history=[_entrada_historico(f"OS aberta por {ator['name']}")],
        archived=False,
    )
    db.session.add(nova_ordem)
    db.session.commit()
    logger.info("%s criada por %s (responsável %s)", nova_ordem.id, ator['email'], owner_id)

    registrar_notificacao(
        NOTIF_NOVA_OS, 'Nova Ordem de Serviço',
        f"{ator['name']} criou a {nova_ordem.id} em {nova_ordem.unit}.",
        link_id=nova_ordem.id, ator=ator,
    )
    return jsonify(serialize_ordem(nova_ordem)), 201


@ordens_bp.route('/<string:os_id>', methods=['PUT'])
@escrita_required
def editar_ordem(os_id):
    dados = ler_json()
    ordem = _buscar_ordem(os_id, para_edicao=True)

    novo_dono = dados.get('owner_id')
    if novo_dono and novo_dono != ordem.owner_id:
        if not g.ator['is_admin']:
            raise ErroPermissao('Apenas administradores podem delegar uma OS.')
        ordem.owner_id = _validar_responsavel(novo_dono)
        _registrar_historico(ordem, f"OS delegada por {g.ator['name']}")

    if 'title' in dados:
        exigir_campos(dados, 'title')
        ordem.title = dados['title'].strip()
    ordem.description = dados.get('description', ordem.description)
    if 'unit' in dados:
        ordem.unit = escolher(dados['unit'], UNIDADES, 'unit')
    if 'priority' in dados:
        ordem.priority = escolher(dados['priority'], PRIORIDADES_OS, 'priority')
    if 'type' in dados:
        ordem.type = escolher(dados['type'], TIPOS_OS, 'type')
    ordem.date_forecast = dados.get('date_forecast', ordem.date_forecast)

    concluida = 'status' in dados and _aplicar_status(ordem, dados['status'])

    db.session.commit()
    if concluida:
        _notificar_conclusao(ordem)
    return jsonify(serialize_ordem(ordem))


@ordens_bp.route('/<string:os_id>/status', methods=['PUT'])
@escrita_required
def atualizar_status(os_id):
    dados = ler_json()
    ordem = _buscar_ordem(os_id, para_edicao=True)
    status_antigo = ordem.status

    concluida = _aplicar_status(ordem, dados.get('status'))
    db.session.commit()
    logger.info("%s: status %s -> %s por %s", os_id, status_antigo, ordem.status, g.ator['email'])

    if concluida:
        _notificar_conclusao(ordem)
    return jsonify(serialize_ordem(ordem))


@ordens_bp.route('/<string:os_id>/historico', methods=['POST'])
@escrita_required
def adicionar_historico(os_id):
    dados = ler_json()
    exigir_campos(dados, 'message')
    ordem = _buscar_ordem(os_id, para_edicao=True)
    _registrar_historico(ordem, f"{dados['message'].strip()} ({g.ator['name']})")
    db.session.commit()
    return jsonify(serialize_ordem(ordem)), 201


@ordens_bp.route('/<string:os_id>/arquivar', methods=['POST'])
@escrita_required
def arquivar_ordem(os_id):
    ordem = _buscar_ordem(os_id, para_edicao=True)
    ordem.archived = True
    _registrar_historico(ordem, f"OS Documentada e Arquivada por {g.ator['name']}")
    db.session.commit()
    logger.info("%s arquivada por %s", os_id, g.ator['email'])
    return jsonify(serialize_ordem(ordem))
