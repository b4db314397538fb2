# infra_app/blueprints/despesas.py
import logging

from flask import Blueprint, Response, g, jsonify

from ..auth import admin_required, escrita_required, login_required
from ..constants import CATEGORIAS_DESPESA, FORMAS_PAGAMENTO, NOTIF_FINANCEIRO, UNIDADES
from ..errors import ErroConflito, ErroNaoEncontrado, ErroPermissao, ErroValidacao
from ..exportacao import itens_pagamento, to_payment_schedule_report
from ..extensions import db
from ..formatacao import agora_iso, formatar_moeda
from ..models import Despesa
from ..serializers import serialize_despesa
from ..utils import (
    carregar_store, como_dict, como_lista, escolher, exigir_campos, ler_json, parse_numero,
    proximo_codigo, registrar_notificacao,
)
from ..visibilidade import visible_expenses, visible_orders

logger = logging.getLogger(__name__)

despesas_bp = Blueprint('despesas', __name__, url_prefix='/api/despesas')


def _despesas_visiveis():
    store = carregar_store()
    ordens = visible_orders(store.orders, g.ator)
    return visible_expenses(store.expenses, ordens, g.ator), ordens


def _validar_vinculo(os_id, ordens_visiveis):
    """
    Usuário comum só lança despesa em OS que ele enxerga; sem OS a despesa
    ficaria invisível para ele mesmo.
    """
    if not os_id:
        if not g.ator['is_admin']:
            raise ErroPermissao('Vincule a despesa a uma de suas OS.')
        return None
    ordem = next((o for o in ordens_visiveis if o['id'] == os_id), None)
    if not ordem:
        if g.ator['is_admin']:
            raise ErroValidacao(f"OS vinculada não encontrada: {os_id}")
        raise ErroPermissao('OS vinculada não encontrada ou sem permissão de acesso.')
    if ordem['archived']:
        raise ErroConflito(f"A {os_id} está arquivada e não pode receber despesas.")
    return ordem


def _meses(valor, campo):
    if valor in (None, ''):
        return 0
    meses = parse_numero(valor, campo)
    if meses < 0:
        raise ErroValidacao(f"Valor inválido para {campo}.")
    return int(meses)


@despesas_bp.route('', methods=['GET'])
@login_required
def listar_despesas():
    despesas, _ = _despesas_visiveis()
    return jsonify(despesas)


@despesas_bp.route('', methods=['POST'])
@escrita_required
def criar_despesa():
    dados = ler_json()
    exigir_campos(dados, 'item', 'value', numericos=('value',))
    _, ordens = _despesas_visiveis()
    ordem = _validar_vinculo(dados.get('linked_os_id'), ordens)

    unidade = dados.get('unit') or (ordem['unit'] if ordem else None)
    agora = agora_iso()
    nova_despesa = Despesa(
        id=proximo_codigo(Despesa, 'FIN'),
        item=dados['item'].strip(),
        value=parse_numero(dados['value'], 'value'),
        date=dados.get('date') or agora,
        supplier=dados.get('supplier') or '',
        category=escolher(dados.get('category'), CATEGORIAS_DESPESA, 'category', 'Outros'),
        payment_method=escolher(dados.get('payment_method'), FORMAS_PAGAMENTO, 'payment_method', 'Pix'),
        warranty_parts_months=_meses(dados.get('warranty_parts_months'), 'warranty_parts_months'),
        warranty_service_months=_meses(dados.get('warranty_service_months'), 'warranty_service_months'),
        linked_os_id=ordem['id'] if ordem else None,
        unit=escolher(unidade, UNIDADES, 'unit'),
        payment_data=como_dict(dados.get('payment_data'), 'payment_data'),
        created_at=agora,
    )
    db.session.add(nova_despesa)
    db.session.commit()
    logger.info("Despesa %s (%s) registrada por %s", nova_despesa.id, nova_despesa.value, g.ator['email'])

    registrar_notificacao(
        NOTIF_FINANCEIRO, 'Novo Gasto Registrado',
        f"{formatar_moeda(nova_despesa.value)} em {nova_despesa.category} por {g.ator['name']}.",
        link_id=nova_despesa.id, ator=g.ator,
    )
    return jsonify(serialize_despesa(nova_despesa)), 201


@despesas_bp.route('/<string:despesa_id>', methods=['PUT'])
@escrita_required
def editar_despesa(despesa_id):
    dados = ler_json()
    despesas, ordens = _despesas_visiveis()
    if not any(e['id'] == despesa_id for e in despesas):
        raise ErroNaoEncontrado('Despesa não encontrada ou sem permissão de acesso.')
    despesa = db.session.get(Despesa, despesa_id)

    if 'linked_os_id' in dados and dados['linked_os_id'] != despesa.linked_os_id:
        ordem = _validar_vinculo(dados['linked_os_id'], ordens)
        despesa.linked_os_id = ordem['id'] if ordem else None
    if 'item' in dados:
        exigir_campos(dados, 'item')
        despesa.item = dados['item'].strip()
    if 'value' in dados:
        despesa.value = parse_numero(dados['value'], 'value')
    despesa.date = dados.get('date') or despesa.date
    despesa.supplier = dados.get('supplier', despesa.supplier)
    if 'category' in dados:
        despesa.category = escolher(dados['category'], CATEGORIAS_DESPESA, 'category')
    if 'payment_method' in dados:
        despesa.payment_method = escolher(dados['payment_method'], FORMAS_PAGAMENTO, 'payment_method')
    if 'unit' in dados:
        despesa.unit = escolher(dados['unit'], UNIDADES, 'unit')
    for campo in ('warranty_parts_months', 'warranty_service_months'):
        if campo in dados:
            setattr(despesa, campo, _meses(dados[campo], campo))
    if 'payment_data' in dados:
        despesa.payment_data = como_dict(dados['payment_data'], 'payment_data')

    db.session.commit()
    return jsonify(serialize_despesa(despesa))


@despesas_bp.route('/<string:despesa_id>', methods=['DELETE'])
@admin_required
def deletar_despesa(despesa_id):
    despesa = db.session.get(Despesa, despesa_id)
    if not despesa:
        raise ErroNaoEncontrado('Despesa não encontrada.')
    db.session.delete(despesa)
    db.session.commit()
    logger.info("Despesa %s excluída por %s", despesa_id, g.ator['email'])
    return jsonify({'status': 'success'})


@despesas_bp.route('/ordem-pagamento', methods=['POST'])
@login_required
def ordem_pagamento():
    """
    Gera a Ordem de Pagamento Semanal das despesas selecionadas.

    Corpo: ``{"ids": [...], "ajustes": {id: {"bank_details", "obs"}},
    "salvar_dados_bancarios": bool}``. Com ``salvar_dados_bancarios`` a
    chave Pix informada é gravada em ``payment_data`` da despesa.
    """
    dados = ler_json()
    ids = como_lista(dados.get('ids'), 'ids')
    ajustes = como_dict(dados.get('ajustes'), 'ajustes')
    if not all(isinstance(a, dict) for a in ajustes.values()):
        raise ErroValidacao('Valor inválido para ajustes: cada ajuste deve ser um objeto.')

    despesas, _ = _despesas_visiveis()
    selecionadas = [e for e in despesas if e['id'] in ids]
    if not selecionadas:
        raise ErroValidacao('Selecione ao menos uma despesa visível para a ordem de pagamento.')

    itens = itens_pagamento(selecionadas, ajustes)

    if dados.get('salvar_dados_bancarios'):
        if g.ator['is_guest']:
            raise ErroPermissao('Acesso de convidado é somente leitura.')
        for item in itens:
            if item['bank_details']:
                despesa = db.session.get(Despesa, item['id'])
                despesa.payment_data = {**(despesa.payment_data or {}), 'pix_key': item['bank_details']}
        db.session.commit()

    html = to_payment_schedule_report(itens, g.ator['name'], auto_print=dados.get('auto_print', True))
    return Response(html, mimetype='text/html')
