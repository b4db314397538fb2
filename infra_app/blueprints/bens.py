# infra_app/blueprints/bens.py
import logging

from flask import Blueprint, Response, g, jsonify, request

from ..auth import admin_required, escrita_required, login_required
from ..constants import BEM_ATIVO, BEM_EM_MANUTENCAO, STATUS_BEM, UNIDADES
from ..errors import ErroConflito, ErroNaoEncontrado, ErroValidacao
from ..exportacao import export_filename, filter_assets, to_csv, to_printable_report
from ..extensions import db
from ..formatacao import agora_iso
from ..importacao import NOME_MODELO_IMPORTACAO, import_template, parse_asset_import
from ..models import Bem
from ..serializers import serialize_bem, serialize_manutencao
from ..utils import (
    carregar_store, como_dict, como_lista, escolher, exigir_campos, ler_json, parse_numero,
)

logger = logging.getLogger(__name__)

bens_bp = Blueprint('bens', __name__, url_prefix='/api/bens')


def _buscar_bem(bem_id):
    bem = db.session.get(Bem, bem_id)
    if not bem:
        raise ErroNaoEncontrado('Bem não encontrado.')
    return bem


def _tag_em_uso(tag, ignorar_id=None):
    return any(a['asset_tag'] == tag and a['id'] != ignorar_id for a in carregar_store().assets)


def _categoria(valor):
    categorias = carregar_store().categories
    return escolher(valor, categorias, 'category')


def _filtros_exportacao(args):
    """Filtros da exportação vindos da query string (listas repetem a chave)."""
    return {
        'data_inicio': args.get('data_inicio'),
        'data_fim': args.get('data_fim'),
        'unidades': args.getlist('unidade'),
        'status': args.getlist('status'),
        'categorias': args.getlist('categoria'),
    }


@bens_bp.route('', methods=['GET'])
@login_required
def listar_bens():
    bens = carregar_store().assets
    busca = (request.args.get('busca') or '').strip().casefold()
    if busca:
        bens = [
            b for b in bens
            if busca in b['name'].casefold() or busca in b['asset_tag'].casefold()
            or busca in (b['brand'] or '').casefold()
        ]
    for campo, chave in (('status', 'status'), ('category', 'categoria'), ('unit', 'unidade')):
        valor = request.args.get(chave)
        if valor:
            bens = [b for b in bens if b[campo] == valor]
    return jsonify(list(bens))


@bens_bp.route('/<int:bem_id>', methods=['GET'])
@login_required
def obter_bem(bem_id):
    bem = _buscar_bem(bem_id)
    manutencoes = sorted(bem.manutencoes, key=lambda m: m.date_out, reverse=True)
    return jsonify({**serialize_bem(bem), 'maintenance': [serialize_manutencao(m) for m in manutencoes]})


@bens_bp.route('', methods=['POST'])
@escrita_required
def criar_bem():
    dados = ler_json()
    exigir_campos(dados, 'asset_tag', 'name', 'category', 'unit')
    tag = dados['asset_tag'].strip()
    if _tag_em_uso(tag):
        raise ErroConflito(f"Já existe um bem com o patrimônio {tag}.")

    status = escolher(dados.get('status'), STATUS_BEM, 'status', BEM_ATIVO)
    if status == BEM_EM_MANUTENCAO:
        raise ErroConflito('Um bem só entra em manutenção por um registro de manutenção.')

    bem = Bem(
        asset_tag=tag,
        name=dados['name'].strip(),
        category=_categoria(dados['category']),
        unit=escolher(dados['unit'], UNIDADES, 'unit'),
        brand=dados.get('brand') or '',
        model=dados.get('model') or '',
        description=dados.get('description') or '',
        value=parse_numero(dados.get('value') or 0, 'value'),
        status=status,
        registration_date=dados.get('registration_date') or agora_iso(),
        warranty=como_dict(dados.get('warranty'), 'warranty') or {'has_warranty': False},
        invoice_info=como_dict(dados.get('invoice_info'), 'invoice_info'),
        photo_url=dados.get('photo_url'),
        linked_os_ids=como_lista(dados.get('linked_os_ids'), 'linked_os_ids'),
    )
    db.session.add(bem)
    db.session.commit()
    logger.info("Bem %s cadastrado por %s", bem.asset_tag, g.ator['email'])
    return jsonify(serialize_bem(bem)), 201


@bens_bp.route('/<int:bem_id>', methods=['PUT'])
@escrita_required
def editar_bem(bem_id):
    dados = ler_json()
    bem = _buscar_bem(bem_id)

    if 'status' in dados and dados['status'] != bem.status:
        novo_status = escolher(dados['status'], STATUS_BEM, 'status')
        if novo_status == BEM_EM_MANUTENCAO:
            raise ErroConflito('Um bem só entra em manutenção por um registro de manutenção.')
        if bem.status == BEM_EM_MANUTENCAO:
            raise ErroConflito('Registre o retorno da manutenção para liberar o bem.')
        bem.status = novo_status

    if 'asset_tag' in dados:
        exigir_campos(dados, 'asset_tag')
        tag = dados['asset_tag'].strip()
        if _tag_em_uso(tag, ignorar_id=bem_id):
            raise ErroConflito(f"Já existe um bem com o patrimônio {tag}.")
        bem.asset_tag = tag
    if 'name' in dados:
        exigir_campos(dados, 'name')
        bem.name = dados['name'].strip()
    if 'category' in dados:
        bem.category = _categoria(dados['category'])
    if 'unit' in dados:
        bem.unit = escolher(dados['unit'], UNIDADES, 'unit')
    if 'value' in dados:
        bem.value = parse_numero(dados['value'] or 0, 'value')
    for campo in ('brand', 'model', 'description', 'photo_url', 'registration_date'):
        if campo in dados:
            setattr(bem, campo, dados[campo])
    for campo in ('warranty', 'invoice_info'):
        if campo in dados:
            setattr(bem, campo, como_dict(dados[campo], campo))
    if 'linked_os_ids' in dados:
        bem.linked_os_ids = como_lista(dados['linked_os_ids'], 'linked_os_ids')

    db.session.commit()
    return jsonify(serialize_bem(bem))


@bens_bp.route('/<int:bem_id>', methods=['DELETE'])
@admin_required
def deletar_bem(bem_id):
    bem = _buscar_bem(bem_id)
    db.session.delete(bem)
    db.session.commit()
    logger.info("Bem %s excluído por %s", bem.asset_tag, g.ator['email'])
    return jsonify({'status': 'success'})


@bens_bp.route('/<int:bem_id>/transferir', methods=['POST'])
@escrita_required
def transferir_bem(bem_id):
    dados = ler_json()
    bem = _buscar_bem(bem_id)
    destino = escolher(dados.get('unit'), UNIDADES, 'unit')
    if destino == bem.unit:
        raise ErroValidacao(f"O bem já está na unidade {destino}.")

    origem = bem.unit
    bem.unit = destino
    db.session.commit()
    logger.info("Bem %s transferido de %s para %s por %s", bem.asset_tag, origem, destino, g.ator['email'])
    return jsonify(serialize_bem(bem))


@bens_bp.route('/importar', methods=['POST'])
@escrita_required
def importar_bens():
    """
    Importa bens de um CSV enviado como arquivo (campo ``arquivo``) ou como
    texto (``{"texto": ...}``). Patrimônios já cadastrados, ou repetidos no
    próprio arquivo, são ignorados; o restante é gravado em um único lote.
    """
    arquivo = request.files.get('arquivo')
    if arquivo:
        try:
            texto = arquivo.read().decode('utf-8-sig')
        except UnicodeDecodeError:
            raise ErroValidacao('O arquivo deve estar codificado em UTF-8.')
    else:
        texto = ler_json().get('texto') or ''
        if not isinstance(texto, str):
            raise ErroValidacao('O campo texto deve conter o CSV como texto.')

    store = carregar_store()
    resultado = parse_asset_import(texto, categories=store.categories)
    if resultado.errors:
        raise ErroValidacao(resultado.errors[0])

    existentes = {a['asset_tag'] for a in store.assets}
    novos, ignorados = [], []
    for registro in resultado.assets:
        if registro['asset_tag'] in existentes:
            ignorados.append(registro['asset_tag'])
            continue
        existentes.add(registro['asset_tag'])
        novos.append(Bem(**registro))

    db.session.add_all(novos)
    db.session.commit()
    store.replace('assets', store.assets + tuple(serialize_bem(b) for b in novos))
    logger.info("Importação de bens por %s: %s gravado(s), %s ignorado(s)", g.ator['email'], len(novos), len(ignorados))

    return jsonify({
        'importados': len(novos),
        'ignorados': ignorados,
        'assets': [serialize_bem(b) for b in novos],
    }), 201


@bens_bp.route('/modelo-importacao', methods=['GET'])
@login_required
def modelo_importacao():
    return Response(
        import_template(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={NOME_MODELO_IMPORTACAO}'},
    )


@bens_bp.route('/exportar.csv', methods=['GET'])
@login_required
def exportar_csv():
    bens = filter_assets(carregar_store().assets, _filtros_exportacao(request.args))
    return Response(
        to_csv(bens),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={export_filename()}'},
    )


@bens_bp.route('/relatorio', methods=['GET'])
@login_required
def relatorio_bens():
    filtros = _filtros_exportacao(request.args)
    bens = filter_assets(carregar_store().assets, filtros)
    html = to_printable_report(bens, filtros, auto_print=request.args.get('imprimir', '1') != '0')
    return Response(html, mimetype='text/html')
