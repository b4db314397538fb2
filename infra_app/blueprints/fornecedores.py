# infra_app/blueprints/fornecedores.py
from flask import Blueprint, jsonify

from ..auth import admin_required, login_required
from ..errors import ErroConflito, ErroNaoEncontrado
from ..extensions import db
from ..models import Fornecedor
from ..serializers import serialize_fornecedor
from ..utils import carregar_store, exigir_campos, ler_json

fornecedores_bp = Blueprint('fornecedores', __name__, url_prefix='/api/fornecedores')


def _nome_em_uso(nome, ignorar_id=None):
    nome = nome.strip().casefold()
    return any(
        f['name'].strip().casefold() == nome and f['id'] != ignorar_id
        for f in carregar_store().suppliers
    )


@fornecedores_bp.route('', methods=['GET'])
@login_required
def listar_fornecedores():
    return jsonify(list(carregar_store().suppliers))


@fornecedores_bp.route('', methods=['POST'])
@admin_required
def criar_fornecedor():
    dados = ler_json()
    exigir_campos(dados, 'name')
    if _nome_em_uso(dados['name']):
        raise ErroConflito('Já existe um fornecedor com este nome.')

    fornecedor = Fornecedor(
        name=dados['name'].strip(),
        category=dados.get('category') or '',
        contact_info=dados.get('contact_info') or '',
    )
    db.session.add(fornecedor)
    db.session.commit()
    return jsonify(serialize_fornecedor(fornecedor)), 201


@fornecedores_bp.route('/<int:fornecedor_id>', methods=['PUT'])
@admin_required
def editar_fornecedor(fornecedor_id):
    dados = ler_json()
    fornecedor = db.session.get(Fornecedor, fornecedor_id)
    if not fornecedor:
        raise ErroNaoEncontrado('Fornecedor não encontrado.')

    if 'name' in dados:
        exigir_campos(dados, 'name')
        if _nome_em_uso(dados['name'], ignorar_id=fornecedor_id):
            raise ErroConflito('Já existe um fornecedor com este nome.')
        fornecedor.name = dados['name'].strip()
    fornecedor.category = dados.get('category', fornecedor.category)
    fornecedor.contact_info = dados.get('contact_info', fornecedor.contact_info)

    db.session.commit()
    return jsonify(serialize_fornecedor(fornecedor))


@fornecedores_bp.route('/<int:fornecedor_id>', methods=['DELETE'])
@admin_required
def deletar_fornecedor(fornecedor_id):
    fornecedor = db.session.get(Fornecedor, fornecedor_id)
    if not fornecedor:
        raise ErroNaoEncontrado('Fornecedor não encontrado.')
    db.session.delete(fornecedor)
    db.session.commit()
    return jsonify({'status': 'success'})
