# infra_app/blueprints/categorias.py
import logging

from flask import Blueprint, g, jsonify

from ..auth import admin_required, login_required
from ..constants import CATEGORIAS_BEM_INICIAIS, CATEGORIA_BEM_PADRAO, LISTA_CATEGORIAS_BENS
from ..errors import ErroConflito, ErroNaoEncontrado
from ..extensions import db
from ..models import Bem, ListaDinamica
from ..utils import carregar_store, exigir_campos, ler_json

logger = logging.getLogger(__name__)

categorias_bp = Blueprint('categorias', __name__, url_prefix='/api/categorias')


def garantir_listas_padrao():
    """Cria a lista de categorias de bens com os valores iniciais, se ainda não existir."""
    if ListaDinamica.query.filter_by(nome=LISTA_CATEGORIAS_BENS).first():
        return
    logger.info("Inicializando lista dinâmica: %s", LISTA_CATEGORIAS_BENS)
    db.session.add(ListaDinamica(nome=LISTA_CATEGORIAS_BENS, itens=list(CATEGORIAS_BEM_INICIAIS)))
    try:
        db.session.commit()
    except Exception:
        logger.exception("Erro ao inicializar listas padrão")
        db.session.rollback()


def _lista():
    lista = ListaDinamica.query.filter_by(nome=LISTA_CATEGORIAS_BENS).first()
    if not lista:
        lista = ListaDinamica(nome=LISTA_CATEGORIAS_BENS, itens=[])
        db.session.add(lista)
    return lista


@categorias_bp.route('', methods=['GET'])
@login_required
def listar_categorias():
    return jsonify(list(carregar_store().categories))


@categorias_bp.route('', methods=['POST'])
@admin_required
def adicionar_categoria():
    dados = ler_json()
    exigir_campos(dados, 'name')
    nome = dados['name'].strip()

    lista = _lista()
    if nome.casefold() in {c.casefold() for c in lista.itens}:
        raise ErroConflito(f"A categoria '{nome}' já existe.")
    lista.itens = list(lista.itens) + [nome]
    db.session.commit()
    logger.info("Categoria '%s' adicionada por %s", nome, g.ator['email'])
    return jsonify(lista.itens), 201


@categorias_bp.route('/<path:nome>', methods=['DELETE'])
@admin_required
def remover_categoria(nome):
    """Remove a categoria; os bens que a usavam passam para 'Outros'."""
    if nome == CATEGORIA_BEM_PADRAO:
        raise ErroConflito(f"A categoria '{CATEGORIA_BEM_PADRAO}' não pode ser removida.")
    lista = _lista()
    if nome not in lista.itens:
        raise ErroNaoEncontrado('Categoria não encontrada.')

    lista.itens = [c for c in lista.itens if c != nome]
    if CATEGORIA_BEM_PADRAO not in lista.itens:
        lista.itens = list(lista.itens) + [CATEGORIA_BEM_PADRAO]
    afetados = Bem.query.filter_by(category=nome).update({'category': CATEGORIA_BEM_PADRAO})
    db.session.commit()
    logger.info("Categoria '%s' removida por %s (%s bem(ns) reclassificado(s))", nome, g.ator['email'], afetados)
    return jsonify(lista.itens)
