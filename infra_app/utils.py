# infra_app/utils.py
import logging
import math

from flask import g, request

from .extensions import db
from .formatacao import agora
from .models import (
    Bem, Despesa, Fornecedor, ListaDinamica, Notificacao, OrdemServico,
    RegistroManutencao, TarefaPessoal, Usuario,
)
from .constants import LISTA_CATEGORIAS_BENS
from .errors import ErroValidacao
from .notificacoes import emit
from .serializers import (
    serialize_bem, serialize_despesa, serialize_fornecedor, serialize_manutencao,
    serialize_notificacao, serialize_ordem, serialize_tarefa, serialize_usuario,
)
from .store import EntityStore

logger = logging.getLogger(__name__)


def carregar_colecao(nome):
    """Lê uma coleção do banco já no formato de dicionário usado pelo store."""
    if nome == 'orders':
        return [serialize_ordem(o) for o in OrdemServico.query.order_by(OrdemServico.date_opened.desc()).all()]
    if nome == 'expenses':
        return [serialize_despesa(d) for d in Despesa.query.order_by(Despesa.created_at.desc()).all()]
    if nome == 'tasks':
        return [serialize_tarefa(t) for t in TarefaPessoal.query.order_by(TarefaPessoal.created_at.desc()).all()]
    if nome == 'users':
        return [serialize_usuario(u) for u in Usuario.query.order_by(Usuario.nome).all()]
    if nome == 'suppliers':
        return [serialize_fornecedor(f) for f in Fornecedor.query.order_by(Fornecedor.name).all()]
    if nome == 'assets':
        return [serialize_bem(b) for b in Bem.query.order_by(Bem.asset_tag).all()]
    if nome == 'maintenance':
        return [serialize_manutencao(m) for m in RegistroManutencao.query.order_by(RegistroManutencao.date_out.desc()).all()]
    if nome == 'notifications':
        return [serialize_notificacao(n) for n in Notificacao.query.order_by(Notificacao.date.desc()).all()]
    if nome == 'categories':
        lista = ListaDinamica.query.filter_by(nome=LISTA_CATEGORIAS_BENS).first()
        return list(lista.itens) if lista else []
    raise KeyError(f"Coleção desconhecida: {nome}")


def carregar_store(*nomes):
    """
    Store da requisição atual. As coleções são lidas do banco sob demanda;
    ``nomes`` força a leitura imediata das indicadas.
    """
    if 'store' not in g:
        g.store = EntityStore(loader=carregar_colecao)
    for nome in nomes:
        g.store.get(nome)
    return g.store


def registrar_notificacao(kind, title, message, link_id=None, ator=None):
    """
    Emite a notificação no store da requisição e a grava no banco.
    Falhas aqui não desfazem a ação que originou a notificação.
    """
    try:
        store = carregar_store()
        iniciais = ator.get('initials') if ator else None
        notificacao = emit(store, kind, title, message, link_id=link_id, actor_initials=iniciais)
        db.session.add(Notificacao(**notificacao))
        db.session.commit()
        return notificacao
    except Exception:
        db.session.rollback()
        logger.exception("ERRO ao registrar notificação '%s' (%s)", kind, link_id)
        return None


def proximo_codigo(model, prefixo):
    """Próximo código sequencial do ano: OS-24001, OS-24002, ... (FIN-24001 para despesas)."""
    ano = agora().strftime('%y')
    base = f"{prefixo}-{ano}"
    existentes = db.session.query(model.id).filter(model.id.like(f"{base}%")).all()
    maior = 0
    for (codigo,) in existentes:
        sufixo = codigo[len(base):]
        if sufixo.isdigit():
            maior = max(maior, int(sufixo))
    return f"{base}{maior + 1:03d}"


def ler_json():
    """Corpo JSON da requisição. Sem corpo vira ``{}``; qualquer coisa que não seja objeto é recusada."""
    dados = request.get_json(silent=True)
    if dados is None:
        return {}
    if not isinstance(dados, dict):
        raise ErroValidacao('O corpo da requisição deve ser um objeto JSON.')
    return dados


def exigir_campos(dados, *campos, numericos=()):
    """Campos obrigatórios devem ser texto não vazio; os de ``numericos`` aceitam também número."""
    faltando, invalidos = [], []
    for campo in campos:
        valor = dados.get(campo)
        tipos = (str, int, float) if campo in numericos else str
        if valor is None or (isinstance(valor, str) and not valor.strip()):
            faltando.append(campo)
        elif isinstance(valor, bool) or not isinstance(valor, tipos):
            invalidos.append(campo)
    if faltando:
        raise ErroValidacao(f"Campos obrigatórios não preenchidos: {', '.join(faltando)}")
    if invalidos:
        raise ErroValidacao(f"Tipo inválido para: {', '.join(invalidos)}")


def como_dict(valor, campo):
    if valor in (None, ''):
        return {}
    if not isinstance(valor, dict):
        raise ErroValidacao(f"Valor inválido para {campo}: esperado um objeto.")
    return dict(valor)


def como_lista(valor, campo):
    if valor in (None, ''):
        return []
    if not isinstance(valor, list):
        raise ErroValidacao(f"Valor inválido para {campo}: esperada uma lista.")
    return list(valor)


def escolher(valor, opcoes, campo, padrao=None):
    """Valida um valor de enumeração; vazio usa ``padrao``."""
    if valor in (None, ''):
        if padrao is None:
            raise ErroValidacao(f"Campo obrigatório não preenchido: {campo}")
        return padrao
    if valor not in opcoes:
        raise ErroValidacao(f"Valor inválido para {campo}: {valor}")
    return valor


def parse_numero(valor, campo):
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        raise ErroValidacao(f"Valor numérico inválido para {campo}.")
    if not math.isfinite(numero):
        raise ErroValidacao(f"Valor numérico inválido para {campo}.")
    return numero
