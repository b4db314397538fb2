# infra_app/auth.py
"""Sessão por cookie e decoradores de acesso das rotas da API."""
from functools import wraps

from flask import g, session

from .errors import ErroNaoAutenticado, ErroPermissao
from .extensions import db
from .models import Usuario
from .serializers import serialize_usuario


def ator_atual():
    """Usuário da sessão serializado, ou None se não houver sessão válida."""
    user_id = session.get('user_id')
    if not user_id:
        return None
    usuario = db.session.get(Usuario, user_id)
    return serialize_usuario(usuario) if usuario else None


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        ator = ator_atual()
        if not ator:
            raise ErroNaoAutenticado('Sessão expirada. Faça login novamente.')
        g.ator = ator
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @login_required
    @wraps(f)
    def decorated(*args, **kwargs):
        if not g.ator['is_admin']:
            raise ErroPermissao('Apenas administradores podem realizar esta ação.')
        return f(*args, **kwargs)
    return decorated


def escrita_required(f):
    """Bloqueia o convidado, que só tem acesso de leitura."""
    @login_required
    @wraps(f)
    def decorated(*args, **kwargs):
        if g.ator['is_guest']:
            raise ErroPermissao('Acesso de convidado é somente leitura.')
        return f(*args, **kwargs)
    return decorated
