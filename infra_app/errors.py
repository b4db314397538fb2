"""
Exceções de domínio e handlers de erro da API.

Todas as respostas de erro seguem o formato ``{"error": <mensagem>}`` com o
código HTTP correspondente.
"""
import logging

from flask import jsonify, request, session
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db

logger = logging.getLogger(__name__)


class ErroInfra(Exception):
    status_code = 400

    def __init__(self, mensagem):
        super().__init__(mensagem)
        self.mensagem = mensagem


class ErroValidacao(ErroInfra):
    """Campo obrigatório ausente ou valor inválido."""
    status_code = 400


class ErroNaoAutenticado(ErroInfra):
    status_code = 401


class ErroPermissao(ErroInfra):
    """Ação não permitida para o usuário atual. Nenhum estado é alterado."""
    status_code = 403


class ErroNaoEncontrado(ErroInfra):
    status_code = 404


class ErroConflito(ErroInfra):
    """Violação de regra de negócio (OS arquivada, patrimônio duplicado, ...)."""
    status_code = 409


def registrar_handlers(app):
    @app.errorhandler(ErroInfra)
    def tratar_erro_infra(erro):
        if isinstance(erro, ErroNaoAutenticado):
            # Sessão inválida: o cliente deve refazer o login
            session.clear()
        elif isinstance(erro, ErroPermissao):
            logger.warning("Permissão negada em %s %s: %s", request.method, request.path, erro.mensagem)
        return jsonify({'error': erro.mensagem}), erro.status_code

    @app.errorhandler(404)
    def tratar_404(erro):
        return jsonify({'error': 'Recurso não encontrado.'}), 404

    @app.errorhandler(405)
    def tratar_405(erro):
        return jsonify({'error': 'Método não permitido.'}), 405

    @app.errorhandler(SQLAlchemyError)
    def tratar_erro_banco(erro):
        db.session.rollback()
        logger.exception("ERRO de banco de dados em %s %s", request.method, request.path)
        return jsonify({'error': 'Erro ao acessar o banco de dados.'}), 500
