# infra_app/config.py
import os
import sys
import logging

logger = logging.getLogger(__name__)

CHAVE_DESENVOLVIMENTO = 'dev-infra-nao-usar-em-producao'


def resource_path(relative_path):
    try:
        base_path = sys._MEIPASS
    except AttributeError:
        base_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    return os.path.join(base_path, relative_path)


class Config:
    """Configuração da aplicação, lida das variáveis de ambiente (.env)."""
    SECRET_KEY = None
    SQLALCHEMY_DATABASE_URI = None
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PORT = 52080
    LOG_DIR = None
    # Login aceita só o usuário; o domínio é completado automaticamente.
    EMAIL_DOMAIN = '@menubrands.com.br'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @classmethod
    def carregar(cls) -> None:
        """Relê o ambiente; chamado por create_app depois de carregar o .env."""
        cls.SECRET_KEY = os.getenv('SECRET_KEY')
        cls.SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///' + resource_path('infra_local.db'))
        cls.PORT = int(os.getenv('PORT', '52080'))
        cls.LOG_DIR = os.getenv('LOG_DIR', resource_path('logs'))
        cls.EMAIL_DOMAIN = os.getenv('EMAIL_DOMAIN', '@menubrands.com.br')
        cls.validate()

    @classmethod
    def validate(cls) -> None:
        if not cls.SECRET_KEY:
            logger.warning("SECRET_KEY não definida - usando chave de desenvolvimento, sessões não são seguras")
            cls.SECRET_KEY = CHAVE_DESENVOLVIMENTO
