import logging

from dotenv import find_dotenv, load_dotenv
from flask import Flask, jsonify

from .config import Config
from .errors import registrar_handlers
from .extensions import db
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_overrides=None):
    # .env do diretório de execução; variáveis já exportadas têm prioridade
    load_dotenv(find_dotenv(usecwd=True))
    Config.carregar()

    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app.config['LOG_DIR'])
    logger.info("Banco de dados: %s", app.config['SQLALCHEMY_DATABASE_URI'])

    db.init_app(app)
    registrar_handlers(app)

    # Importa e registra os blueprints
    from .blueprints.usuarios import usuarios_bp
    from .blueprints.ordens import ordens_bp
    from .blueprints.despesas import despesas_bp
    from .blueprints.fornecedores import fornecedores_bp
    from .blueprints.tarefas import tarefas_bp
    from .blueprints.bens import bens_bp
    from .blueprints.manutencoes import manutencoes_bp
    from .blueprints.categorias import categorias_bp, garantir_listas_padrao
    from .blueprints.notificacoes import notificacoes_bp
    from .blueprints.relatorios import relatorios_bp

    app.register_blueprint(usuarios_bp)
    app.register_blueprint(ordens_bp)
    app.register_blueprint(despesas_bp)
    app.register_blueprint(fornecedores_bp)
    app.register_blueprint(tarefas_bp)
    app.register_blueprint(bens_bp)
    app.register_blueprint(manutencoes_bp)
    app.register_blueprint(categorias_bp)
    app.register_blueprint(notificacoes_bp)
    app.register_blueprint(relatorios_bp)

    @app.route('/api/status')
    def status():
        return jsonify({'status': 'online'})

    # Cria as tabelas no banco de dados se não existirem
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()
        garantir_listas_padrao()

    return app
