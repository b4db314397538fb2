# run.py (versão para servidor)
import logging

from waitress import serve
from infra_app import create_app

logger = logging.getLogger(__name__)

if __name__ == '__main__':
    app = create_app()
    port = app.config['PORT']

    logger.info("--- Servidor do CRM Infra ---")
    logger.info("Iniciando na porta: %s", port)
    logger.info("Para acessar, use http://<IP_DO_SERVIDOR>:%s em um navegador.", port)

    # host='0.0.0.0' aceita conexões de qualquer IP da rede
    serve(app, host='0.0.0.0', port=port)
