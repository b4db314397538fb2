# importar_bens.py
"""Importa bens patrimoniais de um arquivo CSV direto para o banco local."""
import argparse
import logging
import sys

from infra_app import create_app
from infra_app.extensions import db
from infra_app.importacao import parse_asset_import
from infra_app.models import Bem
from infra_app.utils import carregar_colecao

logger = logging.getLogger(__name__)


def importar(caminho):
    with open(caminho, 'r', encoding='utf-8-sig') as f:
        texto = f.read()

    app = create_app()
    with app.app_context():
        resultado = parse_asset_import(texto, categories=carregar_colecao('categories'))
        if resultado.errors:
            logger.error(resultado.errors[0])
            return 1

        existentes = {tag for (tag,) in db.session.query(Bem.asset_tag).all()}
        novos = 0
        for registro in resultado.assets:
            if registro['asset_tag'] in existentes:
                logger.warning("Patrimônio %s já cadastrado, ignorado.", registro['asset_tag'])
                continue
            existentes.add(registro['asset_tag'])
            db.session.add(Bem(**registro))
            novos += 1

        db.session.commit()
        logger.info("-> %s bem(ns) importado(s) de %s.", novos, caminho)
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('arquivo', help='CSV no formato do modelo de importação ou da exportação')
    sys.exit(importar(parser.parse_args().arquivo))
