"""
Importação de bens patrimoniais a partir de CSV.

Regras de tolerância:
    - a primeira linha é o cabeçalho;
    - linhas em branco, com menos de 2 colunas, sem patrimônio ou sem nome
      são ignoradas em silêncio;
    - categoria e unidade são conciliadas sem diferenciar maiúsculas; valores
      desconhecidos caem no padrão ('Outros' / 'Aldeota');
    - o valor usa o número do início do campo (sem número vira 0);
    - data inválida vira o momento da importação.

Só há erro quando nenhuma linha válida é encontrada.
"""
import csv
import io
import logging
import math
import re
import unicodedata
from collections import namedtuple
from datetime import datetime

from .constants import (
    BEM_ATIVO, CABECALHO_EXPORTACAO, CABECALHO_IMPORTACAO, CATEGORIAS_BEM_INICIAIS,
    CATEGORIA_BEM_PADRAO, LINHA_EXEMPLO_IMPORTACAO, UNIDADES, UNIDADE_PADRAO,
)
from .extensions import tz_fortaleza
from .formatacao import agora

logger = logging.getLogger(__name__)

ERRO_SEM_LINHAS_VALIDAS = 'Nenhum item válido encontrado no arquivo. Verifique o formato.'

NOME_MODELO_IMPORTACAO = 'modelo_importacao_patrimonio.csv'

ResultadoImportacao = namedtuple('ResultadoImportacao', ['assets', 'errors'])

# Posição de cada campo no arquivo modelo de importação
COLUNAS_MODELO = {
    'asset_tag': 0, 'name': 1, 'category': 2, 'unit': 3,
    'brand': 4, 'model': 5, 'value': 6, 'date': 7,
}

# Posição de cada campo no CSV gerado pela exportação (reimportável)
COLUNAS_EXPORTACAO = {
    'asset_tag': 0, 'name': 1, 'category': 2, 'brand': 3,
    'model': 4, 'unit': 5, 'value': 7, 'date': 8,
}


def _normalizar(texto):
    sem_acento = unicodedata.normalize('NFKD', texto or '')
    sem_acento = ''.join(c for c in sem_acento if not unicodedata.combining(c))
    return sem_acento.strip().casefold()


def _tabela_conciliacao(registro):
    return {valor.strip().casefold(): valor for valor in registro}


def _conciliar(bruto, tabela, padrao):
    return tabela.get((bruto or '').strip().casefold(), padrao)


def _mapa_colunas(cabecalho):
    """O cabeçalho da exportação é reconhecido; qualquer outro usa o modelo."""
    exportacao = [_normalizar(c) for c in CABECALHO_EXPORTACAO]
    if [_normalizar(c) for c in cabecalho[:len(exportacao)]] == exportacao:
        return COLUNAS_EXPORTACAO
    return COLUNAS_MODELO


def _dividir_linha(linha):
    """Separa por vírgulas fora de aspas, remove as aspas e desfaz as aspas duplicadas."""
    colunas = next(csv.reader([linha], skipinitialspace=True), [])
    return [c.strip() for c in colunas]


NUMERO_INICIAL = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_valor(texto):
    """Lê o número do início do campo ('4500abc' -> 4500); sem número vira 0."""
    encontrado = NUMERO_INICIAL.match(texto or '')
    if not encontrado:
        return 0.0
    valor = float(encontrado.group())
    return valor if math.isfinite(valor) else 0.0


def _parse_data(texto, momento_importacao):
    """DD/MM/AAAA -> ISO no fuso local; qualquer falha usa o momento da importação."""
    try:
        dia, mes, ano = (texto or '').strip().split('/')
        return datetime(int(ano), int(mes), int(dia), tzinfo=tz_fortaleza).isoformat()
    except ValueError:
        return momento_importacao.isoformat()


def parse_asset_import(text, categories=None, units=None, now=None):
    """
    Converte o texto de um CSV em registros provisórios de bens.

    Retorna ``ResultadoImportacao(assets, errors)``: os registros válidos na
    ordem do arquivo e, se nenhum for válido, um único erro agregado.
    """
    momento = now or agora()
    categorias = _tabela_conciliacao(categories if categories is not None else CATEGORIAS_BEM_INICIAIS)
    unidades = _tabela_conciliacao(units if units is not None else UNIDADES)

    linhas = (text or '').lstrip('\ufeff').splitlines()
    if not linhas:
        return ResultadoImportacao([], [ERRO_SEM_LINHAS_VALIDAS])

    colunas = _mapa_colunas(_dividir_linha(linhas[0]))
    assets = []
    ignoradas = 0

    for numero, linha in enumerate(linhas[1:], start=2):
        linha = linha.strip()
        if not linha:
            continue
        try:
            cols = _dividir_linha(linha)
        except csv.Error:
            logger.debug("Linha %s ignorada: CSV malformado", numero)
            ignoradas += 1
            continue

        def campo(nome):
            indice = colunas[nome]
            return cols[indice] if indice < len(cols) else ''

        if len(cols) < 2 or not campo('asset_tag') or not campo('name'):
            ignoradas += 1
            continue

        assets.append({
            'asset_tag': campo('asset_tag'),
            'name': campo('name'),
            'category': _conciliar(campo('category'), categorias, CATEGORIA_BEM_PADRAO),
            'unit': _conciliar(campo('unit'), unidades, UNIDADE_PADRAO),
            'brand': campo('brand'),
            'model': campo('model'),
            'description': '',
            'value': _parse_valor(campo('value')),
            'registration_date': _parse_data(campo('date'), momento),
            'status': BEM_ATIVO,
            'warranty': {'has_warranty': False},
            'invoice_info': {},
            'photo_url': None,
            'linked_os_ids': [],
        })

    if ignoradas:
        logger.info("Importação de bens: %s linha(s) ignorada(s)", ignoradas)
    if not assets:
        return ResultadoImportacao([], [ERRO_SEM_LINHAS_VALIDAS])
    return ResultadoImportacao(assets, [])


def import_template():
    """CSV modelo oferecido para download antes da importação."""
    saida = io.StringIO()
    writer = csv.writer(saida, lineterminator='\n')
    writer.writerow(CABECALHO_IMPORTACAO)
    writer.writerow(LINHA_EXEMPLO_IMPORTACAO)
    return saida.getvalue()
