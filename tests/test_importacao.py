from datetime import datetime

from infra_app.exportacao import to_csv
from infra_app.extensions import tz_fortaleza
from infra_app.importacao import ERRO_SEM_LINHAS_VALIDAS, import_template, parse_asset_import

AGORA = datetime(2025, 6, 2, 14, 30, tzinfo=tz_fortaleza)

CABECALHO = 'Patrimonio,Nome,Categoria,Unidade,Marca,Modelo,Valor,Data Aquisicao (DD/MM/AAAA)'


def _importar(*linhas, **kwargs):
    return parse_asset_import('\n'.join((CABECALHO,) + linhas), now=AGORA, **kwargs)


def test_parses_full_row_with_defaults():
    resultado = _importar('MB-TI-001,Notebook Dell,TI / Informática,Cambeba,Dell,5420,4500.00,15/05/2025')

    assert resultado.errors == []
    assert resultado.assets == [{
        'asset_tag': 'MB-TI-001',
        'name': 'Notebook Dell',
        'category': 'TI / Informática',
        'unit': 'Cambeba',
        'brand': 'Dell',
        'model': '5420',
        'description': '',
        'value': 4500.0,
        'registration_date': '2025-05-15T00:00:00-03:00',
        'status': 'Ativo',
        'warranty': {'has_warranty': False},
        'invoice_info': {},
        'photo_url': None,
        'linked_os_ids': [],
    }]


def test_quoted_fields_keep_commas_and_unescape_quotes():
    resultado = _importar('MB-MOB-07, "Cadeira, giratória","Mobiliário",Aldeota,,,"1.200",01/02/2024',
                          'MB-TI-08,"Monitor 24"" LG",TI / Informática,Aldeota')
    nomes = [a['name'] for a in resultado.assets]
    assert nomes == ['Cadeira, giratória', 'Monitor 24" LG']
    assert resultado.assets[0]['category'] == 'Mobiliário'
    assert resultado.assets[0]['value'] == 1.2


def test_category_and_unit_reconciled_case_insensitively():
    resultado = _importar('MB-1,Freezer,refrigeração,PARQUELÂNDIA')
    assert resultado.assets[0]['category'] == 'Refrigeração'
    assert resultado.assets[0]['unit'] == 'Parquelândia'


def test_unknown_category_and_unit_fall_back():
    resultado = _importar('MB-1,Freezer,Geladeiras,Matriz')
    assert resultado.assets[0]['category'] == 'Outros'
    assert resultado.assets[0]['unit'] == 'Aldeota'


def test_custom_category_registry_is_used():
    resultado = _importar('MB-1,Fogão,cozinha industrial,Estoque', categories=['Cozinha Industrial', 'Outros'])
    assert resultado.assets[0]['category'] == 'Cozinha Industrial'


def test_invalid_value_and_date_use_fallbacks():
    resultado = _importar('MB-1,Mesa,Mobiliário,Aldeota,,,abc,31/02/2024', 'MB-2,Mesa,Mobiliário,Aldeota,,,,ontem')
    for asset in resultado.assets:
        assert asset['value'] == 0.0
        assert asset['registration_date'] == AGORA.isoformat()


def test_invalid_rows_are_skipped_silently():
    resultado = _importar(
        '',
        'so-uma-coluna',
        ',Sem patrimônio,Mobiliário',
        'MB-SEM-NOME,,Mobiliário',
        '   ',
        'MB-OK,Armário,Mobiliário,Estoque',
    )
    assert resultado.errors == []
    assert [a['asset_tag'] for a in resultado.assets] == ['MB-OK']


def test_no_valid_rows_returns_single_error():
    resultado = _importar('so-uma-coluna', ',sem tag')
    assert resultado.assets == []
    assert resultado.errors == [ERRO_SEM_LINHAS_VALIDAS]


def test_header_only_and_empty_text():
    assert parse_asset_import(CABECALHO).errors == [ERRO_SEM_LINHAS_VALIDAS]
    assert parse_asset_import('').errors == [ERRO_SEM_LINHAS_VALIDAS]


def test_byte_order_mark_and_crlf_are_tolerated():
    texto = '\ufeff' + CABECALHO + '\r\nMB-1,Balcão,Mobiliário,Fábrica\r\n'
    resultado = parse_asset_import(texto, now=AGORA)
    assert [a['asset_tag'] for a in resultado.assets] == ['MB-1']
    assert resultado.assets[0]['unit'] == 'Fábrica'


def test_rows_keep_file_order():
    resultado = _importar('MB-3,C,Outros,Aldeota', 'MB-1,A,Outros,Aldeota', 'MB-2,B,Outros,Aldeota')
    assert [a['asset_tag'] for a in resultado.assets] == ['MB-3', 'MB-1', 'MB-2']


def test_template_is_importable():
    modelo = import_template()
    assert modelo.splitlines()[0] == CABECALHO
    resultado = parse_asset_import(modelo, now=AGORA)
    assert resultado.assets[0]['asset_tag'] == 'MB-TI-999'
    assert resultado.assets[0]['category'] == 'TI / Informática'
    assert resultado.assets[0]['value'] == 4500.0


def test_exported_csv_can_be_imported_back():
    bens = [
        {'asset_tag': 'MB-REF-01', 'name': 'Freezer "Horizontal", 2 portas', 'category': 'Refrigeração',
         'brand': 'Metalfrio', 'model': 'DA420', 'unit': 'Eusébio', 'status': 'Ativo', 'value': 3899.9,
         'registration_date': '2024-03-10T00:00:00-03:00'},
        {'asset_tag': 'MB-MOB-02', 'name': 'Mesa', 'category': 'Mobiliário', 'brand': '', 'model': '',
         'unit': 'Estoque', 'status': 'Ativo', 'value': 250, 'registration_date': '2023-12-01T00:00:00-03:00'},
    ]

    resultado = parse_asset_import(to_csv(bens), now=AGORA)

    assert resultado.errors == []
    campos = ('asset_tag', 'name', 'category', 'brand', 'model', 'unit', 'value', 'registration_date')
    for original, importado in zip(bens, resultado.assets):
        for campo in campos:
            assert importado[campo] == original[campo], campo


def test_value_reads_leading_number():
    resultado = _importar('MB-1,Notebook,TI / Informática,Aldeota,,,4500abc', 'MB-2,Mesa,Mobiliário,Aldeota,,,-12.5 reais',
                          'MB-3,Cadeira,Mobiliário,Aldeota,,,R$ 300')
    assert [a['value'] for a in resultado.assets] == [4500.0, -12.5, 0.0]
