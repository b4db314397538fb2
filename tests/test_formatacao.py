from datetime import date, datetime

from infra_app.formatacao import (
    formatar_data, formatar_moeda, get_warranty_status, iniciais, para_local,
)


def test_formatar_moeda():
    assert formatar_moeda(1234.5) == 'R$ 1.234,50'
    assert formatar_moeda(0) == 'R$ 0,00'
    assert formatar_moeda(None) == 'R$ 0,00'
    assert formatar_moeda(-1500) == '-R$ 1.500,00'
    assert formatar_moeda(1234567.891) == 'R$ 1.234.567,89'


def test_formatar_data_converts_to_local_day():
    assert formatar_data('2024-03-10T10:00:00-03:00') == '10/03/2024'
    # 01:00 UTC ainda é o dia anterior em Fortaleza
    assert formatar_data('2024-03-10T01:00:00Z') == '09/03/2024'
    assert formatar_data(date(2024, 1, 5)) == '05/01/2024'
    assert formatar_data(None) == '-'
    assert formatar_data('lixo', vazio='') == ''


def test_para_local_returns_naive_datetime():
    assert para_local('2024-03-10T12:00:00+00:00') == datetime(2024, 3, 10, 9, 0)
    assert para_local('') is None


def test_iniciais():
    assert iniciais('Bruno Costa') == 'BC'
    assert iniciais('Ana Maria Lima') == 'AL'
    assert iniciais('diretoria') == 'DI'


def test_warranty_status():
    hoje = date(2024, 6, 1)
    assert get_warranty_status({'has_warranty': True, 'end_date': '2024-06-01'}, hoje) == 'active'
    assert get_warranty_status({'has_warranty': True, 'end_date': '2024-05-31'}, hoje) == 'expired'
    assert get_warranty_status({'has_warranty': False, 'end_date': '2030-01-01'}, hoje) == 'none'
    assert get_warranty_status({'has_warranty': True}, hoje) == 'none'
    assert get_warranty_status(None, hoje) == 'none'
