"""
Exportação de bens (CSV e relatório para impressão) e ordem de pagamento.

Os relatórios são HTML autocontido, aberto em uma nova aba e salvo como PDF
pelo diálogo de impressão do navegador; aqui só geramos a marcação.
"""
import math
from datetime import date, datetime, time

from jinja2 import Environment, PackageLoader, select_autoescape

from .constants import CABECALHO_EXPORTACAO
from .errors import ErroValidacao
from .formatacao import agora, formatar_data, formatar_moeda, para_local

_env = Environment(
    loader=PackageLoader('infra_app', 'templates'),
    autoescape=select_autoescape(['html']),
)
_env.filters['moeda'] = formatar_moeda
_env.filters['data'] = formatar_data


# =============================================================================
# FILTROS
# =============================================================================

def _limite(valor, fim_do_dia=False):
    """'AAAA-MM-DD' (ou date) -> datetime do início ou do fim do dia."""
    if not valor:
        return None
    if isinstance(valor, datetime):
        dia = valor.date()
    elif isinstance(valor, date):
        dia = valor
    else:
        try:
            dia = date.fromisoformat(str(valor).strip()[:10])
        except ValueError:
            raise ErroValidacao(f"Data inválida no filtro: {valor}")
    return datetime.combine(dia, time(23, 59, 59, 999000) if fim_do_dia else time.min)


def filter_assets(assets, filters=None):
    """
    Aplica os filtros da exportação mantendo a ordem original.

    ``filters`` aceita ``data_inicio``/``data_fim`` (inclusivos, o fim vale
    até 23:59:59.999) e os conjuntos ``unidades``, ``status`` e
    ``categorias``. Dentro de um conjunto vale qualquer item (OU); entre
    dimensões valem todas (E). Seleção vazia não restringe.
    """
    filtros = filters or {}
    inicio = _limite(filtros.get('data_inicio'))
    fim = _limite(filtros.get('data_fim'), fim_do_dia=True)
    unidades = set(filtros.get('unidades') or ())
    status = set(filtros.get('status') or ())
    categorias = set(filtros.get('categorias') or ())

    resultado = []
    for asset in assets:
        if inicio or fim:
            registro = para_local(asset.get('registration_date'))
            if registro is None:
                continue
            if inicio and registro < inicio:
                continue
            if fim and registro > fim:
                continue
        if unidades and asset.get('unit') not in unidades:
            continue
        if status and asset.get('status') not in status:
            continue
        if categorias and asset.get('category') not in categorias:
            continue
        resultado.append(asset)
    return resultado


# =============================================================================
# CSV
# =============================================================================

def _campo_csv(valor, sempre_aspas=False):
    texto = '' if valor is None else str(valor)
    if sempre_aspas or any(c in texto for c in ',"\r\n'):
        return '"' + texto.replace('"', '""') + '"'
    return texto


def _valor(asset):
    try:
        valor = float(asset.get('value') or 0)
    except (TypeError, ValueError):
        return 0.0
    return valor if math.isfinite(valor) else 0.0


def to_csv(assets):
    linhas = [','.join(CABECALHO_EXPORTACAO)]
    for a in assets:
        linhas.append(','.join([
            _campo_csv(a.get('asset_tag')),
            _campo_csv(a.get('name'), sempre_aspas=True),
            _campo_csv(a.get('category')),
            _campo_csv(a.get('brand')),
            _campo_csv(a.get('model')),
            _campo_csv(a.get('unit')),
            _campo_csv(a.get('status')),
            f"{_valor(a):.2f}",
            _campo_csv(formatar_data(a.get('registration_date'), vazio='')),
        ]))
    return '\n'.join(linhas)


def export_filename(today=None):
    today = today or agora().date()
    return f"patrimonio_export_{today.isoformat()}.csv"


# =============================================================================
# RELATÓRIOS PARA IMPRESSÃO
# =============================================================================

def _resumo_filtros(filtros):
    unidades = filtros.get('unidades') or ()
    categorias = filtros.get('categorias') or ()
    status = filtros.get('status') or ()
    partes = [
        f"{len(unidades)} Unidades" if unidades else 'Todas Unidades',
        f"{len(categorias)} Categorias" if categorias else 'Todas Categorias',
    ]
    if status:
        partes.append(f"Status: {', '.join(status)}")
    if filtros.get('data_inicio') or filtros.get('data_fim'):
        partes.append(
            f"Cadastro: {formatar_data(filtros.get('data_inicio'), vazio='...')}"
            f" a {formatar_data(filtros.get('data_fim'), vazio='...')}"
        )
    return ', '.join(partes)


def to_printable_report(assets, filters=None, gerado_em=None, auto_print=True):
    """HTML do 'Relatório de Bens Patrimoniais' com total de itens e valor."""
    filtros = filters or {}
    gerado_em = gerado_em or agora()
    linhas = [{**a, 'value': _valor(a)} for a in assets]
    return _env.get_template('relatorios/patrimonio.html').render(
        assets=linhas,
        total_itens=len(linhas),
        valor_total=sum(a['value'] for a in linhas),
        resumo_filtros=_resumo_filtros(filtros),
        gerado_em=gerado_em,
        auto_print=auto_print,
    )


def itens_pagamento(expenses, ajustes=None):
    """Pré-preenche as linhas da ordem de pagamento a partir das despesas."""
    ajustes = ajustes or {}
    itens = []
    for exp in expenses:
        ajuste = ajustes.get(exp.get('id')) or {}
        pix = (exp.get('payment_data') or {}).get('pix_key') or ''
        itens.append({
            'id': exp.get('id'),
            'description': f"{exp.get('item')} (Ref: {exp.get('linked_os_id') or 'N/A'})",
            'supplier_name': exp.get('supplier'),
            'unit': exp.get('unit'),
            'date': exp.get('date'),
            'value': _valor(exp),
            'bank_details': ajuste.get('bank_details', pix) or '',
            'obs': ajuste.get('obs') or '',
        })
    return itens


def _semana_do_mes(dia):
    # getDay() do JavaScript: domingo = 0
    dia_semana = (dia.weekday() + 1) % 7
    return math.ceil((dia.day + 6 - dia_semana) / 7)


def to_payment_schedule_report(items, requester_name, today=None, auto_print=True):
    """HTML da 'Ordem de Pagamento Semanal' para Pix e transferências."""
    hoje = today or agora().date()
    return _env.get_template('relatorios/ordem_pagamento.html').render(
        itens=items,
        total=sum(i['value'] for i in items),
        semana=_semana_do_mes(hoje),
        ano=hoje.year,
        solicitante=requester_name,
        emissao=hoje,
        auto_print=auto_print,
    )
