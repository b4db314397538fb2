# infra_app/formatacao.py
from datetime import date, datetime

from .extensions import tz_fortaleza


def agora():
    return datetime.now(tz_fortaleza)


def agora_iso():
    return agora().isoformat()


def para_local(valor):
    """
    Converte uma string ISO (ou datetime) para um datetime ingênuo no fuso de
    Fortaleza. Retorna None se o valor não puder ser interpretado.
    """
    if not valor:
        return None
    if isinstance(valor, datetime):
        dt = valor
    elif isinstance(valor, date):
        dt = datetime(valor.year, valor.month, valor.day)
    else:
        try:
            dt = datetime.fromisoformat(str(valor).strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz_fortaleza).replace(tzinfo=None)
    return dt


def formatar_data(valor, vazio='-'):
    """ISO -> DD/MM/AAAA (exibição pt-BR)."""
    dt = para_local(valor)
    if dt is None:
        return vazio
    return dt.strftime('%d/%m/%Y')


def formatar_moeda(valor):
    """Formata em Real: 1234.5 -> 'R$ 1.234,50'."""
    valor = float(valor or 0)
    texto = f"{abs(valor):,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    sinal = '-' if valor < 0 else ''
    return f"{sinal}R$ {texto}"


def iniciais(nome):
    partes = (nome or '').split()
    if len(partes) >= 2:
        return (partes[0][0] + partes[-1][0]).upper()
    return (nome or '').strip()[:2].upper()


def get_warranty_status(warranty, hoje=None):
    """Retorna 'active', 'expired' ou 'none' para a garantia de um bem."""
    warranty = warranty or {}
    if not warranty.get('has_warranty') or not warranty.get('end_date'):
        return 'none'
    fim = para_local(warranty['end_date'])
    if fim is None:
        return 'none'
    hoje = hoje or agora().date()
    return 'active' if fim.date() >= hoje else 'expired'
