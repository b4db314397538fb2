# infra_app/blueprints/relatorios.py
from collections import defaultdict

from flask import Blueprint, g, jsonify, request

from ..auth import login_required
from ..constants import OS_ABERTA, OS_AGUARDANDO, OS_CONCLUIDA, OS_EM_ANDAMENTO, UNIDADES
from ..formatacao import agora, para_local
from ..utils import carregar_store
from ..visibilidade import visible_expenses, visible_orders

relatorios_bp = Blueprint('relatorios', __name__, url_prefix='/api/relatorios')


def resumo_dashboard(orders, expenses, unidade=None, hoje=None):
    """Indicadores do dashboard: contagem de OS por situação e gastos do mês."""
    hoje = hoje or agora().date()
    if unidade:
        orders = [o for o in orders if o.get('unit') == unidade]
        expenses = [e for e in expenses if e.get('unit') == unidade]

    volume_por_unidade = {u: 0 for u in UNIDADES}
    for o in orders:
        if o.get('unit') in volume_por_unidade:
            volume_por_unidade[o['unit']] += 1

    gastos_por_mes = defaultdict(float)
    gastos_mes = 0.0
    for e in expenses:
        data = para_local(e.get('date'))
        if data is None:
            continue
        valor = float(e.get('value') or 0)
        gastos_por_mes[data.strftime('%Y-%m')] += valor
        if data.year == hoje.year and data.month == hoje.month:
            gastos_mes += valor

    return {
        'total_abertas': sum(1 for o in orders if o.get('status') == OS_ABERTA),
        'total_em_andamento': sum(1 for o in orders if o.get('status') in (OS_EM_ANDAMENTO, OS_AGUARDANDO)),
        'total_concluidas': sum(1 for o in orders if o.get('status') == OS_CONCLUIDA),
        'gastos_mes': round(gastos_mes, 2),
        'volume_por_unidade': volume_por_unidade,
        'gastos_por_mes': {mes: round(total, 2) for mes, total in sorted(gastos_por_mes.items())},
    }


@relatorios_bp.route('/resumo', methods=['GET'])
@login_required
def get_resumo():
    store = carregar_store()
    if g.ator['is_guest']:
        # Visão executiva: agregados sobre todos os registros
        ordens, despesas = list(store.orders), list(store.expenses)
    else:
        ordens = visible_orders(store.orders, g.ator)
        despesas = visible_expenses(store.expenses, ordens, g.ator)
    return jsonify(resumo_dashboard(ordens, despesas, unidade=request.args.get('unidade')))
