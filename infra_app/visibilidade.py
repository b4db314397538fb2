"""
Filtro de visibilidade (controle de acesso por papel e por dono).

Administradores veem tudo; os demais usuários veem apenas o que é deles.
As funções só recortam a coleção recebida: nunca reordenam e nunca lançam
exceção quando não há usuário autenticado (retornam lista vazia).
"""
from .constants import NOTIF_FINANCEIRO


def _is_admin(actor):
    return bool(actor and actor.get('is_admin'))


def visible_orders(orders, actor):
    if not actor:
        return []
    if _is_admin(actor):
        return list(orders)
    return [o for o in orders if o.get('owner_id') == actor.get('id')]


def visible_expenses(expenses, visible_orders, actor):
    """
    Despesas visíveis derivam das OS visíveis: um usuário comum só enxerga a
    despesa cujo ``linked_os_id`` aponta para uma OS que ele já pode ver.
    Despesas sem OS vinculada ficam ocultas para não administradores.
    """
    if not actor:
        return []
    if _is_admin(actor):
        return list(expenses)
    ids_visiveis = {o.get('id') for o in visible_orders}
    return [e for e in expenses if e.get('linked_os_id') and e.get('linked_os_id') in ids_visiveis]


def visible_tasks(tasks, actor):
    if not actor:
        return []
    if _is_admin(actor):
        return list(tasks)
    return [t for t in tasks if t.get('user_id') == actor.get('id')]


def visible_notifications(notifications, actor):
    # Notificações financeiras são exclusivas dos administradores
    if not actor:
        return []
    if _is_admin(actor):
        return list(notifications)
    return [n for n in notifications if n.get('type') != NOTIF_FINANCEIRO]


def owner_for_new_order(requested_owner_id, actor):
    """Usuário comum sempre é o responsável pelas OS que cria."""
    if _is_admin(actor):
        return requested_owner_id or actor.get('id')
    return actor.get('id')
