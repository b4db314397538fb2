# infra_app/serializers.py
"""Conversão dos modelos SQLAlchemy nos dicionários usados pela API e pelo store."""
from .formatacao import get_warranty_status


def serialize_usuario(u):
    return {
        'id': u.id,
        'email': u.email,
        'name': u.nome,
        'role': u.role,
        'initials': u.iniciais,
        'color': u.cor,
        'avatar_url': u.avatar_url,
        'is_admin': bool(u.is_admin),
        'is_guest': bool(u.is_guest),
    }


def serialize_ordem(o):
    return {
        'id': o.id,
        'title': o.title,
        'description': o.description,
        'unit': o.unit,
        'status': o.status,
        'priority': o.priority,
        'type': o.type,
        'owner_id': o.owner_id,
        'date_opened': o.date_opened,
        'date_forecast': o.date_forecast,
        'date_closed': o.date_closed,
        'history': list(o.history or []),
        'archived': bool(o.archived),
    }


def serialize_despesa(d):
    return {
        'id': d.id,
        'item': d.item,
        'value': d.value,
        'date': d.date,
        'supplier': d.supplier,
        'category': d.category,
        'payment_method': d.payment_method,
        'warranty_parts_months': d.warranty_parts_months,
        'warranty_service_months': d.warranty_service_months,
        'linked_os_id': d.linked_os_id,
        'unit': d.unit,
        'payment_data': dict(d.payment_data or {}),
    }


def serialize_bem(b):
    warranty = dict(b.warranty or {})
    return {
        'id': b.id,
        'asset_tag': b.asset_tag,
        'name': b.name,
        'category': b.category,
        'unit': b.unit,
        'brand': b.brand,
        'model': b.model,
        'description': b.description,
        'value': b.value,
        'status': b.status,
        'registration_date': b.registration_date,
        'warranty': warranty,
        'warranty_status': get_warranty_status(warranty),
        'invoice_info': dict(b.invoice_info or {}),
        'photo_url': b.photo_url,
        'linked_os_ids': list(b.linked_os_ids or []),
    }


def serialize_manutencao(m):
    return {
        'id': m.id,
        'asset_id': m.asset_id,
        'provider_name': m.provider_name,
        'contact_info': m.contact_info,
        'date_out': m.date_out,
        'date_return_forecast': m.date_return_forecast,
        'description': m.description,
        'active': bool(m.active),
        'date_returned': m.date_returned,
    }


def serialize_tarefa(t):
    return {
        'id': t.id,
        'user_id': t.user_id,
        'title': t.title,
        'description': t.description,
        'due_date': t.due_date,
        'completed': bool(t.completed),
        'priority': t.priority,
        'linked_os_id': t.linked_os_id,
    }


def serialize_fornecedor(f):
    return {
        'id': f.id,
        'name': f.name,
        'category': f.category,
        'contact_info': f.contact_info,
    }


def serialize_notificacao(n):
    return {
        'id': n.id,
        'type': n.type,
        'title': n.title,
        'message': n.message,
        'link_id': n.link_id,
        'date': n.date,
        'read': bool(n.read),
        'user_initials': n.user_initials,
    }
