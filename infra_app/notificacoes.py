# infra_app/notificacoes.py
import uuid

from .constants import TIPOS_NOTIFICACAO
from .formatacao import agora_iso


def emit(store, kind, title, message, link_id=None, actor_initials=None):
    """
    Cria uma notificação não lida e a coloca no início da lista do store
    (a lista é sempre da mais recente para a mais antiga).
    """
    if kind not in TIPOS_NOTIFICACAO:
        raise ValueError(f"Tipo de notificação inválido: {kind}")
    notificacao = {
        'id': f"notif-{uuid.uuid4().hex}",
        'type': kind,
        'title': title,
        'message': message,
        'link_id': link_id,
        'date': agora_iso(),
        'read': False,
        'user_initials': actor_initials,
    }
    store.replace('notifications', (notificacao,) + store.notifications)
    return notificacao


def mark_read(store, notification_id=None):
    """
    Marca como lida a notificação ``notification_id`` ou, sem id, todas.
    Id desconhecido não altera nada. Retorna os ids que mudaram de estado.
    """
    alteradas = []
    nova_lista = []
    for n in store.notifications:
        if not n.get('read') and (notification_id is None or n.get('id') == notification_id):
            n = {**n, 'read': True}
            alteradas.append(n['id'])
        nova_lista.append(n)
    if alteradas:
        store.replace('notifications', nova_lista)
    return alteradas
