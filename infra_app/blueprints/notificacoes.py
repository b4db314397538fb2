# infra_app/blueprints/notificacoes.py
from flask import Blueprint, g, jsonify, request

from ..auth import login_required
from ..errors import ErroNaoEncontrado
from ..extensions import db
from ..models import Notificacao
from ..notificacoes import mark_read
from ..utils import carregar_store
from ..visibilidade import visible_notifications

notificacoes_bp = Blueprint('notificacoes', __name__, url_prefix='/api/notificacoes')


def _marcar_lidas(notification_id=None):
    """Marca no store e grava no banco apenas o que mudou de estado."""
    store = carregar_store()
    if notification_id is not None or g.ator['is_admin']:
        alteradas = mark_read(store, notification_id)
    else:
        # Usuário comum não marca as financeiras, que ele nem vê
        alteradas = []
        for n in visible_notifications(store.notifications, g.ator):
            alteradas.extend(mark_read(store, n['id']))
    if alteradas:
        Notificacao.query.filter(Notificacao.id.in_(alteradas)).update({'read': True}, synchronize_session=False)
        db.session.commit()
    return alteradas


@notificacoes_bp.route('', methods=['GET'])
@login_required
def get_notificacoes():
    notificacoes = visible_notifications(carregar_store().notifications, g.ator)
    if request.args.get('nao_lidas') in ('1', 'true'):
        notificacoes = [n for n in notificacoes if not n['read']]
    return jsonify(notificacoes)


@notificacoes_bp.route('/marcar-lidas', methods=['POST'])
@login_required
def marcar_todas_lidas():
    alteradas = _marcar_lidas()
    return jsonify({'status': 'success', 'alteradas': alteradas})


@notificacoes_bp.route('/<string:notification_id>/read', methods=['PUT'])
@login_required
def marcar_lida(notification_id):
    visiveis = visible_notifications(carregar_store().notifications, g.ator)
    if not any(n['id'] == notification_id for n in visiveis):
        raise ErroNaoEncontrado('Notificação não encontrada.')
    alteradas = _marcar_lidas(notification_id)
    return jsonify({'status': 'success', 'alteradas': alteradas})
