# infra_app/blueprints/manutencoes.py
import logging
from datetime import date, datetime, time

from flask import Blueprint, g, jsonify, request

from ..auth import escrita_required, login_required
from ..constants import BEM_ATIVO, BEM_EM_MANUTENCAO, STATUS_DISPONIVEIS_MANUTENCAO
from ..errors import ErroConflito, ErroNaoEncontrado, ErroValidacao
from ..extensions import db, tz_fortaleza
from ..formatacao import agora_iso
from ..models import Bem, RegistroManutencao
from ..serializers import serialize_bem, serialize_manutencao
from ..utils import carregar_store, exigir_campos, ler_json, parse_numero

logger = logging.getLogger(__name__)

manutencoes_bp = Blueprint('manutencoes', __name__, url_prefix='/api/manutencoes')


def _meio_dia(valor, campo):
    """'AAAA-MM-DD' -> ISO ao meio-dia local, evitando que o fuso mude o dia."""
    if not valor:
        return None
    try:
        dia = date.fromisoformat(str(valor)[:10])
    except ValueError:
        raise ErroValidacao(f"Data inválida para {campo}: {valor}")
    return datetime.combine(dia, time(12, 0), tzinfo=tz_fortaleza).isoformat()


@manutencoes_bp.route('', methods=['GET'])
@login_required
def listar_manutencoes():
    registros = carregar_store().maintenance
    if request.args.get('ativas') in ('1', 'true'):
        registros = [m for m in registros if m['active']]
    asset_id = request.args.get('asset_id', type=int)
    if asset_id:
        registros = [m for m in registros if m['asset_id'] == asset_id]
    return jsonify(list(registros))


@manutencoes_bp.route('', methods=['POST'])
@escrita_required
def enviar_para_manutencao():
    dados = ler_json()
    exigir_campos(dados, 'asset_id', 'provider_name', 'date_out', 'description', numericos=('asset_id',))

    bem = db.session.get(Bem, int(parse_numero(dados['asset_id'], 'asset_id')))
    if not bem:
        raise ErroNaoEncontrado('Bem não encontrado.')
    if bem.status not in STATUS_DISPONIVEIS_MANUTENCAO:
        raise ErroConflito(f"O bem {bem.asset_tag} está '{bem.status}' e não pode ser enviado para manutenção.")

    registro = RegistroManutencao(
        asset_id=bem.id,
        provider_name=dados['provider_name'].strip(),
        contact_info=dados.get('contact_info') or '',
        date_out=_meio_dia(dados['date_out'], 'date_out'),
        date_return_forecast=_meio_dia(dados.get('date_return_forecast'), 'date_return_forecast'),
        description=dados['description'].strip(),
        active=True,
    )
    bem.status = BEM_EM_MANUTENCAO
    db.session.add(registro)
    db.session.commit()
    logger.info("Bem %s enviado para manutenção (%s) por %s", bem.asset_tag, registro.provider_name, g.ator['email'])
    return jsonify({'maintenance': serialize_manutencao(registro), 'asset': serialize_bem(bem)}), 201


@manutencoes_bp.route('/<int:registro_id>/retorno', methods=['POST'])
@escrita_required
def registrar_retorno(registro_id):
    registro = db.session.get(RegistroManutencao, registro_id)
    if not registro:
        raise ErroNaoEncontrado('Registro de manutenção não encontrado.')
    if not registro.active:
        raise ErroConflito('Esta manutenção já foi encerrada.')

    registro.active = False
    registro.date_returned = agora_iso()
    registro.bem.status = BEM_ATIVO
    db.session.commit()
    logger.info("Bem %s retornou da manutenção (%s)", registro.bem.asset_tag, g.ator['email'])
    return jsonify({'maintenance': serialize_manutencao(registro), 'asset': serialize_bem(registro.bem)})
