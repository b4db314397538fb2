# infra_app/blueprints/usuarios.py
import logging
import uuid

from flask import Blueprint, current_app, g, jsonify, session
from werkzeug.security import check_password_hash, generate_password_hash

from ..auth import admin_required, login_required
from ..errors import ErroConflito, ErroNaoAutenticado, ErroNaoEncontrado, ErroPermissao, ErroValidacao
from ..extensions import db
from ..formatacao import iniciais
from ..models import Usuario
from ..serializers import serialize_usuario
from ..utils import exigir_campos, ler_json

logger = logging.getLogger(__name__)

usuarios_bp = Blueprint('usuarios', __name__, url_prefix='/api/usuarios')

# Campos que só um administrador pode alterar
CAMPOS_DE_PAPEL = ('role', 'is_admin', 'is_guest')


def _validar_senha(senha):
    if not isinstance(senha, str) or len(senha) < 6:
        raise ErroValidacao('A senha é obrigatória e deve ter no mínimo 6 caracteres.')


def _completar_email(valor):
    if not isinstance(valor, str):
        raise ErroValidacao('Email inválido.')
    valor = valor.strip().lower()
    return valor if '@' in valor else f"{valor}{current_app.config['EMAIL_DOMAIN']}"


@usuarios_bp.route('/login', methods=['POST'])
def login():
    """Login local por email (ou só o usuário, sem domínio) e senha."""
    dados = ler_json()
    if not dados.get('email') or not dados.get('password'):
        raise ErroValidacao('Email e senha são obrigatórios.')
    if not isinstance(dados['password'], str):
        raise ErroValidacao('Senha inválida.')

    usuario = Usuario.query.filter_by(email=_completar_email(dados['email'])).first()
    if not usuario or not usuario.password_hash or not check_password_hash(usuario.password_hash, dados['password']):
        logger.warning("Falha de login para '%s'", dados['email'])
        raise ErroNaoAutenticado('Usuário ou senha inválidos')

    session.clear()
    session['user_id'] = usuario.id
    logger.info("Login de %s", usuario.email)
    return jsonify(serialize_usuario(usuario))


@usuarios_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'status': 'success'})


@usuarios_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(g.ator)


@usuarios_bp.route('', methods=['GET'])
@login_required
def get_all_users():
    if not g.ator['is_admin']:
        return jsonify([g.ator])
    usuarios = Usuario.query.order_by(Usuario.nome).all()
    return jsonify([serialize_usuario(u) for u in usuarios])


@usuarios_bp.route('', methods=['POST'])
@admin_required
def create_user():
    dados = ler_json()
    exigir_campos(dados, 'email', 'password', 'name')
    _validar_senha(dados['password'])

    email = _completar_email(dados['email'])
    if Usuario.query.filter_by(email=email).first():
        raise ErroConflito('Este email já está em uso.')

    novo_usuario = Usuario(
        id=str(uuid.uuid4()),
        email=email,
        nome=dados['name'].strip(),
        role=dados.get('role') or 'Técnico',
        iniciais=dados.get('initials') or iniciais(dados['name']),
        cor=dados.get('color') or 'bg-indigo-500',
        avatar_url=dados.get('avatar_url'),
        is_admin=bool(dados.get('is_admin')),
        is_guest=bool(dados.get('is_guest')),
        password_hash=generate_password_hash(dados['password']),
    )
    db.session.add(novo_usuario)
    db.session.commit()
    logger.info("Usuário %s criado por %s", novo_usuario.email, g.ator['email'])
    return jsonify(serialize_usuario(novo_usuario)), 201


@usuarios_bp.route('/<string:uid>', methods=['PUT'])
@login_required
def update_user(uid):
    dados = ler_json()
    ator = g.ator
    if not ator['is_admin'] and uid != ator['id']:
        raise ErroPermissao('Você só pode editar o seu próprio perfil.')

    usuario = db.session.get(Usuario, uid)
    if not usuario:
        raise ErroNaoEncontrado('Usuário não encontrado.')

    atual = serialize_usuario(usuario)
    alterando_papel = [c for c in CAMPOS_DE_PAPEL if c in dados and dados[c] != atual[c]]
    if alterando_papel and not ator['is_admin']:
        raise ErroPermissao('Apenas administradores podem alterar o perfil de acesso.')
    if uid == ator['id'] and ('is_admin' in alterando_papel or 'is_guest' in alterando_papel):
        raise ErroConflito('Você não pode remover o seu próprio acesso de administrador.')

    if 'email' in dados:
        email = _completar_email(dados['email'])
        if email != usuario.email and Usuario.query.filter_by(email=email).first():
            raise ErroConflito('Este email já está em uso.')
        usuario.email = email
    usuario.nome = dados.get('name', usuario.nome)
    usuario.iniciais = dados.get('initials') or usuario.iniciais
    usuario.cor = dados.get('color', usuario.cor)
    usuario.avatar_url = dados.get('avatar_url', usuario.avatar_url)
    usuario.role = dados.get('role', usuario.role)
    usuario.is_admin = bool(dados.get('is_admin', usuario.is_admin))
    usuario.is_guest = bool(dados.get('is_guest', usuario.is_guest))

    db.session.commit()
    return jsonify(serialize_usuario(usuario))


@usuarios_bp.route('/<string:uid>', methods=['DELETE'])
@admin_required
def delete_user(uid):
    if uid == g.ator['id']:
        raise ErroConflito('Você não pode excluir o seu próprio usuário.')
    usuario = db.session.get(Usuario, uid)
    if not usuario:
        raise ErroNaoEncontrado('Usuário não encontrado.')
    db.session.delete(usuario)
    db.session.commit()
    logger.info("Usuário %s excluído por %s", usuario.email, g.ator['email'])
    return jsonify({'status': 'success'})


@usuarios_bp.route('/<string:uid>/set-password', methods=['POST'])
@login_required
def set_user_password(uid):
    if not g.ator['is_admin'] and uid != g.ator['id']:
        raise ErroPermissao('Você só pode alterar a sua própria senha.')
    dados = ler_json()
    _validar_senha(dados.get('password'))

    usuario = db.session.get(Usuario, uid)
    if not usuario:
        raise ErroNaoEncontrado('Usuário não encontrado.')
    usuario.password_hash = generate_password_hash(dados['password'])
    db.session.commit()
    return jsonify({"status": "success", "message": "Senha atualizada com sucesso."})
