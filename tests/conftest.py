import uuid

import pytest
from werkzeug.security import generate_password_hash

from infra_app import create_app
from infra_app.extensions import db
from infra_app.formatacao import iniciais
from infra_app.models import Usuario

SENHA = 'senha123'


@pytest.fixture(scope='session')
def log_dir(tmp_path_factory):
    return str(tmp_path_factory.mktemp('logs'))


@pytest.fixture
def app(log_dir):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SECRET_KEY': 'teste',
        'LOG_DIR': log_dir,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def criar_usuario(app):
    def _criar(nome, email, is_admin=False, is_guest=False, senha=SENHA):
        with app.app_context():
            usuario = Usuario(
                id=str(uuid.uuid4()),
                email=email,
                nome=nome,
                role='Administrador' if is_admin else 'Técnico',
                iniciais=iniciais(nome),
                is_admin=is_admin,
                is_guest=is_guest,
                password_hash=generate_password_hash(senha),
            )
            db.session.add(usuario)
            db.session.commit()
            return usuario.id
    return _criar


@pytest.fixture
def admin_id(criar_usuario):
    return criar_usuario('Ana Lima', 'ana@menubrands.com.br', is_admin=True)


@pytest.fixture
def tecnico_id(criar_usuario):
    return criar_usuario('Bruno Costa', 'bruno@menubrands.com.br')


@pytest.fixture
def outro_tecnico_id(criar_usuario):
    return criar_usuario('Carla Souza', 'carla@menubrands.com.br')


@pytest.fixture
def convidado_id(criar_usuario):
    return criar_usuario('Diretoria', 'diretoria@menubrands.com.br', is_guest=True)


@pytest.fixture
def logar(app):
    """Retorna um cliente de teste já autenticado com o email informado."""
    def _logar(email, senha=SENHA):
        client = app.test_client()
        resp = client.post('/api/usuarios/login', json={'email': email, 'password': senha})
        assert resp.status_code == 200, resp.get_json()
        return client
    return _logar


@pytest.fixture
def admin(admin_id, logar):
    return logar('ana@menubrands.com.br')


@pytest.fixture
def tecnico(tecnico_id, logar):
    return logar('bruno@menubrands.com.br')


@pytest.fixture
def outro_tecnico(outro_tecnico_id, logar):
    return logar('carla@menubrands.com.br')


@pytest.fixture
def convidado(convidado_id, logar):
    return logar('diretoria@menubrands.com.br')


@pytest.fixture
def nova_os():
    """Cria uma OS pelo cliente informado e retorna o JSON dela."""
    def _nova_os(client, **campos):
        dados = {'title': 'Ar-condicionado pingando', 'unit': 'Aldeota', **campos}
        resp = client.post('/api/ordens', json=dados)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _nova_os
