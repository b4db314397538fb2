# infra_app/models.py
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.types import JSON
from .extensions import db

# --- MODELOS PRINCIPAIS ---

class OrdemServico(db.Model):
    __tablename__ = 'ordem_servico'

    id = db.Column(db.String(20), primary_key=True)  # ex: OS-24017
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    unit = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(50), default='Aberta')
    priority = db.Column(db.String(20))
    type = db.Column(db.String(50))
    owner_id = db.Column(db.String(100), db.ForeignKey('usuario.id'), nullable=False)
    date_opened = db.Column(db.String(100), nullable=False)
    date_forecast = db.Column(db.String(100))
    date_closed = db.Column(db.String(100))
    # Lista de {'id', 'date', 'message'}, da mais recente para a mais antiga
    history = db.Column(MutableList.as_mutable(JSON), default=list)
    archived = db.Column(db.Boolean, default=False, nullable=False)


class Despesa(db.Model):
    id = db.Column(db.String(20), primary_key=True)  # ex: FIN-24003
    item = db.Column(db.String(200), nullable=False)
    value = db.Column(db.Float, nullable=False, default=0)
    date = db.Column(db.String(100), nullable=False)
    supplier = db.Column(db.String(200))
    category = db.Column(db.String(50))
    payment_method = db.Column(db.String(50))
    warranty_parts_months = db.Column(db.Integer, default=0)
    warranty_service_months = db.Column(db.Integer, default=0)
    linked_os_id = db.Column(db.String(20), index=True)
    unit = db.Column(db.String(50))
    payment_data = db.Column(MutableDict.as_mutable(JSON), default=dict)  # ex: {'pix_key': ...}
    created_at = db.Column(db.String(100), nullable=False)


class Bem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    asset_tag = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100))
    unit = db.Column(db.String(50))
    brand = db.Column(db.String(100), default='')
    model = db.Column(db.String(100), default='')
    description = db.Column(db.Text, default='')
    value = db.Column(db.Float, default=0)
    status = db.Column(db.String(50), default='Ativo')
    registration_date = db.Column(db.String(100))
    # {'has_warranty', 'start_date', 'end_date', 'notes'}
    warranty = db.Column(MutableDict.as_mutable(JSON), default=dict)
    # {'supplier', 'invoice_number', 'invoice_date', 'attachment'}
    invoice_info = db.Column(MutableDict.as_mutable(JSON), default=dict)
    photo_url = db.Column(db.Text)
    linked_os_ids = db.Column(MutableList.as_mutable(JSON), default=list)


class RegistroManutencao(db.Model):
    __tablename__ = 'registro_manutencao'

    id = db.Column(db.Integer, primary_key=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('bem.id'), nullable=False)
    provider_name = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.String(200))
    date_out = db.Column(db.String(100), nullable=False)
    date_return_forecast = db.Column(db.String(100))
    description = db.Column(db.Text, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    date_returned = db.Column(db.String(100))

    bem = db.relationship('Bem', backref=db.backref('manutencoes', lazy=True, cascade='all, delete-orphan'))


class TarefaPessoal(db.Model):
    __tablename__ = 'tarefa_pessoal'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(100), db.ForeignKey('usuario.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    due_date = db.Column(db.String(100))
    completed = db.Column(db.Boolean, default=False, nullable=False)
    priority = db.Column(db.String(20), default='medium')
    linked_os_id = db.Column(db.String(20))
    created_at = db.Column(db.String(100), nullable=False)

# --- MODELOS DE SUPORTE ---

class Usuario(db.Model):
    id = db.Column(db.String(100), primary_key=True)
    email = db.Column(db.String(150), unique=True, nullable=False)
    nome = db.Column(db.String(150))
    role = db.Column(db.String(50))
    iniciais = db.Column(db.String(4))
    cor = db.Column(db.String(50), default='bg-indigo-500')
    avatar_url = db.Column(db.Text)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    is_guest = db.Column(db.Boolean, default=False, nullable=False)
    password_hash = db.Column(db.String(256))


class Fornecedor(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False)
    category = db.Column(db.String(100))
    contact_info = db.Column(db.String(200))


class ListaDinamica(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(100), unique=True, nullable=False) # ex: 'categorias_bens'
    itens = db.Column(MutableList.as_mutable(JSON), default=list) # Lista de strings ['Mobiliário', 'Outros']


class Notificacao(db.Model):
    id = db.Column(db.String(64), primary_key=True)
    type = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(150), nullable=False)
    message = db.Column(db.String(255), nullable=False)
    link_id = db.Column(db.String(100))
    date = db.Column(db.String(100), nullable=False)
    read = db.Column(db.Boolean, default=False, nullable=False)
    user_initials = db.Column(db.String(4))
