# set_admin_password.py
import argparse
import logging
import uuid

from werkzeug.security import generate_password_hash
from infra_app import create_app
from infra_app.extensions import db
from infra_app.models import Usuario

logger = logging.getLogger(__name__)


def setup_initial_admin(email, senha, nome="Administrador Sistema"):
    app = create_app()

    with app.app_context():
        # create_app já garante as tabelas e a lista de categorias
        if '@' not in email:
            email = f"{email}{app.config['EMAIL_DOMAIN']}"

        user = Usuario.query.filter_by(email=email).first()
        if user:
            logger.info("O usuário %s já existe. Atualizando senha e permissões...", email)
        else:
            logger.info("Criando novo usuário administrador: %s...", email)
            user = Usuario(id=str(uuid.uuid4()), email=email, nome=nome, iniciais='AD', role='Administrador')
            db.session.add(user)

        user.password_hash = generate_password_hash(senha)
        user.is_admin = True
        user.is_guest = False

        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception("Erro ao salvar o administrador")
            raise
        logger.info("ADMIN CONFIGURADO COM SUCESSO! Usuário: %s", email)
        logger.info("Lembre-se de alterar a senha no primeiro acesso.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Cria ou redefine o administrador do CRM Infra.")
    parser.add_argument('--email', default='admin')
    parser.add_argument('--senha', default='admin123')
    parser.add_argument('--nome', default='Administrador Sistema')
    args = parser.parse_args()
    setup_initial_admin(args.email, args.senha, args.nome)
