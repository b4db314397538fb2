import pytest

from infra_app import create_app
from infra_app.config import CHAVE_DESENVOLVIMENTO

VARIAVEIS = ('SECRET_KEY', 'EMAIL_DOMAIN', 'PORT')


@pytest.fixture
def ambiente_limpo(monkeypatch, tmp_path):
    """Diretório de execução vazio, sem as variáveis da app no ambiente."""
    for nome in VARIAVEIS:
        # setenv antes do delenv garante que o monkeypatch desfaz o que o .env criar
        monkeypatch.setenv(nome, 'x')
        monkeypatch.delenv(nome)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_dotenv_values_reach_app_config(ambiente_limpo, log_dir):
    (ambiente_limpo / '.env').write_text(
        'SECRET_KEY=chave-do-env\nEMAIL_DOMAIN=@exemplo.com\nPORT=8081\n', encoding='utf-8'
    )
    app = create_app({'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:', 'LOG_DIR': log_dir})

    assert app.config['SECRET_KEY'] == 'chave-do-env'
    assert app.config['EMAIL_DOMAIN'] == '@exemplo.com'
    assert app.config['PORT'] == 8081


def test_exported_variable_wins_over_dotenv(ambiente_limpo, log_dir, monkeypatch):
    (ambiente_limpo / '.env').write_text('SECRET_KEY=chave-do-env\n', encoding='utf-8')
    monkeypatch.setenv('SECRET_KEY', 'chave-exportada')
    app = create_app({'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:', 'LOG_DIR': log_dir})

    assert app.config['SECRET_KEY'] == 'chave-exportada'


def test_missing_secret_key_falls_back_to_dev_key(ambiente_limpo, log_dir):
    app = create_app({'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:', 'LOG_DIR': log_dir})

    assert app.config['SECRET_KEY'] == CHAVE_DESENVOLVIMENTO
    assert app.config['EMAIL_DOMAIN'] == '@menubrands.com.br'
