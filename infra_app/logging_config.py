import logging
import os
from logging.handlers import RotatingFileHandler


def setup_logging(log_dir):
    """Configura o logger raiz para gravar em <log_dir>/infra.log e no console."""
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'infra.log')

    formatter = logging.Formatter('%(asctime)s %(levelname)s [%(module)s] %(message)s')

    file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    logger = logging.getLogger()
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == file_handler.baseFilename for h in logger.handlers):
        logger.setLevel(logging.INFO)
        logger.addHandler(file_handler)
        # também registra as requisições do werkzeug
        logging.getLogger('werkzeug').addHandler(file_handler)
    else:
        file_handler.close()

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)
