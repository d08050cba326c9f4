from datetime import datetime

from hero_server.config import Config
from hero_server.utils.logger import log_file_path, setup_logger


def test_log_file_path_uses_config(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, 'LOG_DIR', str(tmp_path))
    monkeypatch.setattr(Config, 'LOG_FILE_PREFIX', 'arena')

    path = log_file_path(day=datetime(2024, 1, 31))

    assert path == tmp_path / 'arena_20240131.log'


def test_setup_logger_writes_to_configured_dir(monkeypatch, tmp_path):
    log_dir = tmp_path / 'nested' / 'logs'
    monkeypatch.setattr(Config, 'LOG_DIR', str(log_dir))
    monkeypatch.setattr(Config, 'LOG_FILE_PREFIX', 'arena')

    logger = setup_logger('hero_server.tests.configured')
    try:
        assert setup_logger('hero_server.tests.configured') is logger
        assert len(logger.handlers) == 2
        logger.info("written")
        for handler in logger.handlers:
            handler.flush()

        assert 'written' in log_file_path().read_text(encoding='utf-8')
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
