import pytest

from hero_server.config import Config
from hero_server.utils.redis_utils import RedisUtils


def test_default_config_is_valid():
    Config.validate()
    assert Config.TOTAL_LEVELS == 32
    assert Config.INITIALLY_UNLOCKED_LEVELS == 2
    assert Config.HERO_POINTS_FORMULA == 'standard'
    assert Config.SUBMISSION_MODE == 'best_score'


@pytest.mark.parametrize("attribute, value", [
    ('TOTAL_LEVELS', 0),
    ('INITIALLY_UNLOCKED_LEVELS', 40),
    ('HERO_POINTS_FORMULA', 'average'),
    ('SUBMISSION_MODE', 'latest'),
    ('SUBMIT_MAX_RETRIES', 0),
])
def test_invalid_config_is_rejected(monkeypatch, attribute, value):
    monkeypatch.setattr(Config, attribute, value)
    with pytest.raises(ValueError):
        Config.validate()


def test_production_redis_requires_tls_and_credentials(monkeypatch):
    monkeypatch.setattr(Config, 'DEBUG', False)
    assert not RedisUtils._validate_redis_security('redis://user:pw@cache:6379')
    assert not RedisUtils._validate_redis_security('rediss://cache:6379')
    assert RedisUtils._validate_redis_security('rediss://user:pw@cache:6379')


def test_development_allows_localhost(monkeypatch):
    monkeypatch.setattr(Config, 'DEBUG', True)
    monkeypatch.delenv('REDIS_URL', raising=False)
    assert RedisUtils._validate_redis_security('redis://localhost:6379')
    assert RedisUtils.get_secure_redis_url() == 'redis://localhost:6379'


def test_production_without_url_has_no_redis(monkeypatch):
    monkeypatch.setattr(Config, 'DEBUG', False)
    monkeypatch.delenv('REDIS_URL', raising=False)
    assert RedisUtils.get_secure_redis_url() is None
