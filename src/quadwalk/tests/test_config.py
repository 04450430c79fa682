from quadwalk.config import _ENV_KEYS, QuadwalkConfig, load_config


def test_defaults(monkeypatch):
    for key in _ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    cfg = load_config()
    assert cfg.i2c_bus == 1
    assert cfg.address == 0x40
    assert cfg.steps == 20
    assert cfg.interpolation == "truncate"
    assert cfg.abort_on_write_failure is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QUADWALK_I2C_BUS", "7")
    monkeypatch.setenv("QUADWALK_PCA_ADDR", "0x41")
    monkeypatch.setenv("QUADWALK_INTERPOLATION", "ROUND")
    monkeypatch.setenv("QUADWALK_ABORT_ON_WRITE_FAILURE", "no")
    monkeypatch.setenv("QUADWALK_RETRY_DELAY_US", "10000")
    monkeypatch.setenv("QUADWALK_LOG_FILE", "/tmp/quadwalk.log")

    cfg = load_config()
    assert cfg.i2c_bus == 7
    assert cfg.address == 0x41
    assert cfg.interpolation == "round"
    assert cfg.abort_on_write_failure is False
    assert cfg.retry_delay_us == 10000
    assert cfg.log_file == "/tmp/quadwalk.log"


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("QUADWALK_STEPS", "many")
    monkeypatch.setenv("QUADWALK_PCA_ADDR", "nope")
    monkeypatch.setenv("QUADWALK_INTERPOLATION", "cubic")

    cfg = load_config()
    defaults = QuadwalkConfig()
    assert cfg.steps == defaults.steps
    assert cfg.address == defaults.address
    assert cfg.interpolation == defaults.interpolation
