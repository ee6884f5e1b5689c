from rafflenet.config import CONFIG_FILE, Config, find_project_root, read_config

CONFIG_TEXT = """
dotenv: .env
wallets:
  from_key: ${RAFFLE_TEST_PRIVATE_KEY}
networks:
  local:
    chain_id: 31337
    interval: ${RAFFLE_TEST_INTERVAL}
"""


def test_reads_yaml_loads_dotenv_and_expands_variables(tmp_path, monkeypatch):
    # make sure both variables are unset now and again after the test
    monkeypatch.setenv("RAFFLE_TEST_PRIVATE_KEY", "unset")
    monkeypatch.delenv("RAFFLE_TEST_PRIVATE_KEY")
    monkeypatch.setenv("RAFFLE_TEST_INTERVAL", "45")
    (tmp_path / CONFIG_FILE).write_text(CONFIG_TEXT)
    (tmp_path / ".env").write_text("RAFFLE_TEST_PRIVATE_KEY=0xabc123\n")

    data = read_config(tmp_path)

    assert data["wallets"]["from_key"] == "0xabc123"
    assert data["networks"]["local"] == {"chain_id": 31337, "interval": "45"}
    # defaults survive the merge
    assert data["networks"]["default"] == "development"
    assert data["networks"]["development"]["chain_id"] == 1337
    assert data["front_end"] == {}


def test_unset_variables_are_left_as_placeholders(tmp_path, monkeypatch):
    monkeypatch.setenv("RAFFLE_TEST_PRIVATE_KEY", "unset")
    monkeypatch.delenv("RAFFLE_TEST_PRIVATE_KEY")
    (tmp_path / CONFIG_FILE).write_text("wallets:\n  from_key: ${RAFFLE_TEST_PRIVATE_KEY}\n")

    data = read_config(tmp_path)

    assert data["wallets"]["from_key"] == "${RAFFLE_TEST_PRIVATE_KEY}"


def test_project_root_is_found_from_a_subdirectory(tmp_path):
    (tmp_path / CONFIG_FILE).write_text("networks:\n  default: development\n")
    nested = tmp_path / "scripts" / "vrf_scripts"
    nested.mkdir(parents=True)

    assert find_project_root(nested) == tmp_path.resolve()


def test_config_object_reloads_in_place(tmp_path):
    (tmp_path / CONFIG_FILE).write_text("networks:\n  default: staging\n  staging:\n    interval: 2\n")
    config = Config()

    assert config.load(tmp_path) is config
    assert config["networks"]["default"] == "staging"
    assert config.network_settings("staging") == {"interval": 2}
