"""
Unit Tests for configuration loading
"""

import json
import pytest

from blockchain.exceptions import ConfigurationError
from utils.config import DEFAULT_CONFIG, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's .env and working directory"""
    for name in ('DEPLOY_NETWORK', 'DEPLOY_CONTRACT', 'DEPLOY_CONFIG', 'LOCALHOST_RPC_URL', 'SEPOLIA_RPC_URL'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def write_config(path, data):
    path.write_text(json.dumps(data))
    return str(path)


class TestLoadConfig:
    """Test config file and environment handling"""

    def test_defaults_without_file(self):
        """Missing default file yields the built-in defaults"""
        config = load_config()

        assert config == DEFAULT_CONFIG
        assert config['contract_name'] == 'HelloWorld'
        assert config['constructor_args'] == []

    def test_defaults_not_shared(self):
        """Returned config is a copy"""
        config = load_config()
        config['networks']['localhost']['chain_id'] = 1

        assert DEFAULT_CONFIG['networks']['localhost']['chain_id'] == 31337

    def test_file_merged_over_defaults(self, tmp_path):
        """Nested network entries are merged, not replaced"""
        path = write_config(tmp_path / 'deploy.json', {
            'contract_name': 'Greeter',
            'networks': {'sepolia': {'rpc_url_env': 'SEPOLIA_RPC_URL', 'chain_id': 11155111}}
        })

        config = load_config(path)

        assert config['contract_name'] == 'Greeter'
        assert set(config['networks']) == {'localhost', 'sepolia'}
        assert config['solc_version'] == '0.8.20'

    def test_default_path_in_working_directory(self, tmp_path):
        (tmp_path / 'config').mkdir()
        write_config(tmp_path / 'config' / 'deploy_config.json', {'confirmation_timeout': 30})

        assert load_config()['confirmation_timeout'] == 30

    def test_environment_overrides(self, tmp_path, monkeypatch):
        """DEPLOY_NETWORK and DEPLOY_CONTRACT win over the file"""
        path = write_config(tmp_path / 'deploy.json', {
            'networks': {'sepolia': {'rpc_url_env': 'SEPOLIA_RPC_URL'}}
        })
        monkeypatch.setenv('DEPLOY_NETWORK', 'sepolia')
        monkeypatch.setenv('DEPLOY_CONTRACT', 'Token')

        config = load_config(path)

        assert config['network'] == 'sepolia'
        assert config['contract_name'] == 'Token'

    def test_deploy_config_env_path(self, tmp_path, monkeypatch):
        path = write_config(tmp_path / 'other.json', {'contract_name': 'Other'})
        monkeypatch.setenv('DEPLOY_CONFIG', path)

        assert load_config()['contract_name'] == 'Other'

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(str(tmp_path / 'nope.json'))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"contract_name": ')

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(str(path))

    def test_unknown_network(self, monkeypatch):
        monkeypatch.setenv('DEPLOY_NETWORK', 'mainnet')

        with pytest.raises(ConfigurationError, match="Unknown network 'mainnet'"):
            load_config()

    def test_constructor_args_must_be_list(self, tmp_path):
        path = write_config(tmp_path / 'deploy.json', {'constructor_args': 'hello'})

        with pytest.raises(ConfigurationError, match="constructor_args"):
            load_config(path)
