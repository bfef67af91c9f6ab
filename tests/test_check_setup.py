"""
Tests for the deployment setup check script
"""

import json
import pytest
from unittest.mock import patch

from scripts import check_setup
from utils.config import load_config


PRIVATE_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Defaults pointing at temporary contract/artifact dirs"""
    for name in ('DEPLOY_NETWORK', 'DEPLOY_CONTRACT', 'DEPLOY_CONFIG', 'DEPLOYER_PRIVATE_KEY'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    config = load_config()
    config['contracts_dir'] = str(tmp_path / 'contracts')
    config['artifacts_dir'] = str(tmp_path / 'artifacts')
    return config


class TestChecks:
    """Test individual checks"""

    def test_environment_missing_key(self, config):
        assert check_setup.check_environment_variables(config) is False

    def test_environment_valid_key(self, config, monkeypatch):
        monkeypatch.setenv('DEPLOYER_PRIVATE_KEY', PRIVATE_KEY)

        assert check_setup.check_environment_variables(config) is True

    def test_environment_invalid_key(self, config, monkeypatch):
        monkeypatch.setenv('DEPLOYER_PRIVATE_KEY', '0x1234')

        assert check_setup.check_environment_variables(config) is False

    def test_artifacts_missing(self, config):
        assert check_setup.check_contract_artifacts(config) is False

    def test_artifacts_present(self, config, tmp_path):
        path = tmp_path / 'artifacts' / 'contracts' / 'HelloWorld.sol' / 'HelloWorld.json'
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({
            'contractName': 'HelloWorld',
            'abi': [],
            'bytecode': '0x6080'
        }))

        assert check_setup.check_contract_artifacts(config) is True

    def test_artifacts_pending_compile(self, config, tmp_path):
        """Uncompiled sources pass, they are compiled on deploy"""
        (tmp_path / 'contracts').mkdir()
        (tmp_path / 'contracts' / 'HelloWorld.sol').write_text('contract HelloWorld {}')

        assert check_setup.check_contract_artifacts(config) is True

    def test_rpc_unreachable(self, config):
        with patch('scripts.check_setup.Web3') as web3_cls:
            web3_cls.return_value.is_connected.return_value = False

            assert check_setup.check_rpc_connection(config) is False

    def test_rpc_chain_mismatch(self, config):
        with patch('scripts.check_setup.Web3') as web3_cls:
            web3_cls.return_value.is_connected.return_value = True
            web3_cls.return_value.eth.chain_id = 1

            assert check_setup.check_rpc_connection(config) is False


class TestMain:
    """Test summary exit code"""

    def test_all_pass(self, config):
        with patch.object(check_setup, 'check_environment_variables', return_value=True), \
                patch.object(check_setup, 'check_rpc_connection', return_value=True), \
                patch.object(check_setup, 'check_deployer_balance', return_value=True), \
                patch.object(check_setup, 'check_contract_artifacts', return_value=True):
            assert check_setup.main() == 0

    def test_failure_and_exception(self, config):
        """A failing or raising check makes the run fail"""
        with patch.object(check_setup, 'check_environment_variables', return_value=True), \
                patch.object(check_setup, 'check_rpc_connection', side_effect=ConnectionError("refused")), \
                patch.object(check_setup, 'check_deployer_balance', return_value=True), \
                patch.object(check_setup, 'check_contract_artifacts', return_value=True):
            assert check_setup.main() == 1
