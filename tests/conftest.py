import pytest
import yaml
from ape.contracts import ContractContainer
from ethpm_types import ContractType

from deployment.config import DeploymentConfig

DEPLOYED_CONTRACT_NAME = "YourContract"

# init code that deploys a single STOP opcode as runtime code
MINIMAL_INIT_CODE = "0x6001600c60003960016000f300"
# init code that reverts the creation
REVERTING_INIT_CODE = "0x60006000fd"

OWNER_CONSTRUCTOR_ABI = {
    "type": "constructor",
    "stateMutability": "nonpayable",
    "inputs": [
        {"name": "_owner", "type": "address", "internalType": "address"},
        {"name": "_supply", "type": "uint256", "internalType": "uint256"},
    ],
}


def make_container(init_code, abi=None, name=DEPLOYED_CONTRACT_NAME) -> ContractContainer:
    contract_type = ContractType.model_validate(
        {
            "contractName": name,
            "abi": abi or [],
            "deploymentBytecode": {"bytecode": init_code},
            "runtimeBytecode": {"bytecode": "0x00"},
        }
    )
    return ContractContainer(contract_type)


# Fixtures
@pytest.fixture
def deployer_account(accounts):
    return accounts[0]


@pytest.fixture
def your_contract():
    return make_container(MINIMAL_INIT_CODE)


@pytest.fixture
def reverting_contract():
    return make_container(REVERTING_INIT_CODE)


@pytest.fixture
def contract_lookup(monkeypatch):
    """Replaces the project artifact lookup with the given contract factory."""

    def _use(container):
        monkeypatch.setattr(
            "deployment.deployer.get_contract_factory", lambda contract_name: container
        )

    return _use


@pytest.fixture
def config_file(tmp_path):
    def _write(data):
        filepath = tmp_path / "deployment.yml"
        filepath.write_text(yaml.safe_dump(data))
        return filepath

    return _write


@pytest.fixture
def default_config():
    return DeploymentConfig()
