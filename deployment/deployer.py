import sys
import traceback
import typing
from contextlib import redirect_stdout
from pathlib import Path
from typing import Any, List

from ape import accounts, networks
from ape.api import AccountAPI
from ape.contracts.base import ContractContainer, ContractInstance

from deployment.config import DeploymentConfig, DeploymentConfigError
from deployment.constants import SUCCESS_MESSAGE, ExitCode
from deployment.networks import is_local_network
from deployment.registry import lookup_address, registry_from_ape_deployments
from deployment.utils import (
    check_explorer,
    check_no_constructor_arguments,
    get_contract_factory,
    validate_network,
    verify_contracts,
)


class DeploymentFailed(Exception):
    """Raised when a contract could not be deployed, whatever the underlying cause."""


def _select_account(config: DeploymentConfig) -> AccountAPI:
    if is_local_network():
        return accounts.test_accounts[0]
    if not config.account:
        raise DeploymentConfigError(
            "An ape account alias ('account') is required to deploy to a live network."
        )
    account = accounts.load(config.account)
    if config.autosign:
        print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        account.set_autosign(True)
    return account


class Deployer:
    """
    Represents an ape account plus the deployment config
    of a single contract, plus annotated execution.
    """

    def __init__(self, config: DeploymentConfig, account: typing.Optional[AccountAPI] = None):
        self.config = config
        self._account = account or _select_account(config)
        self._print_deployment_info()

    def get_account(self) -> AccountAPI:
        """Returns the deployer account."""
        return self._account

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the deployment kwargs."""
        kwargs = dict()
        if self.config.required_confirmations is not None:
            kwargs["required_confirmations"] = self.config.required_confirmations
        return kwargs

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        check_no_constructor_arguments(container)
        self._print_previous_deployment(contract_name)
        print(f"Deploying {contract_name}...")
        # blocks until the creation transaction has the required confirmations
        return self.get_account().deploy(container, **self._get_kwargs())

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """
        Records the deployments in the registry and optionally publishes them to block explorers.
        """
        if self.config.registry_filepath is not None:
            registry_from_ape_deployments(
                deployments=deployments,
                output_filepath=self.config.registry_filepath,
            )
        if self.config.verify:
            verify_contracts(contracts=deployments)

    def _print_previous_deployment(self, contract_name: str) -> None:
        if self.config.registry_filepath is None:
            return
        previous_address = lookup_address(
            filepath=self.config.registry_filepath,
            chain_id=networks.provider.chain_id,
            contract_name=contract_name,
        )
        if previous_address:
            print(f"(i) {contract_name} was previously deployed to {previous_address}")

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Contract: {self.config.contract_name}",
            f"Registry: {self.config.registry_filepath}",
            f"Verify: {self.config.verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.chain_id}",
            sep="\n",
        )


def deploy_contract(
    config: DeploymentConfig, account: typing.Optional[AccountAPI] = None
) -> ContractInstance:
    """
    Deploys the configured contract and waits for the creation transaction to be confirmed.
    """
    try:
        validate_network(chain_id=config.chain_id)
        check_explorer(verify=config.verify)
        container = get_contract_factory(config.contract_name)
        deployer = Deployer(config=config, account=account)
        instance = deployer.deploy(container)
        deployer.finalize(deployments=[instance])
    except Exception as e:
        raise DeploymentFailed(f"Deployment of {config.contract_name} failed: {e}") from e
    return instance


def run(config_filepath: Path, account: typing.Optional[AccountAPI] = None) -> ExitCode:
    """
    Deploys the contract described by a config file; returns the process exit code.

    Standard output only ever carries the success line; progress
    (ours and ape's) is written to standard error.
    """
    try:
        with redirect_stdout(sys.stderr):
            config = DeploymentConfig.from_yaml(config_filepath)
            instance = deploy_contract(config=config, account=account)
    except Exception:
        traceback.print_exc(file=sys.stderr)
        return ExitCode.FAILURE

    print(SUCCESS_MESSAGE.format(address=instance.address))
    return ExitCode.SUCCESS
