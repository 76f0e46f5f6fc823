import json
from pathlib import Path
from typing import List, Optional

import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from deployment.networks import is_local_network


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file; an empty file loads as an empty mapping."""
    return yaml.safe_load(Path(filepath).read_text()) or dict()


def _load_json(filepath: Path) -> dict:
    return json.loads(Path(filepath).read_text())


def validate_network(chain_id: Optional[int]) -> None:
    """
    Checks that the chain_id specified in the config file (if any)
    matches the chain_id of the connected live network.
    """
    print("Validating network...")
    if chain_id is None:
        return

    network_chain_id = networks.provider.chain_id
    if chain_id != network_chain_id and not is_local_network():
        raise ValueError(
            f"chain_id in config file ({chain_id}) does not match "
            f"chain_id of current network ({network_chain_id})."
        )


def check_explorer(verify: bool) -> None:
    """Checks that contracts can be published to an explorer when verification is requested."""
    if not verify or is_local_network():
        # nothing gets published from local networks
        return
    network = networks.provider.network
    if network.explorer is None:
        raise ValueError(
            f"No explorer available for {network.ecosystem.name}:{network.name}; "
            "install the ape-etherscan plugin to verify contracts."
        )


def verify_contracts(contracts: List[ContractInstance]) -> None:
    if is_local_network():
        print("(i) Local network; skipping verification.")
        return
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name} at {instance.address}...")
        explorer.publish_contract(instance.address)


def get_contract_factory(contract_name: str) -> ContractContainer:
    """Returns the contract factory for a compiled project contract, looked up by name."""
    try:
        return getattr(project, contract_name)
    except AttributeError:
        raise ValueError(
            f"No compiled contract named '{contract_name}' found in the project."
        )


def check_no_constructor_arguments(container: ContractContainer) -> None:
    """Contracts are deployed without constructor arguments."""
    abi_inputs = container.constructor.abi.inputs
    if abi_inputs:
        names = ", ".join(abi_input.name or abi_input.type for abi_input in abi_inputs)
        raise ValueError(
            f"{container.contract_type.name} constructor expects {len(abi_inputs)} "
            f"argument(s) ({names}); only argument-less constructors can be deployed."
        )
