import json
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from ape import networks
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex
from web3.types import ABI

from deployment.utils import _load_json

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single deployed contract in a registry file."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json", by_alias=True))
    return contract_abi


def _get_entry(contract_instance: ContractInstance) -> RegistryEntry:
    """Builds a registry entry from the receipt of the contract's creation transaction."""
    if not contract_instance.txn_hash:
        raise ValueError(
            f"{contract_instance.contract_type.name} at {contract_instance.address} "
            "has no creation transaction hash."
        )
    receipt = networks.provider.get_receipt(contract_instance.txn_hash)
    tx_hash = receipt.txn_hash
    if not isinstance(tx_hash, str):
        tx_hash = to_hex(tx_hash)
    entry = RegistryEntry(
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        chain_id=networks.provider.chain_id,
        tx_hash=tx_hash,
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
    )
    return entry


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts["abi"],
                tx_hash=artifacts["tx_hash"],
                block_number=artifacts["block_number"],
                deployer=artifacts["deployer"],
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """
    Writes a contract registry to a file.

    Existing registry files are updated in place; an entry for a contract
    already recorded on the same chain is replaced by the newer deployment.
    """
    if not entries:
        if not silent:
            print("No entries provided.")
        return filepath

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = defaultdict(dict)
    if filepath.exists():
        if not silent:
            print(f"Updating existing registry at {filepath}.")
        for chain_id, chain_entries in _load_json(filepath).items():
            data[chain_id].update(chain_entries)
    elif not silent:
        print(f"Creating new registry at {filepath}.")

    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        chain_entries = data[str(entry.chain_id)]
        if entry.name in chain_entries and not silent:
            print(f"Replacing {entry.name} entry for chain id {entry.chain_id}.")
        chain_entries[entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
        }

    # Sort chain ids and contract names to enforce common order
    ordered_data = {
        chain_id: dict(sorted(data[chain_id].items())) for chain_id in sorted(data, key=int)
    }
    with open(filepath, "w") as file:
        json.dump(ordered_data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def registry_from_ape_deployments(
    deployments: List[ContractInstance],
    output_filepath: Path,
) -> Path:
    """Records ape deployments in a contract registry."""
    entries = [_get_entry(contract_instance=instance) for instance in deployments]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


def registry_entries_for_chain(
    filepath: Path, chain_id: ChainId
) -> Dict[ContractName, RegistryEntry]:
    """Returns the registry entries recorded for a single chain, keyed by contract name."""
    entries = dict()
    if not filepath.exists():
        return entries
    for entry in read_registry(filepath=filepath):
        if entry.chain_id == chain_id:
            entries[entry.name] = entry
    return entries


def lookup_address(
    filepath: Path, chain_id: ChainId, contract_name: ContractName
) -> Optional[ChecksumAddress]:
    """Returns the registered address of a contract on a chain, if any."""
    entry = registry_entries_for_chain(filepath, chain_id).get(contract_name)
    return entry.address if entry else None
