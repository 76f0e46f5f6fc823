import typing
from pathlib import Path
from typing import Dict, Optional

from deployment.constants import ARTIFACTS_DIR, DEFAULT_CONTRACT_NAME
from deployment.utils import _load_yaml

CONTRACT_KEY = "contract"
ACCOUNT_KEY = "account"
AUTOSIGN_KEY = "autosign"
CHAIN_ID_KEY = "chain_id"
CONFIRMATIONS_KEY = "required_confirmations"
VERIFY_KEY = "verify"
REGISTRY_KEY = "registry"

CONFIG_KEYS = (
    CONTRACT_KEY,
    ACCOUNT_KEY,
    AUTOSIGN_KEY,
    CHAIN_ID_KEY,
    CONFIRMATIONS_KEY,
    VERIFY_KEY,
    REGISTRY_KEY,
)


class DeploymentConfigError(ValueError):
    pass


def _optional_int(data: Dict, key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DeploymentConfigError(f"'{key}' must be a non-negative integer, got {value!r}.")
    return value


def _bool(data: Dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise DeploymentConfigError(f"'{key}' must be true or false, got {value!r}.")
    return value


def _registry_filepath(data: Dict) -> Optional[Path]:
    registry_config = data.get(REGISTRY_KEY)
    if registry_config is None:
        return None
    if not isinstance(registry_config, dict):
        raise DeploymentConfigError(f"'{REGISTRY_KEY}' must be a mapping.")
    filename = registry_config.get("filename")
    if not filename:
        raise DeploymentConfigError("registry filename is not set in config file.")
    registry_dir = Path(registry_config.get("dir", ARTIFACTS_DIR))
    return registry_dir / filename


class DeploymentConfig(typing.NamedTuple):
    """Everything a single contract deployment needs, besides the network itself."""

    contract_name: str = DEFAULT_CONTRACT_NAME
    account: Optional[str] = None
    autosign: bool = False
    chain_id: Optional[int] = None
    required_confirmations: Optional[int] = None
    verify: bool = False
    registry_filepath: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "DeploymentConfig":
        data = data or dict()
        if not isinstance(data, dict):
            raise DeploymentConfigError("Malformed deployment config; expected a mapping.")
        unknown_keys = sorted(str(key) for key in data if key not in CONFIG_KEYS)
        if unknown_keys:
            raise DeploymentConfigError(
                f"Unknown deployment config key(s): {', '.join(unknown_keys)}."
            )

        contract_name = data.get(CONTRACT_KEY, DEFAULT_CONTRACT_NAME)
        if not isinstance(contract_name, str) or not contract_name:
            raise DeploymentConfigError(f"'{CONTRACT_KEY}' must be a contract name.")

        account = data.get(ACCOUNT_KEY)
        if account is not None and not isinstance(account, str):
            raise DeploymentConfigError(f"'{ACCOUNT_KEY}' must be an ape account alias.")

        return cls(
            contract_name=contract_name,
            account=account,
            autosign=_bool(data, AUTOSIGN_KEY),
            chain_id=_optional_int(data, CHAIN_ID_KEY),
            required_confirmations=_optional_int(data, CONFIRMATIONS_KEY),
            verify=_bool(data, VERIFY_KEY),
            registry_filepath=_registry_filepath(data),
        )

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeploymentConfig":
        if not Path(filepath).exists():
            raise DeploymentConfigError(f"Deployment config not found at {filepath}")
        print(f"Loading deployment config from {filepath}...")
        return cls.from_dict(_load_yaml(filepath))
