from enum import IntEnum
from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONFIGS_DIR = DEPLOYMENT_DIR / "configs"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

DEFAULT_CONFIG_FILEPATH = CONFIGS_DIR / "your_contract.yml"

#
# Contracts
#

DEFAULT_CONTRACT_NAME = "YourContract"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

#
# Process
#


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1


SUCCESS_MESSAGE = "Contract deployed to: {address}"
