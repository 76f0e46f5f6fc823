#!/usr/bin/python3
"""
Deploys YourContract to the selected network and prints its address.

    ape run deploy --network ethereum:sepolia:infura

Exits with status 0 once the deployment is confirmed, or 1 after
printing the error.
"""
import sys

from deployment.constants import DEFAULT_CONFIG_FILEPATH
from deployment.deployer import run


def main():
    exit_code = run(config_filepath=DEFAULT_CONFIG_FILEPATH)
    sys.exit(int(exit_code))
