"""
Solidity Compiler
Compiles contract sources with the pinned solc version when no build artifact exists
"""

from pathlib import Path
from typing import Dict, List, Tuple
from loguru import logger
from solcx import compile_standard, get_installed_solc_versions, install_solc

from .errors import ConfigurationError


def ensure_solc(version: str):
    """Install the requested solc release if it is not present"""
    installed = {str(v) for v in get_installed_solc_versions()}

    if version not in installed:
        logger.info(f"Installing solc {version}...")
        install_solc(version)


def compile_contract(source_path: str, contract_name: str, solc_version: str) -> Tuple[List[Dict], str]:
    """
    Compile one contract from source

    Args:
        source_path: Path to the .sol file
        contract_name: Contract to extract from the compiler output
        solc_version: Exact solc version

    Returns:
        (abi, bytecode)
    """
    path = Path(source_path)

    if not path.exists():
        raise ConfigurationError(f"Contract source not found: {source_path}")

    ensure_solc(solc_version)

    logger.info(f"Compiling {path.name} with solc {solc_version}...")

    compiled = compile_standard(
        {
            "language": "Solidity",
            "sources": {path.name: {"content": path.read_text()}},
            "settings": {
                "optimizer": {"enabled": True, "runs": 200},
                "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}}
            },
        },
        solc_version=solc_version,
    )

    contracts = compiled["contracts"][path.name]

    if contract_name not in contracts:
        raise ConfigurationError(f"{contract_name} not found in {source_path}")

    contract_interface = contracts[contract_name]
    abi = contract_interface["abi"]
    bytecode = contract_interface["evm"]["bytecode"]["object"]

    return abi, bytecode
