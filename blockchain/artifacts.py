"""
Artifact Store
Compiles Solidity sources with solc and reads/writes Hardhat-style artifacts

Layout: <artifacts_dir>/<contracts_dir name>/<File>.sol/<ContractName>.json
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
from loguru import logger
from solcx import compile_standard, get_installed_solc_versions, install_solc
from solcx.exceptions import SolcError

from .exceptions import CompilationError, ContractNotFoundError, DeploymentError


@dataclass
class ContractArtifact:
    """Compiled contract: ABI plus creation bytecode"""
    name: str
    abi: List[Dict]
    bytecode: str
    source_name: str = ''
    path: Path = field(default=None, repr=False)

    @classmethod
    def from_file(cls, path: Path) -> 'ContractArtifact':
        try:
            with open(path, 'r') as f:
                data = json.load(f)
            bytecode = data['bytecode']
            artifact = cls(
                name=data['contractName'],
                abi=data['abi'],
                bytecode=bytecode if bytecode.startswith('0x') else '0x' + bytecode,
                source_name=data.get('sourceName', ''),
                path=path
            )
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise DeploymentError(f"Invalid artifact {path}: {e}") from e

        if artifact.bytecode == '0x':
            raise DeploymentError(
                f"Contract {artifact.name} has no bytecode (abstract contract or interface?)"
            )

        return artifact

    def to_dict(self) -> Dict:
        return {
            'contractName': self.name,
            'sourceName': self.source_name,
            'abi': self.abi,
            'bytecode': self.bytecode
        }


class ArtifactStore:
    """
    Compiles contracts on demand and resolves artifacts by contract name
    """

    def __init__(self, contracts_dir: str, artifacts_dir: str, solc_version: str):
        """
        Initialize Artifact Store

        Args:
            contracts_dir: Directory holding *.sol sources
            artifacts_dir: Directory receiving compiled artifacts
            solc_version: Compiler version to install and use
        """
        self.contracts_dir = Path(contracts_dir)
        self.artifacts_dir = Path(artifacts_dir)
        self.solc_version = solc_version

    def _source_files(self) -> List[Path]:
        if not self.contracts_dir.is_dir():
            return []
        return sorted(self.contracts_dir.rglob('*.sol'))

    def _source_name(self, source: Path) -> str:
        """Project-relative source name, e.g. contracts/HelloWorld.sol"""
        relative = source.relative_to(self.contracts_dir)
        return (Path(self.contracts_dir.name) / relative).as_posix()

    def _is_stale(self, source: Path) -> bool:
        artifact_dir = self.artifacts_dir / self._source_name(source)
        artifacts = list(artifact_dir.glob('*.json'))

        if not artifacts:
            return True

        oldest = min(a.stat().st_mtime for a in artifacts)
        return source.stat().st_mtime > oldest

    def needs_compile(self) -> bool:
        """True when any source is missing artifacts or newer than them"""
        return any(self._is_stale(source) for source in self._source_files())

    def _ensure_solc(self):
        installed = [str(v) for v in get_installed_solc_versions()]

        if self.solc_version not in installed:
            logger.info(f"Installing solc {self.solc_version}...")
            install_solc(self.solc_version)

    def compile(self, force: bool = False) -> List[Path]:
        """
        Compile all sources when out of date

        Args:
            force: Recompile even if artifacts are current

        Returns:
            Paths of artifacts written (empty when nothing was compiled)
        """
        sources = self._source_files()

        if not sources:
            logger.debug(f"No Solidity sources in {self.contracts_dir}")
            return []

        if not force and not self.needs_compile():
            logger.info("Nothing to compile")
            return []

        self._ensure_solc()

        standard_input = {
            'language': 'Solidity',
            'sources': {
                self._source_name(source): {'content': source.read_text()}
                for source in sources
            },
            'settings': {
                'optimizer': {'enabled': True, 'runs': 200},
                'outputSelection': {
                    '*': {
                        '*': ['abi', 'evm.bytecode.object']
                    }
                }
            }
        }

        try:
            output = compile_standard(
                standard_input,
                solc_version=self.solc_version,
                allow_paths=str(self.contracts_dir.resolve())
            )
        except SolcError as e:
            raise CompilationError(f"Compilation failed: {e.message}") from e

        errors = [
            entry for entry in output.get('errors', [])
            if entry.get('severity') == 'error'
        ]
        if errors:
            messages = '; '.join(
                entry.get('formattedMessage', entry.get('message', '')).strip()
                for entry in errors
            )
            raise CompilationError(f"Compilation failed: {messages}")

        for entry in output.get('errors', []):
            logger.warning(entry.get('formattedMessage', entry.get('message', '')).strip())

        written = []

        for source_name, contracts in output.get('contracts', {}).items():
            for contract_name, data in contracts.items():
                artifact = ContractArtifact(
                    name=contract_name,
                    abi=data['abi'],
                    bytecode='0x' + data['evm']['bytecode']['object'],
                    source_name=source_name
                )
                written.append(self._write(artifact))

        logger.success(
            f"Compiled {len(sources)} Solidity file(s) with solc {self.solc_version}"
        )
        return written

    def _write(self, artifact: ContractArtifact) -> Path:
        path = self.artifacts_dir / artifact.source_name / f"{artifact.name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(artifact.to_dict(), f, indent=2)

        artifact.path = path
        logger.debug(f"Wrote artifact {path}")
        return path

    def load(self, contract_name: str) -> ContractArtifact:
        """
        Load the artifact for a contract by name

        Raises:
            ContractNotFoundError: No artifact with that name
            DeploymentError: Name is ambiguous or artifact unreadable
        """
        if not self.artifacts_dir.is_dir():
            raise ContractNotFoundError(contract_name)

        matches = sorted(self.artifacts_dir.rglob(f"{contract_name}.json"))

        if not matches:
            raise ContractNotFoundError(contract_name)

        if len(matches) > 1:
            found = ', '.join(str(m.relative_to(self.artifacts_dir)) for m in matches)
            raise DeploymentError(
                f'Multiple artifacts for contract "{contract_name}": {found}'
            )

        return ContractArtifact.from_file(matches[0])
