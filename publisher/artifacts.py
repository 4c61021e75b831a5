import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence

from eth_typing import ABI
from eth_utils import add_0x_prefix

from publisher.constants import (
    INPUTS_DIRNAME,
    SOLIDITY_LANGUAGE,
    SOURCE_STRATEGY,
    STANDARD_JSON_STRATEGY,
)
from publisher.errors import ArtifactNotFoundError
from publisher.utils import _load_json

ContractName = str

# settings that only make sense on the machine that compiled the contract
LOCAL_ONLY_SETTINGS = ("remappings",)


class Artifact(NamedTuple):
    """Compiled output of a single contract."""

    contract_name: ContractName
    abi: ABI
    bytecode: str
    compiler: typing.Dict
    source_codes: typing.Dict[str, str]

    @property
    def compiler_version(self) -> str:
        return self.compiler["version"]

    @property
    def compiler_settings(self) -> typing.Dict:
        return self.compiler.get("settings") or dict()

    @classmethod
    def from_dict(cls, data: typing.Dict, contract_name: ContractName) -> "Artifact":
        """
        Accepts both the nested `compilerOutput` layout and the flat
        `abi`/`bytecode` layout.
        """
        if "compilerOutput" in data:
            compiler_output = data["compilerOutput"]
            abi = compiler_output["abi"]
            bytecode = compiler_output["evm"]["bytecode"]["object"]
        else:
            abi = data["abi"]
            bytecode = data["bytecode"]
            if isinstance(bytecode, dict):
                bytecode = bytecode["object"]

        compiler = data.get("compiler")
        if not compiler or not compiler.get("version"):
            raise ValueError(f"Artifact for {contract_name} carries no compiler version.")

        return cls(
            contract_name=data.get("contractName", contract_name),
            abi=list(abi),
            bytecode=add_0x_prefix(bytecode),
            compiler=dict(compiler),
            source_codes=dict(data.get("sourceCodes") or dict()),
        )


class CompilerInput(NamedTuple):
    """Solidity standard-json compiler input."""

    language: str
    sources: typing.Dict[str, typing.Dict[str, str]]
    settings: typing.Dict

    def to_dict(self) -> typing.Dict:
        return {"language": self.language, "sources": self.sources, "settings": self.settings}

    @classmethod
    def from_source(cls, artifact: Artifact, source: str) -> "CompilerInput":
        settings = {
            key: value
            for key, value in artifact.compiler_settings.items()
            if key not in LOCAL_ONLY_SETTINGS
        }
        return cls(
            language=SOLIDITY_LANGUAGE,
            sources={f"{artifact.contract_name}.sol": {"content": source}},
            settings=settings,
        )

    @classmethod
    def from_dict(cls, data: typing.Dict) -> "CompilerInput":
        if "sources" not in data or "settings" not in data:
            raise ValueError("Compiler input requires 'sources' and 'settings'.")
        return cls(
            language=data.get("language", SOLIDITY_LANGUAGE),
            sources=dict(data["sources"]),
            settings=dict(data["settings"]),
        )


class ContractBundle(NamedTuple):
    """An artifact plus what is needed to reproduce its compilation."""

    artifact: Artifact
    source: Optional[str] = None
    standard_input: Optional[CompilerInput] = None

    @property
    def contract_name(self) -> ContractName:
        return self.artifact.contract_name

    def compiler_input(self) -> CompilerInput:
        """Returns a freshly built compiler input for verification."""
        if self.standard_input is not None:
            return self.standard_input
        return CompilerInput.from_source(self.artifact, self.source)


# Strategies


class CompilerInputStrategy(ABC):
    NAME = NotImplemented

    @abstractmethod
    def bundle(self, artifact: Artifact) -> ContractBundle:
        raise NotImplementedError


class PreprocessedSource(CompilerInputStrategy):
    """Derives the compiler input from preprocessed (flattened) source."""

    NAME = SOURCE_STRATEGY

    def __init__(self, sources_dir: Optional[Path] = None):
        self.sources_dir = sources_dir

    def _read_source(self, artifact: Artifact) -> str:
        filename = f"{artifact.contract_name}.sol"
        if self.sources_dir is not None:
            filepath = self.sources_dir / filename
            if filepath.exists():
                return filepath.read_text()

        # fall back to source embedded in the artifact
        for path, source in artifact.source_codes.items():
            if path == filename or path.endswith(f"/{filename}"):
                return source

        raise ArtifactNotFoundError(f"No source found for {artifact.contract_name}.")

    def bundle(self, artifact: Artifact) -> ContractBundle:
        return ContractBundle(artifact=artifact, source=self._read_source(artifact))


class PrecomputedInput(CompilerInputStrategy):
    """Loads a ready standard-json compiler input."""

    NAME = STANDARD_JSON_STRATEGY

    def __init__(self, inputs_dir: Path):
        self.inputs_dir = inputs_dir

    def bundle(self, artifact: Artifact) -> ContractBundle:
        filepath = self.inputs_dir / f"{artifact.contract_name}.json"
        if not filepath.exists():
            raise ArtifactNotFoundError(
                f"No compiler input found for {artifact.contract_name} at {filepath}."
            )
        standard_input = CompilerInput.from_dict(_load_json(filepath))
        return ContractBundle(artifact=artifact, standard_input=standard_input)


def get_strategy(
    name: str,
    artifacts_dir: Path,
    sources_dir: Optional[Path] = None,
    inputs_dir: Optional[Path] = None,
) -> CompilerInputStrategy:
    if name == PreprocessedSource.NAME:
        return PreprocessedSource(sources_dir=sources_dir)
    if name == PrecomputedInput.NAME:
        return PrecomputedInput(inputs_dir=inputs_dir or artifacts_dir / INPUTS_DIRNAME)
    raise ValueError(f"Unknown compiler input strategy '{name}'.")


class ArtifactStore:
    """Loads compiled contracts from `<artifacts dir>/<ContractName>.json`."""

    def __init__(self, artifacts_dir: Path, strategy: CompilerInputStrategy):
        self.artifacts_dir = artifacts_dir
        self.strategy = strategy

    @classmethod
    def from_config(cls, config) -> "ArtifactStore":
        strategy = get_strategy(
            name=config.strategy,
            artifacts_dir=config.artifacts_dir,
            sources_dir=config.sources_dir,
            inputs_dir=config.inputs_dir,
        )
        return cls(artifacts_dir=config.artifacts_dir, strategy=strategy)

    def get_artifact(self, contract_name: ContractName) -> Artifact:
        filepath = self.artifacts_dir / f"{contract_name}.json"
        if not filepath.exists():
            raise ArtifactNotFoundError(
                f"No compiled output for {contract_name} in {self.artifacts_dir}."
            )
        return Artifact.from_dict(_load_json(filepath), contract_name=contract_name)

    def missing(self, contract_names: Sequence[ContractName]) -> List[ContractName]:
        return [
            name for name in contract_names if not (self.artifacts_dir / f"{name}.json").exists()
        ]

    def load(self, contract_names: Sequence[ContractName]) -> Dict[ContractName, ContractBundle]:
        """Loads every named contract, failing before returning anything if one is missing."""
        missing = self.missing(contract_names)
        if missing:
            raise ArtifactNotFoundError(
                f"No compiled output for {', '.join(missing)} in {self.artifacts_dir}."
            )

        bundles = OrderedDict()
        for contract_name in contract_names:
            artifact = self.get_artifact(contract_name)
            bundles[contract_name] = self.strategy.bundle(artifact)
        return bundles
