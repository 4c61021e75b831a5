import json

import pytest

from publisher.artifacts import (
    Artifact,
    ArtifactStore,
    CompilerInput,
    PrecomputedInput,
    PreprocessedSource,
    get_strategy,
)
from publisher.errors import ArtifactNotFoundError
from tests.conftest import RAW_COMPILER_VERSION, artifact_data, contract_source


@pytest.fixture
def source_store(artifacts_dir):
    return ArtifactStore(
        artifacts_dir=artifacts_dir,
        strategy=PreprocessedSource(sources_dir=artifacts_dir.parent / "sources"),
    )


def test_artifact_from_nested_layout():
    artifact = Artifact.from_dict(artifact_data("Foo"), contract_name="Foo")
    assert artifact.contract_name == "Foo"
    assert artifact.bytecode.startswith("0x6080")
    assert artifact.compiler_version == RAW_COMPILER_VERSION
    assert artifact.abi[0]["name"] == "bridgeTransferFrom"


def test_artifact_from_flat_layout():
    data = {
        "contractName": "Foo",
        "abi": [],
        "bytecode": "6080",
        "compiler": {"version": "0.8.20", "settings": {}},
    }
    artifact = Artifact.from_dict(data, contract_name="Foo")
    assert artifact.bytecode == "0x6080"
    assert artifact.compiler_settings == {}


def test_artifact_requires_compiler_version():
    data = artifact_data("Foo")
    del data["compiler"]
    with pytest.raises(ValueError):
        Artifact.from_dict(data, contract_name="Foo")


def test_load_from_preprocessed_source(source_store):
    bundles = source_store.load(["Foo", "Bar"])
    assert list(bundles) == ["Foo", "Bar"]

    bundle = bundles["Bar"]
    assert bundle.source == contract_source("Bar")
    assert bundle.standard_input is None

    compiler_input = bundle.compiler_input()
    assert compiler_input.language == "Solidity"
    assert compiler_input.sources == {"Bar.sol": {"content": contract_source("Bar")}}
    # local remappings never reach the explorer
    assert "remappings" not in compiler_input.settings
    assert compiler_input.settings["optimizer"] == {"enabled": True, "runs": 1000000}


def test_load_from_precomputed_input(artifacts_dir):
    store = ArtifactStore(
        artifacts_dir=artifacts_dir, strategy=PrecomputedInput(inputs_dir=artifacts_dir / "inputs")
    )
    bundle = store.load(["Foo"])["Foo"]
    assert bundle.source is None
    assert list(bundle.compiler_input().sources) == ["contracts/src/Foo.sol"]


def test_missing_artifact_fails_before_loading_anything(source_store):
    with pytest.raises(ArtifactNotFoundError, match="Baz, Qux"):
        source_store.load(["Foo", "Baz", "Qux"])

    with pytest.raises(ArtifactNotFoundError):
        source_store.get_artifact("Baz")


def test_missing_precomputed_input(artifacts_dir):
    (artifacts_dir / "inputs" / "Bar.json").unlink()
    store = ArtifactStore(
        artifacts_dir=artifacts_dir, strategy=get_strategy("standard-json", artifacts_dir)
    )
    with pytest.raises(ArtifactNotFoundError, match="Bar"):
        store.load(["Foo", "Bar"])


def test_source_falls_back_to_embedded_source(tmp_path):
    data = artifact_data("Baz", embedded_source=contract_source("Baz"))
    (tmp_path / "Baz.json").write_text(json.dumps(data))
    store = ArtifactStore(artifacts_dir=tmp_path, strategy=PreprocessedSource())

    bundle = store.load(["Baz"])["Baz"]
    assert bundle.source == contract_source("Baz")


def test_missing_source(artifacts_dir):
    (artifacts_dir.parent / "sources" / "Foo.sol").unlink()
    store = ArtifactStore(
        artifacts_dir=artifacts_dir,
        strategy=PreprocessedSource(sources_dir=artifacts_dir.parent / "sources"),
    )
    with pytest.raises(ArtifactNotFoundError, match="No source found for Foo"):
        store.load(["Foo"])


def test_unknown_strategy(artifacts_dir):
    with pytest.raises(ValueError):
        get_strategy("flattened", artifacts_dir)


def test_compiler_input_requires_sources_and_settings():
    with pytest.raises(ValueError):
        CompilerInput.from_dict({"language": "Solidity", "sources": {}})
