import pytest

from publisher.errors import DeploymentConfigError
from publisher.utils import find_contract_path_spec, get_compiler_version, get_rpc_endpoint

SOURCES = {
    "a/b/Foo.sol": {"content": "contract Foo {}"},
    "x/Bar.sol": {"content": "contract Bar {}"},
}


def test_find_contract_path_spec():
    assert find_contract_path_spec(SOURCES, "Bar") == "x/Bar.sol:Bar"
    assert find_contract_path_spec(SOURCES, "Foo") == "a/b/Foo.sol:Foo"


def test_find_contract_path_spec_missing_contract():
    assert find_contract_path_spec(SOURCES, "Baz") is None


def test_find_contract_path_spec_matches_whole_filename():
    sources = {"bridges/FooBar.sol": {"content": ""}}
    assert find_contract_path_spec(sources, "Bar") is None
    assert find_contract_path_spec({"Bar.sol": {"content": ""}}, "Bar") == "Bar.sol:Bar"


@pytest.mark.parametrize(
    "raw_version, expected",
    [
        ("soljson-v0.6.12+commit.27d51765.js", "v0.6.12+commit.27d51765"),
        ("v0.6.12+commit.27d51765.Emscripten.clang", "v0.6.12+commit.27d51765"),
        ("0.5.17+commit.d19bba13.Linux.g++", "v0.5.17+commit.d19bba13"),
        (
            "soljson-v0.7.0-nightly.2020.6.1+commit.3d2f1d0e.js",
            "v0.7.0-nightly.2020.6.1+commit.3d2f1d0e",
        ),
        ("0.8.20", "v0.8.20"),
    ],
)
def test_get_compiler_version(raw_version, expected):
    assert get_compiler_version(raw_version) == expected


def test_get_compiler_version_rejects_garbage():
    with pytest.raises(ValueError):
        get_compiler_version("latest")


def test_get_rpc_endpoint_prefers_configured_endpoint(monkeypatch):
    monkeypatch.setenv("WEB3_INFURA_PROJECT_ID", "abc123")
    endpoint = get_rpc_endpoint("ropsten", {"ropsten": "http://localhost:8545"})
    assert endpoint == "http://localhost:8545"


def test_get_rpc_endpoint_infura(monkeypatch):
    monkeypatch.setenv("WEB3_INFURA_PROJECT_ID", "abc123")
    assert get_rpc_endpoint("main") == "https://mainnet.infura.io/v3/abc123"
    assert get_rpc_endpoint("kovan") == "https://kovan.infura.io/v3/abc123"


def test_get_rpc_endpoint_without_endpoint(monkeypatch):
    monkeypatch.delenv("WEB3_INFURA_PROJECT_ID", raising=False)
    with pytest.raises(DeploymentConfigError, match="WEB3_INFURA_PROJECT_ID"):
        get_rpc_endpoint("main")

    with pytest.raises(DeploymentConfigError, match="Unsupported network"):
        get_rpc_endpoint("rinkeby", {"rinkeby": "http://localhost:8545"})
