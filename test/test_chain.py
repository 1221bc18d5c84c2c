import pytest

from mcresolve.chain import DictLoader, DirectoryLoader, resolve_chain, load_chain
from mcresolve.error import VersionNotFoundError, CyclicInheritanceError, \
    TooMuchParentsError, MalformedDescriptorError
from mcresolve.model import RawDescriptor


def test_no_parent():
    leaf = RawDescriptor("1.19")
    assert resolve_chain(leaf, DictLoader()) == [leaf]


def test_chain_order():

    loader = DictLoader()
    loader.add(RawDescriptor("b", inherits_from="c"))
    loader.add(RawDescriptor("c"))

    chain = resolve_chain(RawDescriptor("a", inherits_from="b"), loader)
    assert [desc.id for desc in chain] == ["a", "b", "c"]


def test_missing_ancestor():

    loader = DictLoader({"b": {"id": "b", "inheritsFrom": "c"}})

    with pytest.raises(VersionNotFoundError) as exc_info:
        resolve_chain(RawDescriptor("a", inherits_from="b"), loader)
    assert exc_info.value.version == "c"


def test_cycle():

    loader = DictLoader()
    loader.add(RawDescriptor("a", inherits_from="b"))
    loader.add(RawDescriptor("b", inherits_from="a"))

    with pytest.raises(CyclicInheritanceError) as exc_info:
        load_chain("a", loader)
    assert exc_info.value.version == "a"
    assert exc_info.value.versions == ["a", "b"]

    # Self inheritance is also a cycle.
    with pytest.raises(CyclicInheritanceError):
        resolve_chain(RawDescriptor("a", inherits_from="a"), DictLoader())


def test_max_parents():

    loader = DictLoader()
    for i in range(5):
        loader.add(RawDescriptor(f"v{i}", inherits_from=f"v{i + 1}"))
    loader.add(RawDescriptor("v5"))

    assert len(load_chain("v0", loader, max_parents=5)) == 6
    with pytest.raises(TooMuchParentsError):
        load_chain("v0", loader, max_parents=4)


def test_directory_loader(tmp_context):

    loader = DirectoryLoader(tmp_context.versions_dir)

    desc = loader.load("1.12.2-forge")
    assert desc.id == "1.12.2-forge"
    assert desc.inherits_from == "1.12.2"
    assert desc.path == tmp_context.versions_dir / "1.12.2-forge" / "1.12.2-forge.json"

    chain = resolve_chain(desc, loader)
    assert [desc.id for desc in chain] == ["1.12.2-forge", "1.12.2"]

    with pytest.raises(VersionNotFoundError):
        loader.load("unknown")

    with pytest.raises(MalformedDescriptorError):
        loader.load("err.invalid_json")

    with pytest.raises(MalformedDescriptorError, match="/mainClass"):
        loader.load("err.malformed")


def test_directory_loader_wrong_id(tmp_context):

    version_dir = tmp_context.versions_dir / "renamed"
    version_dir.mkdir()
    (version_dir / "renamed.json").write_text('{"id": "original"}')

    with pytest.raises(MalformedDescriptorError):
        DirectoryLoader(tmp_context.versions_dir).load("renamed")


def test_directory_loader_invalid_utf8(tmp_context):

    version_dir = tmp_context.versions_dir / "binary"
    version_dir.mkdir()
    (version_dir / "binary.json").write_bytes(b'{"id": "binary", "type": "\xff\xfe"}')

    with pytest.raises(MalformedDescriptorError):
        DirectoryLoader(tmp_context.versions_dir).load("binary")


def test_dict_loader_wrong_id():

    loader = DictLoader({"renamed": {"id": "original"}})
    loader.versions["other"] = RawDescriptor("original")

    with pytest.raises(MalformedDescriptorError, match="renamed"):
        loader.load("renamed")
    with pytest.raises(MalformedDescriptorError):
        resolve_chain(RawDescriptor("a", inherits_from="other"), loader)


@pytest.mark.parametrize("test_data,test_match", [
    ({"minimumLauncherVersion": True}, "/minimumLauncherVersion"),
    ({"javaVersion": {"component": "jre-legacy", "majorVersion": False}}, "/javaVersion/majorVersion"),
    ({"downloads": {"client": {"url": "https://example.com/client.jar", "size": True}}}, "/downloads/client/size"),
    ({"assetIndex": {"id": "legacy", "totalSize": False}}, "/assetIndex/totalSize"),
])
def test_descriptor_boolean_integers(test_data: dict, test_match: str):
    with pytest.raises(MalformedDescriptorError, match=test_match):
        RawDescriptor.from_json({"id": "foo", **test_data})


def test_descriptor_empty_arguments():
    desc = RawDescriptor.from_json({"id": "foo", "arguments": {}})
    assert desc.game_arguments is None
    assert desc.jvm_arguments is None
