import pytest

from mcresolve.manifest import VersionManifest


class _FakeManifest(VersionManifest):
    """Manifest serving fixed data without network.
    """

    def __init__(self, data: dict) -> None:
        super().__init__()
        self.data = data

    def _ensure_data(self) -> dict:
        return self.data


def test_manifest_installed(tmp_context):

    from mcresolve.manifest import ManifestLoader
    from mcresolve.util import calc_input_sha1

    with (tmp_context.versions_dir / "1.19" / "1.19.json").open("rb") as fp:
        sha1 = calc_input_sha1(fp)

    manifest = _FakeManifest({
        "latest": {"release": "1.19", "snapshot": "1.19"},
        "versions": [{"id": "1.19", "url": "http://invalid.invalid/1.19.json", "sha1": sha1}],
    })

    loader = ManifestLoader(tmp_context.versions_dir, manifest)
    assert loader.load("1.19").id == "1.19"
    assert loader.load("release").id == "1.19"
    assert loader.load("1.12.2").id == "1.12.2"


def test_manifest_not_found(tmp_context):

    from mcresolve.manifest import ManifestLoader
    from mcresolve.error import VersionNotFoundError

    manifest = _FakeManifest({"latest": {}, "versions": []})
    loader = ManifestLoader(tmp_context.versions_dir, manifest)

    with pytest.raises(VersionNotFoundError):
        loader.load("unknown")


@pytest.mark.slow
def test_manifest_fetch(tmp_path):

    from mcresolve.manifest import ManifestLoader, VersionManifest
    from mcresolve.standard import Context, Resolver
    from mcresolve.probe import PlatformInfo

    context = Context(tmp_path)
    manifest = VersionManifest(tmp_path / "version_manifest.json")
    loader = ManifestLoader(context.versions_dir, manifest)

    version = Resolver("1.12.2", context=context, loader=loader,
        platform=PlatformInfo("linux", "", "x86_64")).resolve()

    assert version.main_class == "net.minecraft.client.main.Main"
    assert (context.versions_dir / "1.12.2" / "1.12.2.json").is_file()
    assert (tmp_path / "version_manifest.json").is_file()
