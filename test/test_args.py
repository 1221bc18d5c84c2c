import pytest

from mcresolve.args import LiteralArgument, ConditionalArgument, parse_argument, \
    resolve_arguments, resolve_version_arguments, DEFAULT_GAME_ARGS
from mcresolve.model import MergedDescriptor


ARGS = [
    "--username", "${auth_player_name}",
    {
        "rules": [{"action": "allow", "features": {"is_demo_user": True}}],
        "value": "--demo"
    },
    {
        "rules": [{"action": "allow", "features": {"has_custom_resolution": True}}],
        "value": ["--width", "${resolution_width}", "--height", "${resolution_height}"]
    },
    {
        "rules": [{"action": "allow", "os": {"name": "osx"}}],
        "value": ["-XstartOnFirstThread"]
    },
    "--version", "${version_name}",
]


def test_parse_argument():

    arg = parse_argument("--demo", "args/0")
    assert isinstance(arg, LiteralArgument)
    assert arg.value == "--demo"

    arg = parse_argument({"value": "--demo"}, "args/0")
    assert isinstance(arg, ConditionalArgument)
    assert arg.rules == []
    assert arg.values == ["--demo"]

    with pytest.raises(ValueError):
        parse_argument(42, "args/0")
    with pytest.raises(ValueError):
        parse_argument({"rules": []}, "args/0")
    with pytest.raises(ValueError):
        parse_argument({"value": ["--width", 800]}, "args/0")


def test_resolve_arguments(linux, osx):

    assert resolve_arguments(ARGS, linux, {}) == [
        "--username", "${auth_player_name}",
        "--version", "${version_name}",
    ]

    assert resolve_arguments(ARGS, osx, {"is_demo_user": True, "has_custom_resolution": True}) == [
        "--username", "${auth_player_name}",
        "--demo",
        "--width", "${resolution_width}", "--height", "${resolution_height}",
        "-XstartOnFirstThread",
        "--version", "${version_name}",
    ]


def test_resolve_arguments_malformed(linux):

    skipped = []
    args = resolve_arguments(["--a", 3, {"value": None}, "--b"], linux, {},
        on_skip=lambda index, reason: skipped.append(index))

    assert args == ["--a", "--b"]
    assert skipped == [1, 2]


def test_default_arguments(linux, windows):

    merged = MergedDescriptor("old")
    game_args, jvm_args = resolve_version_arguments(merged, linux)
    assert game_args == list(DEFAULT_GAME_ARGS)
    assert jvm_args[-2:] == ["-cp", "${classpath}"]
    assert "-XstartOnFirstThread" not in jvm_args

    _, windows_jvm_args = resolve_version_arguments(merged, windows)
    assert "-Dos.name=Windows 10" in windows_jvm_args


def test_legacy_game_arguments(linux):

    merged = MergedDescriptor("1.12.2")
    merged.minecraft_arguments = "--username ${auth_player_name}  --version ${version_name}"
    game_args, jvm_args = resolve_version_arguments(merged, linux)
    assert game_args == ["--username", "${auth_player_name}", "--version", "${version_name}"]
    assert "${classpath}" in jvm_args


def test_modern_arguments(linux):

    merged = MergedDescriptor("1.19")
    merged.game_arguments = ["--version", "${version_name}"]
    merged.jvm_arguments = []
    merged.minecraft_arguments = "--ignored"

    features = set()
    game_args, jvm_args = resolve_version_arguments(merged, linux, all_features=features)
    assert game_args == ["--version", "${version_name}"]
    assert jvm_args == []
    assert features == set()


@pytest.mark.parametrize("test_game,test_jvm,test_game_expected,test_jvm_last", [
    (["--version", "${version_name}"], None, ["--version", "${version_name}"], "${classpath}"),
    (None, ["-Dfoo", "-cp", "${classpath}"], ["--username", "${auth_player_name}"], "${classpath}"),
])
def test_partial_arguments(linux, test_game, test_jvm, test_game_expected, test_jvm_last):

    merged = MergedDescriptor("partial")
    merged.game_arguments = test_game
    merged.jvm_arguments = test_jvm
    merged.minecraft_arguments = "--username ${auth_player_name}"

    game_args, jvm_args = resolve_version_arguments(merged, linux)
    assert game_args == test_game_expected
    assert jvm_args[-1] == test_jvm_last
    assert "-cp" in jvm_args


def test_game_arguments_only(linux):

    from mcresolve.chain import DictLoader
    from mcresolve.standard import resolve_version

    loader = DictLoader({
        "modern": {
            "id": "modern",
            "mainClass": "foo.Main",
            "assetIndex": {"id": "legacy", "url": "https://example.com/legacy.json"},
            "downloads": {"client": {"url": "https://example.com/client.jar"}},
            "arguments": {"game": ["--version", "${version_name}"]},
        }
    })

    version = resolve_version("modern", loader, platform=linux)
    assert version.game_arguments == ["--version", "${version_name}"]
    assert version.jvm_arguments[-2:] == ["-cp", "${classpath}"]
