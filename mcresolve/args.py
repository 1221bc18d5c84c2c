"""Game and JVM arguments, literal or conditional, as given by version metadata. The
resolved arguments still contain '${...}' placeholders to be replaced at launch.
"""

from .rule import Rule, parse_rules, evaluate
from .model import MergedDescriptor
from .probe import PlatformInfo

from typing import Optional, Dict, List, Set, Tuple, Any, Callable, Union


class LiteralArgument:
    """An argument always given as-is.
    """

    __slots__ = "value",

    def __init__(self, value: str) -> None:
        self.value = value


class ConditionalArgument:
    """One or more arguments only given if the rules allow.
    """

    __slots__ = "rules", "values"

    def __init__(self, rules: List[Rule], values: List[str]) -> None:
        self.rules = rules
        self.values = values


ArgumentTemplate = Union[LiteralArgument, ConditionalArgument]


def parse_argument(arg: Any, path: str) -> ArgumentTemplate:
    """Parse a single argument template.

    :raises ValueError: If the argument is malformed.
    """

    if isinstance(arg, str):
        return LiteralArgument(arg)
    elif isinstance(arg, dict):

        rules = []
        if arg.get("rules") is not None:
            rules = parse_rules(arg["rules"], f"{path}/rules")

        arg_value = arg.get("value")
        if isinstance(arg_value, str):
            return ConditionalArgument(rules, [arg_value])
        elif isinstance(arg_value, list) and all(isinstance(v, str) for v in arg_value):
            return ConditionalArgument(rules, arg_value)
        else:
            raise ValueError(f"{path}/value must be a list of strings or a string")

    else:
        raise ValueError(f"{path} must be an object or a string")


def resolve_arguments(args: List[Any], platform: PlatformInfo, features: Optional[Dict[str, bool]] = None, *,
    legacy_os_features: bool = False,
    all_features: Optional[Set[str]] = None,
    on_skip: Optional[Callable[[int, str], None]] = None,
    path: str = "arguments"
) -> List[str]:
    """Expand argument templates into a flat list of arguments, keeping order.
    Malformed templates are skipped.

    :param all_features: If given, filled with all feature names found in rules.
    :param on_skip: Called with the index and reason of each malformed template.
    """

    result = []
    for i, arg in enumerate(args):

        try:
            template = parse_argument(arg, f"{path}/{i}")
        except ValueError as error:
            if on_skip is not None:
                on_skip(i, str(error))
            continue

        if isinstance(template, LiteralArgument):
            result.append(template.value)
        elif evaluate(template.rules, platform, features, legacy_os_features=legacy_os_features, all_features=all_features):
            result.extend(template.values)

    return result


def resolve_version_arguments(merged: MergedDescriptor, platform: PlatformInfo, features: Optional[Dict[str, bool]] = None, *,
    legacy_os_features: bool = False,
    all_features: Optional[Set[str]] = None,
    on_skip: Optional[Callable[[str, int, str], None]] = None
) -> Tuple[List[str], List[str]]:
    """Resolve both game and JVM arguments of a merged version. Each list falls back
    independently when no version of the hierarchy gives it: the JVM arguments to the
    default ones, and the game arguments to the legacy arguments string, if present,
    or else to the default ones.

    :return: The game arguments and the JVM arguments.
    """

    jvm_args = DEFAULT_JVM_ARGS if merged.jvm_arguments is None else merged.jvm_arguments

    if merged.game_arguments is not None:
        game_args = merged.game_arguments
    elif merged.minecraft_arguments is not None:
        game_args = [arg for arg in merged.minecraft_arguments.split(" ") if len(arg)]
    else:
        game_args = DEFAULT_GAME_ARGS

    result = []
    for kind, args in (("game", game_args), ("jvm", jvm_args)):
        kind_on_skip = None if on_skip is None else (lambda i, reason, kind=kind: on_skip(kind, i, reason))
        result.append(resolve_arguments(args, platform, features,
            legacy_os_features=legacy_os_features,
            all_features=all_features,
            on_skip=kind_on_skip,
            path=f"metadata: /arguments/{kind}"))

    return result[0], result[1]


# Game arguments used if no arguments are specified.
DEFAULT_GAME_ARGS = (
    "--username", "${auth_player_name}",
    "--version", "${version_name}",
    "--gameDir", "${game_directory}",
    "--assetsDir", "${assets_root}",
    "--assetIndex", "${asset_index}",
    "--uuid", "${auth_uuid}",
    "--accessToken", "${auth_access_token}",
    "--clientId", "${clientid}",
    "--xuid", "${auth_xuid}",
    "--userType", "${user_type}",
    "--versionType", "${version_type}",
    "--width", "${resolution_width}",
    "--height", "${resolution_height}",
)

# JVM arguments used if no arguments are specified.
DEFAULT_JVM_ARGS = (
    {
        "rules": [{"action": "allow", "os": {"name": "osx"}}],
        "value": ["-XstartOnFirstThread"]
    },
    {
        "rules": [{"action": "allow", "os": {"name": "windows"}}],
        "value": "-XX:HeapDumpPath=MojangTricksIntelDriversForPerformance_javaw.exe_minecraft.exe.heapdump"
    },
    {
        "rules": [{"action": "allow", "os": {"name": "windows", "version": "^10\\."}}],
        "value": ["-Dos.name=Windows 10", "-Dos.version=10.0"]
    },
    "-Djava.library.path=${natives_directory}",
    "-Dminecraft.launcher.brand=${launcher_name}",
    "-Dminecraft.launcher.version=${launcher_version}",
    "-Dfile.encoding=UTF-8",
    "-Dlog4j2.formatMsgNoLookups=true",
    "-cp",
    "${classpath}",
)
