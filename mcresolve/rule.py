"""Conditional rules gating libraries and arguments on the platform and on optional
features, such as 'is_demo_user' or 'has_custom_resolution'.
"""

import re

from .probe import PlatformInfo

from typing import Optional, Dict, List, Set, Any


class RuleOs:
    """OS constraint of a rule. The version is a regular expression searched in the
    platform's OS version.
    """

    __slots__ = "name", "version", "arch", "features"

    def __init__(self, name: Optional[str] = None, version: Optional[str] = None, arch: Optional[str] = None,
        features: Optional[Dict[str, bool]] = None
    ) -> None:
        self.name = name
        self.version = version
        self.arch = arch
        self.features = features


class Rule:
    """A single rule, its action applies if all of its constraints match.
    """

    __slots__ = "allow", "os", "features"

    def __init__(self, allow: bool, os: Optional[RuleOs] = None, features: Optional[Dict[str, bool]] = None) -> None:
        self.allow = allow
        self.os = os
        self.features = features

    def __repr__(self) -> str:
        return f"<Rule {'allow' if self.allow else 'disallow'}>"


def parse_rules(rules: Any, path: str) -> List[Rule]:
    """Parse a list of rules from version metadata.

    :raises ValueError: If the rules are malformed, the message contains the path.
    """

    if not isinstance(rules, list):
        raise ValueError(f"{path} must be a list")

    result = []
    for i, rule in enumerate(rules):

        if not isinstance(rule, dict):
            raise ValueError(f"{path}/{i} must be an object")

        action = rule.get("action")
        if action not in ("allow", "disallow"):
            raise ValueError(f"{path}/{i}/action must be 'allow' or 'disallow'")

        rule_os = rule.get("os")
        if rule_os is not None:

            if not isinstance(rule_os, dict):
                raise ValueError(f"{path}/{i}/os must be an object")

            for key in ("name", "version", "arch"):
                if rule_os.get(key) is not None and not isinstance(rule_os[key], str):
                    raise ValueError(f"{path}/{i}/os/{key} must be a string")

            rule_os = RuleOs(rule_os.get("name"), rule_os.get("version"), rule_os.get("arch"),
                _parse_features(rule_os.get("features"), f"{path}/{i}/os/features"))

        features = _parse_features(rule.get("features"), f"{path}/{i}/features")
        result.append(Rule(action == "allow", rule_os, features))

    return result


def _parse_features(features: Any, path: str) -> Optional[Dict[str, bool]]:

    if features is None:
        return None

    if not isinstance(features, dict):
        raise ValueError(f"{path} must be an object")

    for feat_name, feat_expected in features.items():
        if not isinstance(feat_expected, bool):
            raise ValueError(f"{path}/{feat_name} must be a boolean")

    return features


def evaluate(rules: List[Rule], platform: PlatformInfo, features: Optional[Dict[str, bool]] = None, *,
    legacy_os_features: bool = False,
    all_features: Optional[Set[str]] = None
) -> bool:
    """Decide if the given rules allow or not. No rules means allowed, else it's denied
    by default and each matching rule overwrites the decision, so the last matching
    rule wins.

    :param features: Enabled features, a feature that is missing never matches.
    :param legacy_os_features: Old launchers deny the whole list as soon as a rule has
    features inside an OS constraint naming the current OS. If false, such features are
    just required like the rule's own features.
    :param all_features: If given, filled with all feature names found in rules.
    """

    if not len(rules):
        return True

    if features is None:
        features = {}

    allowed = False
    for rule in rules:

        required = []

        if rule.os is not None:

            if rule.os.features is not None:
                if legacy_os_features:
                    if rule.os.name is not None and rule.os.name == platform.os_name:
                        return False
                else:
                    required.append(rule.os.features)

            if not evaluate_os(rule.os, platform):
                continue

        if rule.features is not None:
            required.append(rule.features)

        feat_valid = True
        for rule_features in required:
            for feat_name, feat_expected in rule_features.items():
                if all_features is not None:
                    all_features.add(feat_name)
                if features.get(feat_name) != feat_expected:
                    feat_valid = False

        if feat_valid:
            allowed = rule.allow

    return allowed


def evaluate_os(rule_os: RuleOs, platform: PlatformInfo) -> bool:
    """Check an OS constraint against the platform. All given constraints must match.
    """

    if rule_os.name is not None and rule_os.name != platform.os_name:
        return False

    if rule_os.arch is not None and rule_os.arch != platform.arch:
        return False

    if rule_os.version is not None:
        try:
            return re.search(rule_os.version, platform.os_version) is not None
        except re.error:
            return False

    return True
