"""Folding of dotted rule paths into nested FieldDescriptors.

``items.*.name`` and ``items.*.qty`` share one ``items`` array whose item
shape is an object with ``name`` and ``qty``. The paths are first inserted
into a flat node arena keyed by path segment, then folded bottom-up.
"""

from api_spectrum.analysis.base import ValidationRuleSet
from api_spectrum.models import (
    ConditionalBranch,
    ConditionalRuleSet,
    EnumInfo,
    FieldDescriptor,
    FieldType,
)
from api_spectrum.normalizer.rules import descriptor_from_rules

ITEMS = "*"


class RuleTree:
    """Arena of path-segment nodes. Node 0 is the root."""

    ROOT = 0

    def __init__(self):
        self.paths: list[str] = [""]
        self.rules: list = [None]
        self.children: list[dict[str, int]] = [{}]

    @classmethod
    def from_rules(cls, rules: dict) -> "RuleTree":
        tree = cls()
        for path, raw in rules.items():
            if path.startswith("_"):
                continue
            tree.insert(path, raw)
        return tree

    def insert(self, path: str, raw_rules) -> int:
        node = self.ROOT
        for segment in path.split("."):
            node = self._child(node, segment)
        self.rules[node] = raw_rules
        return node

    def _child(self, node: int, segment: str) -> int:
        index = self.children[node].get(segment)
        if index is None:
            index = len(self.paths)
            parent = self.paths[node]
            self.paths.append(f"{parent}.{segment}" if parent else segment)
            self.rules.append(None)
            self.children.append({})
            self.children[node][segment] = index
        return index

    def fold(
        self,
        enums: dict[str, EnumInfo] | None = None,
        attributes: dict[str, str] | None = None,
    ) -> dict[str, FieldDescriptor]:
        """Top-level descriptors in first-declaration order."""
        return self._fold_children(self.ROOT, enums or {}, attributes or {})

    def _fold_children(self, node, enums, attributes) -> dict[str, FieldDescriptor]:
        fields = {}
        for segment, child in self.children[node].items():
            if segment == ITEMS:
                continue
            descriptor = self._fold(child, segment, enums, attributes)
            if descriptor is not None:
                fields[segment] = descriptor
        return fields

    def _fold(self, node, segment, enums, attributes) -> FieldDescriptor | None:
        path = self.paths[node]
        raw = self.rules[node]
        children = self.children[node]

        if raw is None:
            descriptor = FieldDescriptor(
                name=segment,
                type=FieldType.ARRAY if ITEMS in children else FieldType.OBJECT,
            )
        else:
            descriptor = descriptor_from_rules(segment, raw, enums, attributes.get(path))
            if descriptor is None:
                return None

        if not children:
            return descriptor

        if ITEMS in children:
            items = self._fold(children[ITEMS], ITEMS, enums, attributes)
            if descriptor.type != FieldType.FILE:
                descriptor.type = FieldType.ARRAY
            if items is not None:
                if items.type == FieldType.FILE and items.file_constraints is not None:
                    items.file_constraints.multiple = True
                descriptor.children = {ITEMS: items}
        else:
            descriptor.type = FieldType.OBJECT
            descriptor.children = self._fold_children(node, enums, attributes)
            if raw is None:
                descriptor.required = any(c.required for c in descriptor.children.values())
        return descriptor


def normalize_rules(
    rules: dict,
    enums: dict[str, EnumInfo] | None = None,
    attributes: dict[str, str] | None = None,
) -> dict[str, FieldDescriptor]:
    """Normalize a flat ``field path -> rules`` mapping."""
    return RuleTree.from_rules(rules).fold(enums, attributes)


def normalize_rule_set(rule_set: ValidationRuleSet) -> dict[str, FieldDescriptor]:
    return normalize_rules(rule_set.rules, rule_set.enums, rule_set.attributes)


def normalize_conditional_rules(rule_set: ValidationRuleSet) -> ConditionalRuleSet:
    """Group conditional branches by their key, in first-appearance order.

    Every group starts from the unconditional rules; branches sharing a key
    are merged field by field so a field shows up once per group.
    """
    grouped: dict[str, dict] = {}
    for branch in rule_set.conditional_rules:
        merged = grouped.setdefault(branch.key, dict(rule_set.rules))
        merged.update(branch.rules)

    return ConditionalRuleSet(
        branches=[
            ConditionalBranch(label=key, fields=normalize_rules(rules, rule_set.enums, rule_set.attributes))
            for key, rules in grouped.items()
        ]
    )
