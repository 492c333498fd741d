"""
Serverless service definition loader.

Parses serverless.yml and returns the raw resource and function definitions
consumed by the queue resolver. Safely handles CloudFormation short-form
tags (!GetAtt, !Ref, ...) and the common serverless variables.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

from ..core.exceptions import DefinitionLoadError

logger = logging.getLogger("sqs_invoke.definition_loader")

_VARIABLE_PATTERN = re.compile(r"\$\{([^{}]+)\}")
_MAX_RESOLVE_DEPTH = 10
# Serverless variable sources (self:, opt:, env:, file(...)). CloudFormation
# placeholders such as ${AWS::StackName} or ${Queue.Arn} do not match.
_SERVERLESS_SOURCE = re.compile(r"^(?:[a-z][\w-]*:(?!:)|file\()")


class CfnLoader(yaml.SafeLoader):
    """YAML loader that handles CloudFormation intrinsic functions."""

    pass


def cfn_constructor(loader: yaml.Loader, tag_suffix: str, node: yaml.Node) -> Any:
    """Turn `!Tag value` into its long form, e.g. `{"Fn::GetAtt": [...]}`."""
    key = "Ref" if tag_suffix == "Ref" else f"Fn::{tag_suffix}"
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
        if tag_suffix == "GetAtt":
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    elif isinstance(node, yaml.MappingNode):
        value = loader.construct_mapping(node, deep=True)
    else:
        value = None
    return {key: value}


yaml.add_multi_constructor("!", cfn_constructor, Loader=CfnLoader)


@dataclass
class ServiceDefinitions:
    service: str
    stage: str
    resources: Dict[str, Any] = field(default_factory=dict)
    functions: Dict[str, Any] = field(default_factory=dict)


class VariableResolver:
    """
    Resolve serverless variables inside a parsed service definition.

    Supported sources: ${self:path.to.key}, ${sls:stage}, ${opt:stage},
    ${env:NAME} and a quoted fallback (`${opt:stage, 'dev'}`).
    Unresolvable variables are kept verbatim.
    """

    def __init__(self, root: Dict[str, Any], stage: str):
        self.root = root
        self.stage = stage

    def resolve(self, value: Any, depth: int = 0) -> Any:
        if depth > _MAX_RESOLVE_DEPTH:
            logger.warning(f"Variable resolution too deep, keeping value: {value!r}")
            return value

        if isinstance(value, dict):
            return {k: self.resolve(v, depth) for k, v in value.items()}
        if isinstance(value, list):
            return [self.resolve(v, depth) for v in value]
        if not isinstance(value, str):
            return value

        whole = _VARIABLE_PATTERN.fullmatch(value)
        if whole:
            resolved = self._lookup(whole.group(1))
            if resolved is None:
                return value
            return self.resolve(resolved, depth + 1)

        def replace(match: re.Match) -> str:
            resolved = self._lookup(match.group(1))
            if resolved is None:
                return match.group(0)
            return str(self.resolve(resolved, depth + 1))

        return _VARIABLE_PATTERN.sub(replace, value)

    def _lookup(self, expression: str) -> Any:
        source, _, fallback = expression.partition(",")
        source = source.strip()
        if not _SERVERLESS_SOURCE.match(source):
            return None

        resolved = None
        if source.startswith("self:"):
            resolved = self._walk(source[len("self:") :])
        elif source in ("sls:stage", "opt:stage"):
            resolved = self.stage
        elif source.startswith("env:"):
            resolved = os.environ.get(source[len("env:") :])

        if resolved is None and fallback:
            resolved = fallback.strip().strip("'\"")

        if resolved is None:
            logger.warning(f"Unable to resolve variable '${{{expression}}}'")
        return resolved

    def _walk(self, path: str) -> Any:
        node: Any = self.root
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node


def _service_name(data: Dict[str, Any]) -> str:
    service = data.get("service", "service")
    if isinstance(service, dict):
        service = service.get("name", "service")
    return str(service)


def _section_entries(section: Any, label: str) -> List[Dict[str, Any]]:
    """
    Normalize a section that serverless accepts as a mapping or a list of
    mappings (e.g. `${file(...)}` includes) into a list of mappings.
    """
    if not section:
        return []
    if isinstance(section, dict):
        return [section]
    if isinstance(section, list):
        entries = []
        for index, entry in enumerate(section):
            if not isinstance(entry, dict):
                logger.error(f"Ignoring entry {index} of '{label}': not a mapping")
                continue
            entries.append(entry)
        return entries

    logger.error(f"Ignoring '{label}' section: expected a mapping or a list of mappings")
    return []


def _section_mapping(section: Any, label: str) -> Dict[str, Any]:
    """Merge a mapping or list-of-mappings section into one dict, in order."""
    merged: Dict[str, Any] = {}
    for entry in _section_entries(section, label):
        merged.update(entry)
    return merged


def parse_service_definitions(content: str, stage: str = "dev") -> ServiceDefinitions:
    """
    Parse a serverless.yml string.

    Args:
        content: serverless.yml YAML string
        stage: stage used for ${sls:stage}/${opt:stage} and default function names

    Returns:
        ServiceDefinitions with `resources` (logical id -> {Type, Properties})
        and `functions` (function key -> definition with `name` filled in)
    """
    data = yaml.load(content, Loader=CfnLoader) or {}
    if not isinstance(data, dict):
        raise ValueError("service definition must be a mapping")

    data = VariableResolver(data, stage).resolve(data)
    service = _service_name(data)

    resources: Dict[str, Any] = {}
    for section in _section_entries(data.get("resources"), "resources"):
        resources.update(_section_mapping(section.get("Resources"), "resources.Resources"))

    functions: Dict[str, Any] = {}
    for key, definition in _section_mapping(data.get("functions"), "functions").items():
        if not isinstance(definition, dict):
            logger.warning(f"Skipping function '{key}': definition is not a mapping")
            continue
        definition = dict(definition)
        # Framework default: <service>-<stage>-<function key>
        definition.setdefault("name", f"{service}-{stage}-{key}")
        functions[key] = definition

    return ServiceDefinitions(
        service=service, stage=stage, resources=resources, functions=functions
    )


def load_service_definitions(path: str, stage: str = "dev") -> ServiceDefinitions:
    """
    Load and parse the serverless service file at `path`.

    Raises:
        DefinitionLoadError: file missing or not valid YAML
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        definitions = parse_service_definitions(content, stage=stage)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise DefinitionLoadError(path, e) from e

    logger.info(
        f"Loaded {len(definitions.resources)} resources and "
        f"{len(definitions.functions)} functions from {path}"
    )
    return definitions
