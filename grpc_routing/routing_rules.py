# Copyright 2026 The gRPC Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Routing rules and their evaluation against request fields.

Rules come from one of two places. An explicit google.api.RoutingRule
annotation lists them directly; otherwise they are synthesized from the
captures of the method's google.api.HttpRule path templates.
"""

import collections
import functools
import itertools
import logging
from typing import Dict, Iterable, Optional, Tuple

from google.protobuf import message as _message

from grpc_routing import path_template

_LOGGER = logging.getLogger(__name__)

_MATCH_ANYTHING = '**'
_HTTP_PATTERN_ONEOF = 'pattern'
_HTTP_CUSTOM_PATTERN = 'custom'


class RoutingRule(
        collections.namedtuple('RoutingRule', ('field', 'pattern', 'key'))):
    """Extracts one routing parameter from one request field.

    Attributes:
      field: The name of the request field to read.
      pattern: A path_template.CompiledPattern with exactly one capture.
      key: The routing parameter name the captured value is emitted under.
    """
    __slots__ = ()


def rule(field: str,
         template: Optional[str] = None,
         key: Optional[str] = None) -> RoutingRule:
    """Creates a RoutingRule.

    Args:
      field: The request field name.
      template: A path template with exactly one capture. Defaults to
        '{<field>=**}', which routes on the whole field value.
      key: The routing parameter name. Defaults to the capture name.

    Returns:
      A RoutingRule.

    Raises:
      MalformedTemplateError: If the template is malformed or does not have
        exactly one capture.
    """
    if not template:
        template = '{%s=%s}' % (field, _MATCH_ANYTHING)
    pattern = path_template.compile(template)
    if len(pattern.captures) != 1:
        raise path_template.MalformedTemplateError(
            template, 'a routing rule needs exactly one capture, found %d' %
            len(pattern.captures))
    return RoutingRule(field, pattern, key or pattern.captures[0].name)


def _message_field(message, name):
    if name not in message.DESCRIPTOR.fields_by_name:
        return None
    value = getattr(message, name)
    return value if isinstance(value, str) and value else None


def _mapping_field(mapping, name):
    value = mapping.get(name)
    return value if isinstance(value, str) else None


def field_lookup(source):
    """Adapts source into a callable from field name to Optional[str].

    Args:
      source: A callable, a protobuf message or a mapping. Only top-level,
        string-valued fields are visible; everything else reads as unset.

    Returns:
      A callable taking a field name and returning its value or None.
    """
    if isinstance(source, _message.Message):
        return functools.partial(_message_field, source)
    if callable(source):
        return source
    return functools.partial(_mapping_field, source)


def _extract(pattern, value):
    if len(pattern.captures) != 1:
        return None
    captures = pattern.match(value)
    if captures is None:
        return None
    return captures[pattern.captures[0].name]


def evaluate(rules: Iterable[RoutingRule], fields) -> Dict[str, str]:
    """Computes routing parameters for one request.

    Rules are applied in order. A rule whose field is unset, whose pattern
    does not match, or whose capture is empty is skipped. Otherwise its
    captured value replaces any value an earlier rule stored for the same
    key, so the last successful rule wins.

    Args:
      rules: An ordered iterable of RoutingRule.
      fields: The request fields, in any form accepted by field_lookup.

    Returns:
      An insertion-ordered dict of routing parameter name to value.
    """
    lookup = field_lookup(fields)
    params = {}
    for routing_rule in rules:
        value = lookup(routing_rule.field)
        if value is None:
            _LOGGER.debug('Skipping routing rule for unset field %r.',
                          routing_rule.field)
            continue
        captured = _extract(routing_rule.pattern, value)
        if not captured:
            _LOGGER.debug('Field %r value %r yields nothing for pattern %s.',
                          routing_rule.field, value, routing_rule.pattern)
            continue
        params[routing_rule.key] = captured
    return params


def _strip_http_syntax(template):
    """Removes the leading '/' and trailing ':verb' of an HTTP template."""
    if template.startswith('/'):
        template = template[1:]
    last_slash = -1
    last_colon = -1
    in_capture = False
    for index, char in enumerate(template):
        if char == '{':
            in_capture = True
        elif char == '}':
            in_capture = False
        elif in_capture:
            continue
        elif char == '/':
            last_slash = index
        elif char == ':':
            last_colon = index
    if last_colon > last_slash:
        return template[:last_colon]
    return template


def synthesize(primary: str,
               additional: Iterable[str] = ()) -> Tuple[RoutingRule, ...]:
    """Derives routing rules from HTTP path templates.

    Every capture in the primary template, then in each additional template,
    becomes a rule routing on the field of the same name. A capture without
    a subpattern routes on the whole field value. Only the first rule for a
    given field is kept.

    Args:
      primary: The primary HTTP path template, e.g.
        '/v1/{parent=projects/*}/topics'.
      additional: The templates of additional bindings, in declared order.

    Returns:
      A tuple of RoutingRule.

    Raises:
      MalformedTemplateError: If any template is malformed.
    """
    patterns = [
        path_template.compile(_strip_http_syntax(template))
        for template in itertools.chain((primary,), additional)
    ]
    rules = []
    fields = set()
    for pattern in patterns:
        for capture in pattern.captures:
            if capture.name in fields:
                continue
            fields.add(capture.name)
            subpattern = (capture.subpattern
                          if capture.explicit else _MATCH_ANYTHING)
            rules.append(
                rule(capture.name, '{%s=%s}' % (capture.name, subpattern)))
    return tuple(rules)


def from_routing_rule(routing_rule) -> Tuple[RoutingRule, ...]:
    """Converts a google.api.RoutingRule message into routing rules.

    Args:
      routing_rule: A google.api.routing_pb2.RoutingRule.

    Returns:
      A tuple of RoutingRule, one per routing parameter, in order.
    """
    return tuple(
        rule(parameter.field, parameter.path_template or None)
        for parameter in routing_rule.routing_parameters)


def _http_path(http_rule):
    kind = http_rule.WhichOneof(_HTTP_PATTERN_ONEOF)
    if kind is None:
        return None
    if kind == _HTTP_CUSTOM_PATTERN:
        return http_rule.custom.path
    return getattr(http_rule, kind)


def from_http_rule(http_rule) -> Tuple[RoutingRule, ...]:
    """Synthesizes routing rules from a google.api.HttpRule message.

    Args:
      http_rule: A google.api.http_pb2.HttpRule. Its additional_bindings are
        used in declared order.

    Returns:
      A tuple of RoutingRule, empty if no binding carries a path.
    """
    paths = [
        path for path in map(
            _http_path,
            itertools.chain((http_rule,), http_rule.additional_bindings))
        if path
    ]
    if not paths:
        return ()
    return synthesize(paths[0], paths[1:])


def resolve(routing=None, http=None) -> Tuple[RoutingRule, ...]:
    """Selects the routing rules for a method from its annotations.

    An explicit routing annotation takes precedence over the HTTP annotation,
    even when it lists no parameters.

    Args:
      routing: The method's google.api.RoutingRule, or None.
      http: The method's google.api.HttpRule, or None.

    Returns:
      A tuple of RoutingRule.
    """
    if routing is not None:
        return from_routing_rule(routing)
    if http is not None:
        return from_http_rule(http)
    return ()
