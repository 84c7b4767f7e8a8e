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
"""Serialization of routing parameters into the request params header."""

import collections.abc
import logging
import os
from typing import Iterable, Mapping, Optional, Tuple, Union
import urllib.parse

from grpc_routing import routing_rules

_LOGGER = logging.getLogger(__name__)

_DEFAULT_ROUTING_METADATA_KEY = 'x-goog-request-params'

_ROUTING_METADATA_KEY_ENV = 'GRPC_PYTHON_ROUTING_HEADER_KEY'
if os.environ.get(_ROUTING_METADATA_KEY_ENV):
    ROUTING_METADATA_KEY = os.environ[_ROUTING_METADATA_KEY_ENV].lower()
    _LOGGER.info('Setting routing header metadata key to %r',
                 ROUTING_METADATA_KEY)
else:
    ROUTING_METADATA_KEY = _DEFAULT_ROUTING_METADATA_KEY

_PAIR_SEPARATOR = '&'
# Resource names stay readable on the wire.
_SAFE_CHARACTERS = '/'

Entries = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _encode_pair(key, value):
    return urllib.parse.urlencode(((key, value),), safe=_SAFE_CHARACTERS)


def assemble(entries: Entries) -> Optional[str]:
    """Serializes routing parameters into a header value.

    Args:
      entries: A mapping, or an iterable of (key, value) pairs. Pairs are
        emitted in iteration order.

    Returns:
      'key1=value1&key2=value2' with every key and value form-encoded, or
      None if there are no entries.
    """
    if isinstance(entries, collections.abc.Mapping):
        entries = entries.items()
    value = _PAIR_SEPARATOR.join(
        _encode_pair(key, value) for key, value in entries)
    return value or None


def to_grpc_metadata(
        entries: Entries,
        metadata_key: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """Builds the routing metadata entry for a call.

    Args:
      entries: Routing parameters, as accepted by assemble.
      metadata_key: Overrides ROUTING_METADATA_KEY.

    Returns:
      A (key, value) metadata pair, or None if there are no entries.
    """
    value = assemble(entries)
    if value is None:
        return None
    return ((metadata_key or ROUTING_METADATA_KEY).lower(), value)


def compute(rules: Iterable[routing_rules.RoutingRule],
            fields) -> Optional[str]:
    """Evaluates rules against fields and serializes the result.

    Args:
      rules: An ordered iterable of routing_rules.RoutingRule.
      fields: The request fields, in any form accepted by
        routing_rules.field_lookup.

    Returns:
      The header value, or None if no rule produced a value.
    """
    return assemble(routing_rules.evaluate(rules, fields))
