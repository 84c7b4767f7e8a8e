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
"""Shared implementation of the routing header interceptors."""

import logging

from grpc_routing import routing_header

_LOGGER = logging.getLogger(__name__)


def freeze_method_rules(method_rules):
    return {method: tuple(rules) for method, rules in method_rules.items()}


def metadata_key_or_default(metadata_key):
    return (metadata_key or routing_header.ROUTING_METADATA_KEY).lower()


def routed_metadata(method_rules, metadata_key, method, metadata, request):
    """Returns the call metadata extended with the routing header.

    Returns None when the call should proceed unchanged.
    """
    if isinstance(method, bytes):
        method = method.decode('utf-8')
    rules = method_rules.get(method)
    if rules is None:
        return None
    existing = tuple(metadata or ())
    if any(key == metadata_key for key, _ in existing):
        _LOGGER.debug('Keeping caller-supplied %s for %s.', metadata_key,
                      method)
        return None
    value = routing_header.compute(rules, request)
    if value is None:
        return None
    _LOGGER.debug('Attaching %s: %s to %s.', metadata_key, value, method)
    return existing + ((metadata_key, value),)
