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
"""Client interceptor attaching the routing header to outgoing calls."""

import collections

import grpc

from grpc_routing import _common
# Exposes the asyncio interceptor as public API.
from grpc_routing import _async as aio  # pylint: disable=unused-import


class _ClientCallDetails(
        collections.namedtuple('_ClientCallDetails',
                               ('method', 'timeout', 'metadata', 'credentials',
                                'wait_for_ready', 'compression')),
        grpc.ClientCallDetails):
    pass


def _with_metadata(client_call_details, metadata):
    return _ClientCallDetails(
        client_call_details.method, client_call_details.timeout, metadata,
        client_call_details.credentials,
        getattr(client_call_details, 'wait_for_ready', None),
        getattr(client_call_details, 'compression', None))


class RoutingHeaderClientInterceptor(grpc.UnaryUnaryClientInterceptor,
                                     grpc.UnaryStreamClientInterceptor):
    """Attaches the routing header to unary-request calls.

    Usage::

        rules = routing_rules.resolve(http=http_pb2.HttpRule(
            get='/v1/{name=operations/**}'))
        channel = grpc.intercept_channel(
            channel,
            interceptor.RoutingHeaderClientInterceptor(
                {'/google.longrunning.Operations/GetOperation': rules}))
    """

    def __init__(self, method_rules, metadata_key=None):
        """Constructor.

        Args:
          method_rules: A mapping from fully qualified method name, e.g.
            '/google.longrunning.Operations/GetOperation', to an ordered
            sequence of routing_rules.RoutingRule.
          metadata_key: Overrides routing_header.ROUTING_METADATA_KEY.
        """
        self._method_rules = _common.freeze_method_rules(method_rules)
        self._metadata_key = _common.metadata_key_or_default(metadata_key)

    def _details(self, client_call_details, request):
        metadata = _common.routed_metadata(self._method_rules,
                                           self._metadata_key,
                                           client_call_details.method,
                                           client_call_details.metadata,
                                           request)
        if metadata is None:
            return client_call_details
        return _with_metadata(client_call_details, metadata)

    def intercept_unary_unary(self, continuation, client_call_details, request):
        return continuation(self._details(client_call_details, request),
                            request)

    def intercept_unary_stream(self, continuation, client_call_details,
                               request):
        return continuation(self._details(client_call_details, request),
                            request)
