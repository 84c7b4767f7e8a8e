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
"""AsyncIO client interceptor attaching the routing header."""

from typing import Mapping, Optional, Sequence

from grpc import aio

from grpc_routing import _common
from grpc_routing import routing_rules


class RoutingHeaderClientInterceptor(aio.UnaryUnaryClientInterceptor,
                                     aio.UnaryStreamClientInterceptor):
    """An AsyncIO implementation of the routing header interceptor."""
    _method_rules: Mapping[str, Sequence[routing_rules.RoutingRule]]
    _metadata_key: str

    def __init__(self,
                 method_rules: Mapping[str,
                                       Sequence[routing_rules.RoutingRule]],
                 metadata_key: Optional[str] = None) -> None:
        self._method_rules = _common.freeze_method_rules(method_rules)
        self._metadata_key = _common.metadata_key_or_default(metadata_key)

    def _details(self, client_call_details: aio.ClientCallDetails,
                 request) -> aio.ClientCallDetails:
        metadata = _common.routed_metadata(self._method_rules,
                                           self._metadata_key,
                                           client_call_details.method,
                                           client_call_details.metadata,
                                           request)
        if metadata is None:
            return client_call_details
        return aio.ClientCallDetails(client_call_details.method,
                                     client_call_details.timeout,
                                     aio.Metadata(*metadata),
                                     client_call_details.credentials,
                                     client_call_details.wait_for_ready)

    async def intercept_unary_unary(self, continuation,
                                    client_call_details: aio.ClientCallDetails,
                                    request):
        return await continuation(self._details(client_call_details, request),
                                  request)

    async def intercept_unary_stream(
            self, continuation, client_call_details: aio.ClientCallDetails,
            request):
        return await continuation(self._details(client_call_details, request),
                                  request)
