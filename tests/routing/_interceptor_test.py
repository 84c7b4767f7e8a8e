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
"""Tests of the routing header client interceptors."""

import asyncio
import collections
from concurrent import futures
import logging
import unittest

import grpc
from grpc import aio

from google.api import http_pb2
from google.longrunning import operations_pb2

from grpc_routing import interceptor
from grpc_routing import routing_header
from grpc_routing import routing_rules

_SERVICE = 'google.longrunning.Operations'
_GET_OPERATION = '/google.longrunning.Operations/GetOperation'
_LIST_OPERATIONS = '/google.longrunning.Operations/ListOperations'

_METHOD_RULES = {
    _GET_OPERATION:
        routing_rules.resolve(http=http_pb2.HttpRule(
            get='/v1/{name=operations/**}')),
}

_REQUEST = operations_pb2.GetOperationRequest(name='operations/abc')
_HEADER = (routing_header.ROUTING_METADATA_KEY, 'name=operations/abc')


class _ClientCallDetails(
        collections.namedtuple('_ClientCallDetails',
                               ('method', 'timeout', 'metadata', 'credentials',
                                'wait_for_ready', 'compression')),
        grpc.ClientCallDetails):
    pass


def _details(method=_GET_OPERATION, metadata=None):
    return _ClientCallDetails(method, None, metadata, None, None, None)


def _recording_continuation(calls):

    def continuation(client_call_details, request):
        calls.append((client_call_details, request))
        return request

    return continuation


class RoutingHeaderClientInterceptorTest(unittest.TestCase):

    def setUp(self):
        self._interceptor = interceptor.RoutingHeaderClientInterceptor(
            _METHOD_RULES)
        self._calls = []

    def testUnaryUnaryAttachesHeader(self):
        self._interceptor.intercept_unary_unary(
            _recording_continuation(self._calls), _details(), _REQUEST)
        details, request = self._calls[0]
        self.assertIs(_REQUEST, request)
        self.assertEqual((_HEADER,), details.metadata)
        self.assertEqual(_GET_OPERATION, details.method)

    def testUnaryStreamAttachesHeader(self):
        self._interceptor.intercept_unary_stream(
            _recording_continuation(self._calls), _details(), _REQUEST)
        self.assertEqual((_HEADER,), self._calls[0][0].metadata)

    def testExistingMetadataIsKept(self):
        self._interceptor.intercept_unary_unary(
            _recording_continuation(self._calls),
            _details(metadata=(('k', 'v'),)), _REQUEST)
        self.assertEqual((('k', 'v'), _HEADER), self._calls[0][0].metadata)

    def testUnroutedMethodIsUntouched(self):
        details = _details(method=_LIST_OPERATIONS)
        self._interceptor.intercept_unary_unary(
            _recording_continuation(self._calls), details, _REQUEST)
        self.assertIs(details, self._calls[0][0])

    def testEmptyResultIsUntouched(self):
        details = _details()
        self._interceptor.intercept_unary_unary(
            _recording_continuation(self._calls), details,
            operations_pb2.GetOperationRequest(name='projects/1'))
        self.assertIs(details, self._calls[0][0])

    def testCallerSuppliedHeaderWins(self):
        details = _details(
            metadata=((routing_header.ROUTING_METADATA_KEY, 'name=mine'),))
        self._interceptor.intercept_unary_unary(
            _recording_continuation(self._calls), details, _REQUEST)
        self.assertIs(details, self._calls[0][0])

    def testCustomMetadataKey(self):
        custom = interceptor.RoutingHeaderClientInterceptor(
            _METHOD_RULES, metadata_key='X-Routing')
        custom.intercept_unary_unary(_recording_continuation(self._calls),
                                     _details(), _REQUEST)
        self.assertEqual((('x-routing', 'name=operations/abc'),),
                         self._calls[0][0].metadata)


class AioRoutingHeaderClientInterceptorTest(unittest.TestCase):

    def setUp(self):
        self._interceptor = interceptor.aio.RoutingHeaderClientInterceptor(
            _METHOD_RULES)
        self._calls = []

    def _intercept(self, details, request=_REQUEST):

        async def continuation(client_call_details, request):
            self._calls.append((client_call_details, request))
            return request

        return asyncio.run(
            self._interceptor.intercept_unary_unary(continuation, details,
                                                    request))

    def testAttachesHeader(self):
        self._intercept(
            aio.ClientCallDetails(_GET_OPERATION.encode('ascii'), None,
                                  aio.Metadata(('k', 'v')), None, None))
        details, _ = self._calls[0]
        self.assertEqual(aio.Metadata(('k', 'v'), _HEADER), details.metadata)

    def testWithoutMetadata(self):
        self._intercept(
            aio.ClientCallDetails(_GET_OPERATION, None, None, None, None))
        self.assertEqual(aio.Metadata(_HEADER), self._calls[0][0].metadata)

    def testUnroutedMethodIsUntouched(self):
        details = aio.ClientCallDetails(_LIST_OPERATIONS, None, None, None,
                                        None)
        self._intercept(details)
        self.assertIs(details, self._calls[0][0])

    def testUnaryStreamAttachesHeader(self):

        async def continuation(client_call_details, request):
            self._calls.append((client_call_details, request))
            return request

        asyncio.run(
            self._interceptor.intercept_unary_stream(
                continuation,
                aio.ClientCallDetails(_GET_OPERATION, None, None, None, None),
                _REQUEST))
        self.assertEqual(aio.Metadata(_HEADER), self._calls[0][0].metadata)


def _get_operation(request, servicer_context):
    return operations_pb2.Operation(
        name=dict(servicer_context.invocation_metadata()).get(
            routing_header.ROUTING_METADATA_KEY, ''))


class RoutingHeaderEndToEndTest(unittest.TestCase):

    def setUp(self):
        self._server = grpc.server(futures.ThreadPoolExecutor(max_workers=1))
        self._server.add_generic_rpc_handlers(
            (grpc.method_handlers_generic_handler(
                _SERVICE, {
                    'GetOperation':
                        grpc.unary_unary_rpc_method_handler(
                            _get_operation,
                            request_deserializer=operations_pb2.
                            GetOperationRequest.FromString,
                            response_serializer=operations_pb2.Operation.
                            SerializeToString),
                }),))
        port = self._server.add_insecure_port('[::]:0')
        self._server.start()
        self._channel = grpc.intercept_channel(
            grpc.insecure_channel('localhost:%d' % port),
            interceptor.RoutingHeaderClientInterceptor(_METHOD_RULES))

    def tearDown(self):
        self._channel.close()
        self._server.stop(None)

    def testServerReceivesHeader(self):
        get_operation = self._channel.unary_unary(
            _GET_OPERATION,
            request_serializer=operations_pb2.GetOperationRequest.
            SerializeToString,
            response_deserializer=operations_pb2.Operation.FromString)
        response = get_operation(
            operations_pb2.GetOperationRequest(name='operations/a b'))
        self.assertEqual('name=operations/a+b', response.name)


if __name__ == '__main__':
    logging.basicConfig()
    unittest.main(verbosity=2)
