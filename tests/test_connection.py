#!/usr/bin/env python
# -*- coding: utf-8 -*-
# Copyright 2015 Red Hat, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#     Unless required by applicable law or agreed to in writing, software
#     distributed under the License is distributed on an "AS IS" BASIS,
#     WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#     See the License for the specific language governing permissions and
#     limitations under the License.

"""
test_connection
----------------------------------

Tests for the management API Connection class.
"""

import unittest

import mock
import requests

from ecs_broker import common
from ecs_broker import connection
from ecs_broker import errors


def _response(status_code=200, token=None, **kwargs):
    headers = {connection.AUTH_TOKEN_HEADER: token} if token else {}
    return mock.Mock(status_code=status_code, headers=headers,
                     content=mock.sentinel.content, **kwargs)


@mock.patch('requests.request')
class TestConnection(unittest.TestCase):

    def setUp(self):
        self.conn = connection.Connection(
            'https://ecs:4443/', 'root', 'secret',
            retry_params=common.RetryParams(2, 0, 0, 2, False))

    def test_init(self, request_mock):
        """Test init strips the endpoint and is not logged in."""
        self.assertEqual('https://ecs:4443', self.conn.endpoint)
        self.assertFalse(self.conn.is_logged_in)
        self.assertFalse(self.conn.verify_ssl)
        self.assertEqual('https://ecs:4443/object/bucket',
                         self.conn.url('/object/bucket'))
        self.assertFalse(request_mock.called)

    def test_init_default_retry_params(self, request_mock):
        conn = connection.Connection('https://ecs:4443', 'root', 'secret')
        self.assertIs(common.RetryParams.get_default(), conn.retry_params)

    def test_set_retry_params(self, request_mock):
        self.conn.retry_params = None
        self.assertIsNone(self.conn.retry_params)
        self.assertRaises(AssertionError, setattr, self.conn,
                          'retry_params', mock.sentinel.retry)

    def test_login(self, request_mock):
        request_mock.return_value = _response(token='token')
        self.conn.login()
        self.assertTrue(self.conn.is_logged_in)
        request_mock.assert_called_once_with(
            'GET', 'https://ecs:4443/login', auth=('root', 'secret'),
            headers={'Accept': 'application/json'}, verify=False,
            timeout=60)

    def test_login_missing_endpoint(self, request_mock):
        conn = connection.Connection(None, 'root', 'secret')
        self.assertRaises(errors.Configuration, conn.login)
        self.assertFalse(request_mock.called)

    def test_login_rejected(self, request_mock):
        request_mock.return_value = _response(401)
        self.assertRaises(errors.Unauthorized, self.conn.login)
        self.assertFalse(self.conn.is_logged_in)

    def test_login_no_token(self, request_mock):
        request_mock.return_value = _response()
        self.assertRaises(errors.ManagementClient, self.conn.login)
        self.assertFalse(self.conn.is_logged_in)

    def test_login_connection_error(self, request_mock):
        request_mock.side_effect = requests.ConnectionError('refused')
        self.assertRaises(errors.ManagementClient, self.conn.login)

    def test_request_logs_in_lazily(self, request_mock):
        """Test first request logs in and sends the token."""
        response = _response()
        request_mock.side_effect = [_response(token='token'), response]

        result = self.conn.request(path='/object/bucket/b/info',
                                   namespace='ns', marker=None)

        self.assertIs(response, result)
        self.assertEqual(2, request_mock.call_count)
        request_mock.assert_called_with(
            'GET', 'https://ecs:4443/object/bucket/b/info',
            params={'namespace': 'ns'},
            headers={'Accept': 'application/json',
                     connection.AUTH_TOKEN_HEADER: 'token'},
            json=None, verify=False, timeout=60)

    def test_request_body(self, request_mock):
        request_mock.side_effect = [_response(token='token'), _response()]
        self.conn.request(op='POST', path='/object/users',
                          body={'user': 'u'})
        args, kwargs = request_mock.call_args
        self.assertEqual(('POST', 'https://ecs:4443/object/users'), args)
        self.assertEqual({'user': 'u'}, kwargs['json'])

    def test_request_relogin_on_unauthorized(self, request_mock):
        """Test expired token is renewed once."""
        response = _response()
        request_mock.side_effect = [_response(token='old'), _response(401),
                                    _response(token='new'), response]

        self.assertIs(response, self.conn.request(path='/object/baseurl'))
        self.assertEqual(4, request_mock.call_count)
        headers = request_mock.call_args[1]['headers']
        self.assertEqual('new', headers[connection.AUTH_TOKEN_HEADER])

    def test_request_unauthorized_twice(self, request_mock):
        request_mock.side_effect = [_response(token='old'), _response(401),
                                    _response(token='new'), _response(401)]
        self.assertRaises(errors.Unauthorized, self.conn.request,
                          path='/object/baseurl')
        self.assertEqual(4, request_mock.call_count)

    def test_request_not_ok(self, request_mock):
        request_mock.side_effect = [_response(token='token'), _response(404)]
        with self.assertRaises(errors.NotFound) as cm:
            self.conn.request(path='/object/bucket/b/info')
        self.assertEqual(mock.sentinel.content, cm.exception.message)

    def test_request_ok_codes(self, request_mock):
        response = _response(204)
        request_mock.side_effect = [_response(token='token'), response]
        result = self.conn.request(op='DELETE', path='/quota', ok=(200, 204))
        self.assertIs(response, result)

    def test_request_parse_error(self, request_mock):
        response = _response()
        response.json.side_effect = ValueError
        request_mock.side_effect = [_response(token='token'), response]
        self.assertRaises(errors.ManagementClient, self.conn.request,
                          path='/object/baseurl', parse=True)

    def test_request_get_retries(self, request_mock):
        """Test GET requests are retried on transient errors."""
        response = _response()
        request_mock.side_effect = [_response(token='token'), _response(503),
                                    _response(500), response]
        self.assertIs(response, self.conn.request(path='/object/baseurl'))
        self.assertEqual(4, request_mock.call_count)

    def test_request_get_retries_exhausted(self, request_mock):
        request_mock.side_effect = [_response(token='token')] + [
            _response(503) for __ in range(3)]
        self.assertRaises(errors.ServiceUnavailable, self.conn.request,
                          path='/object/baseurl')
        self.assertEqual(4, request_mock.call_count)

    def test_request_post_not_retried(self, request_mock):
        """Test mutating requests are sent exactly once."""
        request_mock.side_effect = [_response(token='token'), _response(503)]
        self.assertRaises(errors.ServiceUnavailable, self.conn.request,
                          op='POST', path='/object/bucket', body={})
        self.assertEqual(2, request_mock.call_count)

    def test_request_connection_error(self, request_mock):
        request_mock.side_effect = [_response(token='token'),
                                    requests.Timeout('timeout')]
        self.assertRaises(errors.ManagementClient, self.conn.request,
                          path='/object/baseurl')

    def test_logout(self, request_mock):
        request_mock.side_effect = [_response(token='token'), _response()]
        self.conn.login()
        self.conn.logout()
        self.assertFalse(self.conn.is_logged_in)
        self.assertEqual('https://ecs:4443/logout',
                         request_mock.call_args[0][1])

    def test_logout_not_logged_in(self, request_mock):
        self.conn.logout()
        self.assertFalse(request_mock.called)

    def test_str(self, request_mock):
        self.assertEqual('https://ecs:4443', str(self.conn))

    def test_repr(self, request_mock):
        self.assertEqual(
            "ecs_broker.connection.Connection('https://ecs:4443', 'root')",
            repr(self.conn))
