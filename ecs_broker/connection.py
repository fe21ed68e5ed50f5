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

import logging

import requests

from ecs_broker import common
from ecs_broker import errors

LOG = logging.getLogger(__name__)

AUTH_TOKEN_HEADER = 'X-SDS-AUTH-TOKEN'


class Connection(object):
    """Authenticated session against the ECS management REST API.

    The management API hands out an auth token on ``GET /login`` using HTTP
    basic authentication, and every following request must carry it in the
    ``X-SDS-AUTH-TOKEN`` header.  The token is obtained lazily and renewed
    once when a request is answered with 401.
    """

    _required_attributes = ['endpoint', 'username', 'password']

    def __init__(self, endpoint, username, password, verify_ssl=False,
                 retry_params=None, timeout=60):
        """Initialize a management connection.

        :param endpoint: Management endpoint, like https://ecs:4443
        :type endpoint: String
        :param username: Management user name.
        :type username: String
        :param password: Management user password.
        :type password: String
        :param verify_ssl: Whether to verify the server certificate.
        :type verify_ssl: bool
        :param retry_params: Retry configuration used for read requests.  If
                             not specified RetryParams.get_default() will be
                             used.
        :type retry_params: RetryParams
        :param timeout: Seconds to wait for each HTTP request.
        :type timeout: int or float
        """
        self.endpoint = endpoint.rstrip('/') if endpoint else endpoint
        self.username = username
        self.password = password
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._retry_params = retry_params or common.RetryParams.get_default()
        self._token = None

    @property
    def retry_params(self):
        """Get retry configuration used for read requests."""
        return self._retry_params

    @retry_params.setter
    def retry_params(self, retry_params):
        """Set retry configuration used for read requests.

        :param retry_params: retry configuration.  If None is passed retries
                             will be disabled.
        :type retry_params: RetryParams or NoneType
        """
        assert isinstance(retry_params, (type(None), common.RetryParams))
        self._retry_params = retry_params

    @property
    def is_logged_in(self):
        return self._token is not None

    def url(self, path):
        return self.endpoint + path

    @common.is_complete
    def login(self):
        LOG.debug('Logging in to management endpoint %s as %s',
                  self.endpoint, self.username)
        try:
            r = requests.request('GET', self.url('/login'),
                                 auth=(self.username, self.password),
                                 headers={'Accept': 'application/json'},
                                 verify=self.verify_ssl, timeout=self.timeout)
        except requests.RequestException as exc:
            raise errors.ManagementClient(
                'Login to %s failed: %s' % (self.endpoint, exc)) from exc
        if r.status_code != requests.codes.ok:
            raise errors.create_http_exception(r.status_code, r.content)

        token = r.headers.get(AUTH_TOKEN_HEADER)
        if not token:
            raise errors.ManagementClient(
                'Management login response has no auth token')
        self._token = token

    def logout(self):
        if not self._token:
            return
        try:
            self._send('GET', self.url('/logout'), {}, None, None)
        finally:
            self._token = None

    def _send(self, op, url, params, body, headers):
        headers = {} if not headers else headers.copy()
        headers.setdefault('Accept', 'application/json')
        headers[AUTH_TOKEN_HEADER] = self._token
        try:
            return requests.request(op, url, params=params, headers=headers,
                                    json=body, verify=self.verify_ssl,
                                    timeout=self.timeout)
        except requests.RequestException as exc:
            raise errors.ManagementClient(
                '%s %s failed: %s' % (op, url, exc)) from exc

    def request(self, op='GET', path='', body=None, parse=False,
                ok=(requests.codes.ok,), headers=None, **params):
        """Request actions on a management resource.

        GET requests are retried on transient errors using the connection's
        retry configuration, other methods are sent exactly once.

        :param op: Operation to perform (GET, PUT, POST, DELETE).
        :type op: String
        :param path: Resource path relative to the management endpoint.
        :type path: String
        :param body: Body to send in the request, serialized as JSON.
        :type body: dict
        :param parse: If we want to check that response body is JSON.
        :type parse: bool
        :param ok: Response status codes to consider as OK.
        :type ok: Iterable of integer numbers
        :param headers: Extra headers to send in the request.  Authentication
                        will be added.
        :type headers: dict
        :param params: All params to send as URL params in the request, None
                       values are dropped.
        :returns: requests.Response
        """
        if op == 'GET':
            return self._request_with_retries(op, path, body, parse, ok,
                                              headers, params)
        return self._request(op, path, body, parse, ok, headers, params)

    @common.retry
    def _request_with_retries(self, *args):
        return self._request(*args)

    def _request(self, op, path, body, parse, ok, headers, params):
        if not self._token:
            self.login()

        params = {k: v for k, v in params.items() if v is not None}
        url = self.url(path)
        r = self._send(op, url, params, body, headers)

        # Token may have expired, log in again once.
        if r.status_code == requests.codes.unauthorized:
            LOG.debug('Management token rejected, logging in again')
            self._token = None
            self.login()
            r = self._send(op, url, params, body, headers)

        if r.status_code not in ok:
            raise errors.create_http_exception(r.status_code, r.content)

        if parse:
            try:
                r.json()
            except Exception:
                raise errors.ManagementClient(
                    'Management response is not JSON: %s' % r.content)

        return r

    def __str__(self):
        return self.endpoint or ''

    def __repr__(self):
        return ("%s.%s('%s', '%s')" % (self.__module__,
                self.__class__.__name__, self.endpoint, self.username))
