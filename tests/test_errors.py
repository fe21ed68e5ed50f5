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
test_errors
----------------------------------

Tests errors classes.
"""

import unittest

import mock

from ecs_broker import errors


class TestErrors(unittest.TestCase):

    def test_init(self):
        """Test init providing all arguments."""
        http = errors.Http(mock.sentinel.message, mock.sentinel.code)
        self.assertEqual(mock.sentinel.message, http.message)
        self.assertEqual(mock.sentinel.code, http.code)

    def test_str(self):
        """Test str conversion."""
        http = errors.Http('message', 'code')
        self.assertIn('message', str(http))
        self.assertIn('code', str(http))

    def test_str_no_message(self):
        """Test str conversion with missing message."""
        http = errors.Http(code='code')
        self.assertIn('code', str(http))
        self.assertNotIn(':', str(http))

    def test_http_is_management_error(self):
        self.assertTrue(issubclass(errors.Http, errors.ManagementClient))
        self.assertTrue(issubclass(errors.ResourceNotFound,
                                   errors.ManagementClient))
        self.assertFalse(issubclass(errors.ManagementClient,
                                    errors.ServiceBroker))

    def test_check_classes(self):
        """Test that error classes are dynamically created."""
        for code, (cls_name, cls_parent) in errors.http_errors.items():
            cls = getattr(errors, cls_name)
            self.assertEqual(code, cls.code)
            self.assertIn(cls_parent, cls.__bases__)

    def test_create_http_exception(self):
        """Test that create_http_exception creates specific exceptions."""
        for code, (cls_name, cls_parent) in errors.http_errors.items():
            exc = errors.create_http_exception(code, mock.sentinel.message)
            self.assertEqual(code, exc.code)
            self.assertIsInstance(exc, getattr(errors, cls_name))
            self.assertEqual(mock.sentinel.message, exc.message)

    def test_create_http_exception_str_code(self):
        """Test create_http_exception creates exceptions from str codes."""
        exc = errors.create_http_exception('409', mock.sentinel.message)
        self.assertIsInstance(exc, errors.Conflict)
        self.assertEqual(409, exc.code)

    def test_create_http_exception_non_int_code(self):
        """Test create_http_exception with non int codes."""
        exc = errors.create_http_exception('code', mock.sentinel.message)
        self.assertIs(errors.Http, type(exc))
        self.assertEqual('code', exc.code)

    def test_create_http_exception_unknown_code(self):
        """Test create_http_exception with codes without specific class."""
        exc = errors.create_http_exception(418, mock.sentinel.message)
        self.assertIs(errors.Http, type(exc))
        self.assertEqual(418, exc.code)


class TestBrokerErrors(unittest.TestCase):

    def test_service_broker_message(self):
        exc = errors.ServiceBroker('message')
        self.assertEqual('message', str(exc))
        self.assertIsNone(exc.cause)

    def test_service_broker_cause(self):
        cause = errors.NotFound('missing')
        exc = errors.ServiceBroker(cause=cause)
        self.assertIs(cause, exc.cause)
        self.assertEqual(str(cause), str(exc))

    def test_instance_exists(self):
        exc = errors.InstanceExists('instance', 'service')
        self.assertIsInstance(exc, errors.ServiceBroker)
        self.assertEqual('instance', exc.instance_id)
        self.assertEqual('service', exc.service_id)
        self.assertIn('instance', str(exc))

    def test_reclaim_policy_error(self):
        exc = errors.ReclaimPolicyError('message', mock.sentinel.failure)
        self.assertEqual('message', str(exc))
        self.assertEqual(mock.sentinel.failure, exc.failure)

    def test_bucket_wipe_failed(self):
        exc = errors.BucketWipeFailed('bucket', ['timeout on obj3', 'other'])
        self.assertEqual('bucket', exc.bucket)
        self.assertEqual(['timeout on obj3', 'other'], exc.errors)
        self.assertEqual('BucketWipe Failed with 2 errors: timeout on obj3',
                         str(exc))
