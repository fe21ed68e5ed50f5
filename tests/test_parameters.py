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
test_parameters
----------------------------------

Tests for merging forced settings on request parameters.
"""

import unittest

import mock

from ecs_broker import parameters


class TestMergeSettings(unittest.TestCase):

    def test_none_parameters(self):
        result = parameters.merge_settings(None, {'a': 1})
        self.assertEqual({'a': 1}, result)

    def test_same_mapping_returned(self):
        params = {'a': 1}
        self.assertIs(params, parameters.merge_settings(params, {'b': 2}))
        self.assertEqual({'a': 1, 'b': 2}, params)

    def test_empty_settings(self):
        params = {'a': 1}
        parameters.merge_settings(params, None, {})
        self.assertEqual({'a': 1}, params)

    def test_later_settings_win(self):
        result = parameters.merge_settings({'a': 1}, {'a': 2}, {'a': 3})
        self.assertEqual({'a': 3}, result)

    def test_no_deep_merge(self):
        result = parameters.merge_settings(
            {'quota': {'limit': 5, 'warn': 4}}, {'quota': {'limit': 10}})
        self.assertEqual({'quota': {'limit': 10}}, result)


class TestMergeServiceSettings(unittest.TestCase):

    def test_service_overrides_plan(self):
        plan = mock.Mock(service_settings={'a': 'plan', 'b': 'plan'})
        service = mock.Mock(service_settings={'a': 'service'})
        result = parameters.merge_service_settings({'a': 'user', 'c': 'user'},
                                                   plan, service)
        self.assertEqual({'a': 'service', 'b': 'plan', 'c': 'user'}, result)

    def test_quota_scenario(self):
        plan = mock.Mock(service_settings={'quota': {'limit': 10,
                                                     'warn': 8}})
        service = mock.Mock(service_settings={})
        result = parameters.merge_service_settings(None, plan, service)
        self.assertEqual({'quota': {'limit': 10, 'warn': 8}}, result)
