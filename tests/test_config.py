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
test_config
----------------------------------

Tests for broker settings and catalog.
"""

import os
import tempfile
import unittest

import mock

from ecs_broker import config
from ecs_broker import errors


CONFIG_FILE = """
broker:
  management-endpoint: https://ecs:4443
  password: secret
  namespace: ns1
  replication-group: rg1
  base-url: MyBaseUrl
catalog:
  - id: bucket-service
    name: ecs-bucket
    repository: true
    service-settings:
      encrypted: true
    plans:
      - id: 5gb
        name: 5gb
        service-settings:
          quota: {limit: 5, warn: 4}
      - id: repo
        name: repository
        repository: true
  - id: namespace-service
    name: ecs-namespace
    type: namespace
"""


def _service(**kwargs):
    data = {'id': 'service', 'name': 'service',
            'plans': [{'id': 'plan1', 'name': 'plan1'},
                      {'id': 'plan2', 'name': 'plan2', 'repository': True}]}
    data.update(kwargs)
    return config.ServiceDefinition.from_dict(data)


class TestBrokerConfig(unittest.TestCase):

    def _config(self, **kwargs):
        settings = {'management_endpoint': 'https://ecs:4443',
                    'namespace': 'ns1', 'replication_group': 'rg1'}
        settings.update(kwargs)
        return config.BrokerConfig(**settings)

    def test_defaults(self):
        cfg = self._config()
        self.assertEqual('root', cfg.username)
        self.assertEqual('ecs-cf-broker-', cfg.prefix)
        self.assertEqual('repository', cfg.repository_bucket)
        self.assertEqual('user', cfg.repository_user)
        self.assertFalse(cfg.verify_ssl)
        self.assertIsNone(cfg.base_url)
        self.assertIsNone(cfg.object_endpoint)

    def test_dashes(self):
        cfg = config.BrokerConfig.from_dict({
            'management-endpoint': 'https://ecs:4443', 'namespace': 'ns1',
            'replication-group': 'rg1', 'nfs-mount-host': 'nfs'})
        self.assertEqual('nfs', cfg.nfs_mount_host)
        self.assertEqual('rg1', cfg.replication_group)

    def test_unknown_setting(self):
        self.assertRaises(errors.Configuration, self._config, port=80)

    def test_missing_setting(self):
        self.assertRaises(errors.Configuration, self._config, namespace=None)

    def test_from_dict_none(self):
        self.assertRaises(errors.Configuration,
                          config.BrokerConfig.from_dict, None)

    def test_repr_hides_password(self):
        cfg = self._config(password='very-secret')
        self.assertNotIn('very-secret', repr(cfg))
        self.assertIn('ns1', repr(cfg))


class TestServiceDefinition(unittest.TestCase):

    def test_from_dict(self):
        service = _service(**{'service-settings': {'encrypted': True}})
        self.assertEqual(config.ServiceDefinition.BUCKET, service.type)
        self.assertEqual({'encrypted': True}, service.service_settings)
        self.assertFalse(service.repository)
        self.assertEqual(('plan1', 'plan2'), tuple(p.id for p in
                                                   service.plans))
        self.assertEqual({}, service.plans[0].service_settings)

    def test_missing_id(self):
        self.assertRaises(errors.Configuration,
                          config.ServiceDefinition.from_dict, {'name': 'n'})

    def test_missing_plan_name(self):
        self.assertRaises(errors.Configuration, _service,
                          plans=[{'id': 'plan'}])

    def test_find_plan(self):
        self.assertEqual('plan1', _service().find_plan('plan1').name)

    def test_find_plan_missing(self):
        self.assertRaises(errors.Configuration, _service().find_plan,
                          'other')

    def test_repository_plan(self):
        self.assertEqual('plan2', _service().repository_plan.id)

    def test_repository_plan_missing(self):
        service = _service(plans=[{'id': 'plan1', 'name': 'plan1'}])
        self.assertRaises(errors.Configuration, getattr, service,
                          'repository_plan')

    def test_immutable(self):
        self.assertRaises(AttributeError, setattr, _service(), 'name', 'x')


class TestCatalog(unittest.TestCase):

    def test_find_service_definition(self):
        service = _service()
        catalog = config.Catalog([service])
        self.assertIs(service, catalog.find_service_definition('service'))
        self.assertIsNone(catalog.find_service_definition('other'))

    def test_services_keep_order(self):
        catalog = config.Catalog.from_list([{'id': 'b', 'name': 'b'},
                                            {'id': 'a', 'name': 'a'}])
        self.assertEqual(['b', 'a'], [s.id for s in catalog.services])

    def test_repository_service(self):
        catalog = config.Catalog([_service(),
                                  _service(id='repo', repository=True)])
        self.assertEqual('repo', catalog.repository_service.id)

    def test_repository_service_missing(self):
        catalog = config.Catalog([_service()])
        self.assertRaises(errors.Configuration, getattr, catalog,
                          'repository_service')


class TestLoad(unittest.TestCase):

    def _write(self, contents):
        fd, file_name = tempfile.mkstemp(suffix='.yml')
        with os.fdopen(fd, 'w') as f:
            f.write(contents)
        self.addCleanup(os.remove, file_name)
        return file_name

    def test_load(self):
        cfg, catalog = config.load(self._write(CONFIG_FILE))

        self.assertEqual('https://ecs:4443', cfg.management_endpoint)
        self.assertEqual('MyBaseUrl', cfg.base_url)
        self.assertEqual('secret', cfg.password)

        self.assertEqual(['bucket-service', 'namespace-service'],
                         [s.id for s in catalog.services])
        service = catalog.repository_service
        self.assertEqual('bucket-service', service.id)
        self.assertEqual({'quota': {'limit': 5, 'warn': 4}},
                         service.find_plan('5gb').service_settings)
        self.assertEqual('repo', service.repository_plan.id)
        self.assertEqual(config.ServiceDefinition.NAMESPACE,
                         catalog.find_service_definition(
                             'namespace-service').type)

    def test_load_missing_file(self):
        self.assertRaises(errors.Configuration, config.load,
                          '/non/existent/file.yml')

    def test_load_invalid_yaml(self):
        self.assertRaises(errors.Configuration, config.load,
                          self._write('broker: [unclosed'))

    @mock.patch('yaml.safe_load', return_value=None)
    def test_load_empty(self, load_mock):
        self.assertRaises(errors.Configuration, config.load,
                          self._write(''))
        self.assertEqual(1, load_mock.call_count)
