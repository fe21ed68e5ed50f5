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

import collections

import yaml

from ecs_broker import errors


class BrokerConfig(object):
    """Broker settings.

    Settings are given as keyword arguments, unknown settings are rejected.
    Setting names accept dashes as in the YAML configuration file.
    """

    defaults = {
        'management_endpoint': None,
        'username': 'root',
        'password': None,
        'verify_ssl': False,
        'namespace': None,
        'replication_group': None,
        'prefix': 'ecs-cf-broker-',
        'base_url': None,
        'object_endpoint': None,
        'repository_endpoint': None,
        'repository_bucket': 'repository',
        'repository_user': 'user',
        'repository_service_id': None,
        'repository_plan_id': None,
        'default_reclaim_policy': None,
        'nfs_mount_host': None,
    }
    required = ('management_endpoint', 'namespace', 'replication_group')

    def __init__(self, **kwargs):
        settings = dict(self.defaults)
        for key, value in kwargs.items():
            key = key.replace('-', '_')
            if key not in self.defaults:
                raise errors.Configuration('Unknown broker setting: %s' % key)
            settings[key] = value

        missing = [k for k in self.required if not settings[k]]
        if missing:
            raise errors.Configuration('Missing broker settings: %s' %
                                       ', '.join(missing))
        self.__dict__.update(settings)

    @classmethod
    def from_dict(cls, data):
        return cls(**(data or {}))

    def __repr__(self):
        # Never show the password
        return '%s(%s)' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (k, getattr(self, k)) for k in sorted(self.defaults)
            if k != 'password'))


class Plan(collections.namedtuple(
        'Plan', 'id name description service_settings repository')):
    """Service plan, read only."""

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(id=data['id'], name=data['name'],
                       description=data.get('description'),
                       service_settings=dict(
                           data.get('service-settings') or {}),
                       repository=bool(data.get('repository', False)))
        except KeyError as exc:
            raise errors.Configuration('Plan is missing %s' % exc)


class ServiceDefinition(collections.namedtuple(
        'ServiceDefinition',
        'id name type description service_settings repository plans')):
    """Provisionable service offering, read only."""

    BUCKET = 'bucket'
    NAMESPACE = 'namespace'

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(id=data['id'], name=data['name'],
                       type=data.get('type', cls.BUCKET),
                       description=data.get('description'),
                       service_settings=dict(
                           data.get('service-settings') or {}),
                       repository=bool(data.get('repository', False)),
                       plans=tuple(Plan.from_dict(p)
                                   for p in data.get('plans') or []))
        except KeyError as exc:
            raise errors.Configuration('Service definition is missing %s' %
                                       exc)

    def find_plan(self, plan_id):
        for plan in self.plans:
            if plan.id == plan_id:
                return plan
        raise errors.Configuration('No plan matching plan id: %s' % plan_id)

    @property
    def repository_plan(self):
        for plan in self.plans:
            if plan.repository:
                return plan
        raise errors.Configuration('No repository plan configured for '
                                   'service %s' % self.id)


class Catalog(object):
    """Lookup table of service definitions by id."""

    def __init__(self, services=()):
        self._services = collections.OrderedDict((s.id, s) for s in services)

    @classmethod
    def from_list(cls, data):
        return cls(ServiceDefinition.from_dict(s) for s in data or [])

    @property
    def services(self):
        return list(self._services.values())

    def find_service_definition(self, service_id):
        return self._services.get(service_id)

    @property
    def repository_service(self):
        for service in self._services.values():
            if service.repository:
                return service
        raise errors.Configuration('No repository service configured')


def load(file_name):
    """Load broker settings and catalog from a YAML file.

    The file has a `broker` section with the BrokerConfig settings and a
    `catalog` section with the list of service definitions.

    :param file_name: Path of the YAML configuration file.
    :type file_name: String
    :returns: Broker configuration and catalog.
    :rtype: tuple of BrokerConfig and Catalog
    """
    try:
        with open(file_name, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (IOError, yaml.YAMLError) as exc:
        raise errors.Configuration('Could not read configuration file %s: '
                                   '%s' % (file_name, exc))

    return (BrokerConfig.from_dict(data.get('broker')),
            Catalog.from_list(data.get('catalog')))
