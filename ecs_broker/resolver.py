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

"""Startup discovery of the object endpoint and replication group.

The values found here are resolved once and then shared, unchanged, by every
request the broker serves.  A restart is needed to pick up changes on the ECS
side.
"""

import collections
import logging

from ecs_broker import constants
from ecs_broker import errors
from ecs_broker.management import base_url as base_url_action
from ecs_broker.management import replication_group as rg_action
from ecs_broker import reclaim_policy

LOG = logging.getLogger(__name__)


ServiceState = collections.namedtuple(
    'ServiceState', ['object_endpoint', 'repository_endpoint', 'base_url',
                     'replication_group_id', 'default_reclaim_policy',
                     'repository_secret'])


def resolve_object_endpoint(connection, config):
    """Find the object endpoint URL of the broker namespace.

    An explicitly configured object endpoint wins.  Otherwise the configured
    base URL is looked up by name, falling back to the base URL named
    DefaultBaseUrl and then to the first one available.

    :returns: Object endpoint and name of the base URL it was built from.
    :rtype: tuple of two strings
    """
    if config.object_endpoint:
        return config.object_endpoint, config.base_url

    base_urls = base_url_action.list(connection)
    if not base_urls:
        raise errors.ResourceNotFound(
            'Cannot determine object endpoint url: base URLs list is empty, '
            'check ECS server settings')

    if config.base_url:
        url = find_base_url(base_urls, config.base_url)
        if url is None:
            raise errors.ResourceNotFound(
                'Configured ECS Base URL not found: %s' % config.base_url)
    else:
        url = (find_base_url(base_urls, constants.DEFAULT_BASE_URL_NAME) or
               base_urls[0])

    info = base_url_action.get(connection, url.id)
    endpoint = info.namespace_url(config.namespace, False)
    LOG.info("Object Endpoint address from configured base url '%s': %s",
             info.name, endpoint)

    name = info.name or config.base_url
    if name != config.base_url:
        LOG.info("Setting base url name to '%s'", name)
    return endpoint, name


def find_base_url(base_urls, name):
    for url in base_urls:
        if url is not None and url.name == name:
            return url
    return None


def resolve_replication_group(connection, config):
    """Id of the configured replication group, matched by name or id."""
    wanted = config.replication_group
    for group in rg_action.list(connection):
        if group is not None and wanted in (group.name, group.id):
            LOG.info('Replication group found: %s (%s)', group.name,
                     group.id)
            return group.id
    raise errors.ResourceNotFound(
        'Configured ECS replication group not found: %s' % wanted)


def resolve_reclaim_policy(config):
    if not config.default_reclaim_policy:
        policy = reclaim_policy.DEFAULT_RECLAIM_POLICY
    else:
        try:
            policy = reclaim_policy.parse(config.default_reclaim_policy)
        except ValueError as exc:
            raise errors.Configuration(str(exc))
    LOG.info('Default Reclaim Policy: %s', policy.value)
    return policy


def resolve(connection, config):
    """Resolve startup state, in order: endpoint, replication group, policy.

    The repository secret is not known yet and is left as None.
    """
    endpoint, base_url = resolve_object_endpoint(connection, config)
    return ServiceState(
        object_endpoint=endpoint,
        repository_endpoint=config.repository_endpoint or endpoint,
        base_url=base_url,
        replication_group_id=resolve_replication_group(connection, config),
        default_reclaim_policy=resolve_reclaim_policy(config),
        repository_secret=None)
