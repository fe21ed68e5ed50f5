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

import requests

from ecs_broker import errors
from ecs_broker.management import models
from ecs_broker.management import path

_NAMESPACE = '/object/namespaces/namespace/%s'
_RETENTION = _NAMESPACE + '/retention'
_RETENTION_CLASS = _RETENTION + '/%s'


def exists(connection, namespace_id):
    try:
        connection.request(path=path(_NAMESPACE, namespace_id))
    except (errors.NotFound, errors.BadRequest):
        return False
    return True


def create(connection, namespace_create):
    connection.request(op='POST', path='/object/namespaces/namespace',
                       body=namespace_create.to_data())


def update(connection, namespace_id, namespace_update):
    connection.request(op='PUT', path=path(_NAMESPACE, namespace_id),
                       body=namespace_update.to_data())


def delete(connection, namespace_id):
    connection.request(op='POST',
                       path=path(_NAMESPACE + '/deactivate', namespace_id))


def create_quota(connection, namespace_id, quota):
    """Set the namespace quota.

    :param quota: Quota sizes.
    :type quota: models.NamespaceQuota
    """
    connection.request(op='PUT', path=path(_NAMESPACE + '/quota',
                                           namespace_id),
                       body=quota.to_data())


def retention_exists(connection, namespace_id, name):
    try:
        connection.request(path=path(_RETENTION_CLASS, namespace_id, name))
    except (errors.NotFound, errors.BadRequest):
        return False
    return True


def create_retention(connection, namespace_id, name, period):
    connection.request(op='POST', path=path(_RETENTION, namespace_id),
                       body=models.RetentionClass(name=name,
                                                  period=period).to_data())


def update_retention(connection, namespace_id, name, period):
    connection.request(op='PUT',
                       path=path(_RETENTION_CLASS, namespace_id, name),
                       body={'period': period})


def delete_retention(connection, namespace_id, name):
    connection.request(op='DELETE',
                       path=path(_RETENTION_CLASS, namespace_id, name),
                       ok=(requests.codes.ok, requests.codes.no_content))
