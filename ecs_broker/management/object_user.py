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

from ecs_broker import errors
from ecs_broker.management import models
from ecs_broker.management import path

_SECRET_KEYS = '/object/user-secret-keys/%s'


def create(connection, user_id, namespace):
    connection.request(op='POST', path='/object/users',
                       body={'user': user_id, 'namespace': namespace})


def delete(connection, user_id):
    connection.request(op='POST', path='/object/users/deactivate',
                       body={'user': user_id})


def exists(connection, user_id, namespace):
    try:
        connection.request(path=path('/object/users/%s/info', user_id),
                           namespace=namespace)
    except (errors.NotFound, errors.BadRequest):
        return False
    return True


def create_secret(connection, user_id):
    r = connection.request(op='POST', path=path(_SECRET_KEYS, user_id),
                           body={}, parse=True)
    return models.UserSecretKey.obj_from_data(r.json())


def list_secrets(connection, user_id):
    r = connection.request(path=path(_SECRET_KEYS, user_id), parse=True)
    return models.UserSecretKey.list_from_data(r.json())


def create_map(connection, user_id, uid, namespace):
    """Map an object user to a unix uid for file system access."""
    connection.request(op='POST', path='/object/users/map',
                       body={'user': user_id, 'uid': str(uid),
                             'namespace': namespace})


def delete_map(connection, user_id, uid, namespace):
    connection.request(op='POST', path='/object/users/unmap',
                       body={'user': user_id, 'uid': str(uid),
                             'namespace': namespace})
