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

_BUCKET = '/object/bucket/%s'


def exists(connection, bucket_id, namespace):
    try:
        connection.request(path=path(_BUCKET + '/info', bucket_id),
                           namespace=namespace)
    except (errors.NotFound, errors.BadRequest):
        return False
    return True


def create(connection, bucket_create):
    """Create a bucket.

    :param bucket_create: Bucket definition.
    :type bucket_create: models.BucketCreate
    """
    connection.request(op='POST', path='/object/bucket',
                       body=bucket_create.to_data())


def get(connection, bucket_id, namespace):
    r = connection.request(path=path(_BUCKET + '/info', bucket_id),
                           parse=True, namespace=namespace)
    return models.BucketInfo.obj_from_data(r.json())


def delete(connection, bucket_id, namespace):
    connection.request(op='POST',
                       path=path(_BUCKET + '/deactivate', bucket_id),
                       namespace=namespace)


def create_quota(connection, bucket_id, namespace, limit, warn):
    connection.request(op='PUT', path=path(_BUCKET + '/quota', bucket_id),
                       body={'namespace': namespace,
                             'blockSize': limit,
                             'notificationSize': warn})


def delete_quota(connection, bucket_id, namespace):
    connection.request(op='DELETE', path=path(_BUCKET + '/quota', bucket_id),
                       ok=(requests.codes.ok, requests.codes.no_content),
                       namespace=namespace)


def update_retention(connection, namespace, bucket_id, period):
    connection.request(op='PUT',
                       path=path(_BUCKET + '/retention', bucket_id),
                       body={'namespace': namespace, 'period': period})


def get_acl(connection, bucket_id, namespace):
    r = connection.request(path=path(_BUCKET + '/acl', bucket_id),
                           parse=True, namespace=namespace)
    return models.BucketAcl.obj_from_data(r.json())


def update_acl(connection, bucket_id, acl):
    connection.request(op='PUT', path=path(_BUCKET + '/acl', bucket_id),
                       body=acl.to_data())


def update_policy(connection, bucket_id, policy, namespace):
    connection.request(op='PUT', path=path(_BUCKET + '/policy', bucket_id),
                       body=policy.to_data(), namespace=namespace)
