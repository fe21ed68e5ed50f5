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

"""Bulk deletion of the objects stored in a bucket.

The management API refuses to delete buckets that still hold objects, so
buckets are emptied through the S3 object API before being deleted.
"""

from concurrent import futures
import logging
import threading

import boto3
from botocore import exceptions as boto_exceptions

from ecs_broker import errors

LOG = logging.getLogger(__name__)

#: S3 DeleteObjects accepts up to this number of keys per request.
DELETE_BATCH_SIZE = 1000


class BucketWipeResult(object):
    """Progress and outcome of a bucket wipe.

    :ivar completed_future: Resolved with this result once the wipe ends,
                            whether objects failed to delete or not.
    :vartype completed_future: concurrent.futures.Future
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._deleted = 0
        self._errors = []
        self.completed_future = futures.Future()

    @property
    def deleted_objects(self):
        with self._lock:
            return self._deleted

    @property
    def errors(self):
        with self._lock:
            return list(self._errors)

    def increment_deleted(self, count=1):
        with self._lock:
            self._deleted += count

    def add_error(self, error):
        with self._lock:
            self._errors.append(error)

    def complete(self):
        if not self.completed_future.done():
            self.completed_future.set_result(self)


class BucketWipeOperations(object):
    """Deletes all objects of buckets using the S3 API in the background."""

    def __init__(self, endpoint, access_key, secret_key, max_workers=4,
                 client=None):
        """Initialize the wipe tool.

        :param endpoint: S3 object endpoint URL.
        :type endpoint: String
        :param access_key: Object user with access to the buckets.
        :type access_key: String
        :param secret_key: Secret key of the object user.
        :type secret_key: String
        :param max_workers: Number of buckets wiped concurrently.
        :type max_workers: int
        :param client: Already built S3 client to use instead.
        """
        self.endpoint = endpoint
        self._client = client or boto3.client(
            's3', endpoint_url=endpoint, aws_access_key_id=access_key,
            aws_secret_access_key=secret_key)
        self._executor = futures.ThreadPoolExecutor(max_workers=max_workers)

    def delete_all_objects(self, bucket, prefix, result):
        """Start deleting every object in bucket under prefix.

        Returns at once, `result.completed_future` tells when it is done.
        """
        return self._executor.submit(self._wipe, bucket, prefix, result)

    def _wipe(self, bucket, prefix, result):
        try:
            paginator = self._client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                keys = [o['Key'] for o in page.get('Contents', [])]
                for i in range(0, len(keys), DELETE_BATCH_SIZE):
                    self._delete_batch(bucket, keys[i:i + DELETE_BATCH_SIZE],
                                       result)
        except (boto_exceptions.BotoCoreError,
                boto_exceptions.ClientError) as exc:
            LOG.warning('Listing objects of bucket %s failed: %s', bucket,
                        exc)
            result.add_error(str(exc))
        except Exception as exc:
            LOG.exception('Wipe of bucket %s failed', bucket)
            result.add_error(str(exc))
        finally:
            result.complete()

    def _delete_batch(self, bucket, keys, result):
        try:
            r = self._client.delete_objects(
                Bucket=bucket,
                Delete={'Objects': [{'Key': k} for k in keys],
                        'Quiet': True})
        except (boto_exceptions.BotoCoreError,
                boto_exceptions.ClientError) as exc:
            for key in keys:
                result.add_error('%s: %s' % (key, exc))
            return

        failed = r.get('Errors', [])
        for error in failed:
            result.add_error('%s: %s' % (error.get('Key'),
                                         error.get('Message')))
        result.increment_deleted(len(keys) - len(failed))

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)


class BucketWipeFactory(object):
    """Builds wipe tools and results, replaceable in tests."""

    def new_bucket_wipe_result(self):
        return BucketWipeResult()

    def get_bucket_wipe(self, endpoint, access_key, secret_key):
        try:
            return BucketWipeOperations(endpoint, access_key, secret_key)
        except (boto_exceptions.BotoCoreError, ValueError) as exc:
            raise errors.ServiceBroker(
                'Cannot build S3 client for %s: %s' % (endpoint, exc),
                cause=exc) from exc
