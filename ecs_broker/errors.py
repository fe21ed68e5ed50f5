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

from http import client as httplib
import sys


class Error(Exception):
    """Base error for all ecs_broker operations."""
    pass


class Configuration(Error):
    """Broker configuration or catalog errors."""
    pass


class ManagementClient(Error):
    """Errors returned by the ECS management API client."""
    pass


class ResourceNotFound(ManagementClient):
    """A looked up management resource does not exist."""
    pass


class Http(ManagementClient):
    """HTTP specific errors."""
    code = None

    def __init__(self, message=None, code=None):
        if code:
            self.code = code
        self.message = message
        super(Http, self).__init__(message)

    def __str__(self):
        msg = 'HTTP Error %s' % self.code
        if self.message:
            msg += ': %s' % self.message
        return msg


class Fatal(Http):
    """Fatal HTTP exceptions."""
    pass


class Transient(Http):
    """Transient  HTTP exceptions."""
    pass


class ServiceBroker(Error):
    """Broker level error reported back to the platform.

    :ivar cause: Underlying exception, if any.
    """

    def __init__(self, message=None, cause=None):
        if message is None and cause is not None:
            message = str(cause)
        self.message = message
        self.cause = cause
        super(ServiceBroker, self).__init__(message)

    def __str__(self):
        return self.message or self.__class__.__name__


class InstanceExists(ServiceBroker):
    """A service instance with the same id has already been provisioned."""

    def __init__(self, instance_id, service_id):
        self.instance_id = instance_id
        self.service_id = service_id
        super(InstanceExists, self).__init__(
            'Service instance with id %s already exists for service %s' %
            (instance_id, service_id))


class ReclaimPolicyError(ServiceBroker):
    """Reclaim policy could not be parsed or is not allowed.

    :ivar failure: Reason of the failure.
    :vartype failure: ecs_broker.reclaim_policy.Failure
    """

    def __init__(self, message, failure=None):
        self.failure = failure
        super(ReclaimPolicyError, self).__init__(message)


class BucketWipeFailed(ServiceBroker):
    """Bucket wipe finished with per object errors."""

    def __init__(self, bucket, wipe_errors):
        self.bucket = bucket
        self.errors = list(wipe_errors)
        super(BucketWipeFailed, self).__init__(
            'BucketWipe Failed with %d errors: %s' %
            (len(self.errors), self.errors[0] if self.errors else ''))


http_errors = {
    httplib.REQUEST_TIMEOUT: ('RequestTimeout', Transient),
    httplib.INTERNAL_SERVER_ERROR: ('InternalServer', Transient),
    httplib.BAD_GATEWAY: ('BadGateway', Transient),
    httplib.SERVICE_UNAVAILABLE: ('ServiceUnavailable', Transient),
    httplib.GATEWAY_TIMEOUT: ('GatewayTimeout', Transient),
    httplib.NOT_FOUND: ('NotFound', Fatal),
    httplib.BAD_REQUEST: ('BadRequest', Fatal),
    httplib.FORBIDDEN: ('Forbidden', Fatal),
    httplib.UNAUTHORIZED: ('Unauthorized', Fatal),
    httplib.CONFLICT: ('Conflict', Fatal),
    429: ('TooManyRequests', Transient),
}


def create_http_exception(status_code, message=None):
    """Create an http exception.

    Create an Http exception instance as specific as possible.

    For status codes that have specific exceptions, like with 404
    (NotFound class), those will be returned, but for those that we don't
    have one we will return a generic Http error with the right status code.

    :param status_code: Status code of the http error
    :type status_code: int or string
    :param message: Detailed message for the error
    :type message: str
    :returns: Http exception instance as specific as possible
    :rtype: Http or subclass
    """
    # Try to convert status_code to an integer if it's not one already
    if not isinstance(status_code, int):
        try:
            status_code = int(status_code)
        except ValueError:
            pass

    # Get specific exception if possible
    cls_name, __ = http_errors.get(status_code, (None, None))
    if cls_name:
        return globals()[cls_name](message)

    # Return generic exception
    return Http(message, status_code)


# Dynamically create all HTTP error classes from http_errors dictionary
for status_code, (name, error_class) in http_errors.items():
    new_class = type(name, (error_class,),
                     {'__module__': __name__, 'code': status_code})
    sys.modules[__name__ + '.' + name] = new_class
    globals()[new_class.__name__] = new_class
