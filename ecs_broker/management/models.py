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

"""Request and response bodies of the ECS management API.

Each class knows how to build itself from the JSON data returned by the
management API (`obj_from_data`) and, for request bodies, how to render the
JSON to send (`to_data`).
"""

from ecs_broker import constants


def _flag(parameters, key):
    value = parameters.get(key)
    return None if value is None else bool(value)


class Model(object):
    """Base for management API records."""

    _fields = ()

    def __init__(self, **kwargs):
        for field in self._fields:
            setattr(self, field, kwargs.pop(field, None))
        if kwargs:
            raise TypeError('Unexpected fields for %s: %s' %
                            (self.__class__.__name__, ', '.join(kwargs)))

    @classmethod
    def obj_from_data(cls, data):
        return cls(**{k: v for k, v in data.items() if k in cls._fields})

    def to_data(self):
        return {k: getattr(self, k) for k in self._fields
                if getattr(self, k) is not None}

    def __eq__(self, other):
        return (type(self) is type(other) and
                self.to_data() == other.to_data())

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__,
                           ', '.join('%s=%r' % (k, getattr(self, k))
                                     for k in self._fields))


class BucketCreate(Model):
    """Body of a bucket creation request."""

    _fields = ('name', 'namespace', 'vpool', 'filesystem_enabled',
               'head_type', 'is_stale_allowed', 'is_encryption_enabled',
               'is_tso_read_only')

    @classmethod
    def from_parameters(cls, name, namespace, vpool, parameters):
        """Build the request from merged service instance parameters."""
        return cls(name=name, namespace=namespace, vpool=vpool,
                   filesystem_enabled=bool(
                       parameters.get(constants.FILE_ACCESSIBLE, False)),
                   head_type=parameters.get(constants.HEAD_TYPE),
                   is_stale_allowed=_flag(parameters,
                                          constants.STALE_ALLOWED),
                   is_encryption_enabled=_flag(parameters,
                                               constants.ENCRYPTED),
                   is_tso_read_only=_flag(parameters,
                                          constants.ACCESS_DURING_OUTAGE))


class BucketInfo(Model):
    """Bucket details as returned by the management API."""

    _fields = ('name', 'id', 'namespace', 'vpool', 'fs_access_enabled',
               'block_size', 'notification_size', 'default_retention',
               'created', 'softquota', 'owner')


class UserAcl(Model):
    """Permissions granted to one object user on a bucket."""

    _fields = ('user', 'permission')

    def __init__(self, user=None, permission=None):
        super(UserAcl, self).__init__(user=user,
                                      permission=list(permission or []))


class BucketAcl(Model):
    """Access control list of a bucket.

    Only the user entries are modelled, group entries are kept as raw data so
    they survive a read/update cycle.
    """

    _fields = ('bucket', 'namespace', 'user_acl', 'group_acl',
               'customgroup_acl')

    @classmethod
    def obj_from_data(cls, data):
        acl = data.get('acl') or {}
        return cls(bucket=data.get('bucket'),
                   namespace=data.get('namespace'),
                   user_acl=[UserAcl.obj_from_data(a)
                             for a in acl.get('user_acl') or []],
                   group_acl=acl.get('group_acl') or [],
                   customgroup_acl=acl.get('customgroup_acl') or [])

    def to_data(self):
        return {'bucket': self.bucket,
                'namespace': self.namespace,
                'acl': {'user_acl': [a.to_data() for a in self.user_acl],
                        'group_acl': self.group_acl,
                        'customgroup_acl': self.customgroup_acl}}

    @property
    def users(self):
        return [a.user for a in self.user_acl]


class BucketPolicy(Model):
    """S3 style bucket policy with a single allow statement."""

    _fields = ('version', 'id', 'sid', 'effect', 'principal', 'actions',
               'resources')

    @classmethod
    def allow_all(cls, principal, bucket):
        return cls(version=constants.POLICY_VERSION,
                   id=constants.POLICY_ID,
                   sid=constants.POLICY_STATEMENT_ID,
                   effect=constants.POLICY_EFFECT_ALLOW,
                   principal=principal,
                   actions=[constants.POLICY_ALL_ACTIONS],
                   resources=[bucket])

    def to_data(self):
        return {'Version': self.version,
                'Id': self.id,
                'Statement': [{'Sid': self.sid,
                               'Effect': self.effect,
                               'Principal': self.principal,
                               'Action': self.actions,
                               'Resource': self.resources}]}


class NamespaceCreate(Model):
    """Body of a namespace creation request."""

    _fields = ('namespace', 'default_data_services_vpool',
               'namespace_admins', 'is_encryption_enabled',
               'is_stale_allowed', 'compliance_enabled',
               'default_bucket_block_size')

    @classmethod
    def from_parameters(cls, name, vpool, parameters):
        return cls(namespace=name, default_data_services_vpool=vpool,
                   **_namespace_settings(parameters))


class NamespaceUpdate(Model):
    """Body of a namespace update request."""

    _fields = ('namespace_admins', 'is_encryption_enabled',
               'is_stale_allowed', 'compliance_enabled',
               'default_bucket_block_size')

    @classmethod
    def from_parameters(cls, parameters):
        return cls(**_namespace_settings(parameters))


def _namespace_settings(parameters):
    return {
        'namespace_admins': parameters.get(constants.DOMAIN_GROUP_ADMINS),
        'is_encryption_enabled': _flag(parameters, constants.ENCRYPTED),
        'is_stale_allowed': _flag(parameters,
                                  constants.ACCESS_DURING_OUTAGE),
        'compliance_enabled': _flag(parameters,
                                    constants.COMPLIANCE_ENABLED),
        'default_bucket_block_size': parameters.get(
            constants.DEFAULT_BUCKET_BLOCK_SIZE),
    }


class NamespaceQuota(Model):
    """Namespace quota, sizes in GB."""

    _fields = ('namespace', 'blockSize', 'notificationSize')

    def __init__(self, namespace=None, block_size=None,
                 notification_size=None, **kwargs):
        kwargs.setdefault('blockSize', block_size)
        kwargs.setdefault('notificationSize', notification_size)
        super(NamespaceQuota, self).__init__(namespace=namespace, **kwargs)

    @property
    def block_size(self):
        return self.blockSize

    @property
    def notification_size(self):
        return self.notificationSize


class RetentionClass(Model):
    _fields = ('name', 'period')


class UserSecretKey(Model):
    _fields = ('secret_key', 'key_timestamp', 'key_expiry_timestamp')

    @classmethod
    def list_from_data(cls, data):
        """Secret keys from a user secret listing.

        The management API reports up to two keys as numbered fields.
        """
        keys = []
        for n in (1, 2):
            secret = data.get('secret_key_%d' % n)
            if secret:
                keys.append(cls(
                    secret_key=secret,
                    key_timestamp=data.get('key_timestamp_%d' % n),
                    key_expiry_timestamp=data.get(
                        'key_expiry_timestamp_%d' % n)))
        return keys


class BaseUrl(Model):
    _fields = ('id', 'name', 'link')


class BaseUrlInfo(Model):
    _fields = ('id', 'name', 'baseurl', 'namespace_in_host')

    def namespace_url(self, namespace, use_ssl=False):
        """Object endpoint URL of a namespace on this base URL."""
        protocol = 'https' if use_ssl else 'http'
        port = (constants.OBJECT_SSL_PORT if use_ssl
                else constants.OBJECT_PORT)
        if self.namespace_in_host:
            return '%s://%s.%s:%d' % (protocol, namespace, self.baseurl, port)
        return '%s://%s:%d' % (protocol, self.baseurl, port)


class ReplicationGroup(Model):
    _fields = ('id', 'name', 'description')


class NFSExport(Model):
    _fields = ('id', 'path', 'export_configs')
