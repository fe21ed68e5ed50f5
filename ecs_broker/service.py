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

from concurrent import futures
import logging

from ecs_broker import common
from ecs_broker import config
from ecs_broker import connection
from ecs_broker import constants
from ecs_broker import errors
from ecs_broker.management import base_url as base_url_action
from ecs_broker.management import bucket as bucket_action
from ecs_broker.management import models
from ecs_broker.management import namespace as namespace_action
from ecs_broker.management import nfs_export as nfs_export_action
from ecs_broker.management import object_user as user_action
from ecs_broker import parameters as params
from ecs_broker import reclaim_policy
from ecs_broker import resolver
from ecs_broker import wipe

LOG = logging.getLogger(__name__)

SERVICE_NOT_FOUND = 'No service matching service id: '
INVALID_RECLAIM_POLICY = 'Invalid reclaim-policy: '
INVALID_ALLOWED_RECLAIM_POLICIES = 'Invalid reclaim-policies: '
REJECT_RECLAIM_POLICY = 'Reclaim Policy is not allowed: '
INVALID_QUOTA = 'Invalid quota: '
INVALID_RETENTION = 'Invalid retention: '


class EcsService(object):
    """Provisioning of buckets, namespaces and users on ECS.

    Every public operation translates a broker request into a sequence of
    management API calls.  Calls are issued one after the other and nothing
    is rolled back when one of them fails, so a failed operation may leave a
    partially configured resource behind.

    All instance ids are prefixed with the configured prefix before being
    sent to the management API.

    `initialize` must succeed before any other operation is used.
    """

    def __init__(self, connection, config, catalog, bucket_wipe_factory=None):
        """Initialize the service.

        :param connection: Management API connection.
        :type connection: ecs_broker.connection.Connection
        :param config: Broker settings.
        :type config: ecs_broker.config.BrokerConfig
        :param catalog: Service definitions offered by the broker.
        :type catalog: ecs_broker.config.Catalog
        :param bucket_wipe_factory: Builder of bucket wipe tools.
        :type bucket_wipe_factory: ecs_broker.wipe.BucketWipeFactory
        """
        self.connection = connection
        self.config = config
        self.catalog = catalog
        self.bucket_wipe_factory = (bucket_wipe_factory or
                                    wipe.BucketWipeFactory())
        self.state = None
        self._bucket_wipe = None

    # Startup

    def initialize(self):
        """Resolve the startup state and prepare the broker repository.

        Any failure is fatal, the service is left uninitialized.

        :returns: Resolved state shared by all requests.
        :rtype: ecs_broker.resolver.ServiceState
        """
        LOG.info('Initializing ECS service with management endpoint %s, '
                 'base url %s', self.config.management_endpoint,
                 self.config.base_url)
        try:
            self.state = resolver.resolve(self.connection, self.config)
            secret = self._prepare_repository()
            self.state = self.state._replace(repository_secret=secret)
            self._prepare_bucket_wipe()
        except errors.Error as exc:
            LOG.error('Failed to initialize ECS service: %s', exc)
            self.state = None
            raise errors.ServiceBroker(cause=exc) from exc
        except Exception:
            LOG.exception('Unexpected error initializing ECS service')
            self.state = None
            raise
        return self.state

    def _prepare_repository(self):
        bucket_name = self.config.repository_bucket
        user_name = self.config.repository_user

        if not self.bucket_exists(bucket_name):
            LOG.info("Preparing repository bucket '%s'",
                     self.prefix(bucket_name))
            if self.config.repository_service_id is None:
                service = self.catalog.repository_service
            else:
                service = self.lookup_service_definition(
                    self.config.repository_service_id)

            if self.config.repository_plan_id is None:
                plan = service.repository_plan
            else:
                plan = service.find_plan(self.config.repository_plan_id)

            self.create_bucket(bucket_name, service, plan, None)

        if not self.user_exists(user_name):
            LOG.info("Creating user to access repository: '%s'", user_name)
            secret_key = self.create_user(user_name)
            self.add_user_to_bucket(bucket_name, user_name)
            return secret_key.secret_key

        return self._get_user_secret(user_name)

    def _prepare_bucket_wipe(self):
        self._bucket_wipe = self.bucket_wipe_factory.get_bucket_wipe(
            self.state.repository_endpoint,
            self.prefix(self.config.repository_user),
            self.state.repository_secret)

    @property
    def _state(self):
        if self.state is None:
            raise errors.ServiceBroker('ECS service is not initialized')
        return self.state

    @property
    def object_endpoint(self):
        return self._state.object_endpoint

    @property
    def replication_group_id(self):
        return self._state.replication_group_id

    @property
    def repository_secret(self):
        return self._state.repository_secret

    @property
    def nfs_mount_host(self):
        return self.config.nfs_mount_host

    def prefix(self, name):
        return self.config.prefix + name

    def lookup_service_definition(self, service_id):
        service = self.catalog.find_service_definition(service_id)
        if service is None:
            raise errors.ServiceBroker(SERVICE_NOT_FOUND + str(service_id))
        return service

    def _check_reclaim_policy(self, parameters):
        check = reclaim_policy.validate(parameters,
                                        self._state.default_reclaim_policy)
        if check.failure is reclaim_policy.Failure.MALFORMED_POLICY:
            message = INVALID_RECLAIM_POLICY
        elif check.failure is reclaim_policy.Failure.MALFORMED_ALLOWED:
            message = INVALID_ALLOWED_RECLAIM_POLICIES
        elif check.failure is reclaim_policy.Failure.REJECTED:
            message = REJECT_RECLAIM_POLICY
        else:
            return check.policy
        raise errors.ReclaimPolicyError(message + str(check.value),
                                        check.failure)

    # Buckets

    @common.broker_errors
    def bucket_exists(self, bucket_id):
        return bucket_action.exists(self.connection, self.prefix(bucket_id),
                                    self.config.namespace)

    @common.broker_errors
    def get_bucket_file_enabled(self, bucket_id):
        info = bucket_action.get(self.connection, self.prefix(bucket_id),
                                 self.config.namespace)
        return bool(info.fs_access_enabled)

    @common.broker_errors
    def create_bucket(self, bucket_id, service, plan, parameters=None):
        """Create a bucket for a service instance.

        Plan and service settings are forced on the request parameters, and
        quota and default retention are applied after the bucket is created.

        :param bucket_id: Service instance id, not prefixed.
        :type bucket_id: String
        :param service: Service definition of the instance.
        :type service: ecs_broker.config.ServiceDefinition
        :param plan: Plan of the instance.
        :type plan: ecs_broker.config.Plan
        :param parameters: Request parameters, consumed by the call.
        :type parameters: dict or NoneType
        :returns: Effective parameters of the instance.
        :rtype: dict
        """
        name = self.prefix(bucket_id)
        namespace = self.config.namespace
        LOG.info("Creating bucket '%s'", name)
        try:
            if self.bucket_exists(bucket_id):
                raise errors.InstanceExists(bucket_id, service.id)

            parameters = params.merge_service_settings(parameters, plan,
                                                       service)
            _check_settings(parameters)
            self._check_reclaim_policy(parameters)

            bucket_action.create(self.connection,
                                 models.BucketCreate.from_parameters(
                                     name, namespace,
                                     self._state.replication_group_id,
                                     parameters))

            quota = parameters.get(constants.QUOTA)
            if quota is not None:
                LOG.info("Applying bucket quota on '%s': limit %s, warn %s",
                         name, quota.get(constants.LIMIT),
                         quota.get(constants.WARN))
                bucket_action.create_quota(self.connection, name, namespace,
                                           quota.get(constants.LIMIT),
                                           quota.get(constants.WARN))

            retention = parameters.get(constants.DEFAULT_RETENTION)
            if retention is not None:
                LOG.info("Applying bucket retention policy on '%s': %s",
                         name, retention)
                bucket_action.update_retention(self.connection, namespace,
                                               name, retention)
        except errors.Error:
            LOG.error('Failed to create bucket %s', bucket_id, exc_info=True)
            raise
        return parameters

    @common.broker_errors
    def change_bucket_plan(self, bucket_id, service, plan, parameters=None):
        """Apply a new plan to a bucket.

        The quota is always replaced as a whole, and removed when neither a
        limit nor a warning is set.
        """
        parameters = params.merge_service_settings(parameters, plan, service)
        _check_settings(parameters)
        self._check_reclaim_policy(parameters)

        name = self.prefix(bucket_id)
        quota = parameters.get(constants.QUOTA) or {}
        limit = _quota_value(quota, constants.LIMIT)
        warn = _quota_value(quota, constants.WARN)

        if limit == constants.UNSET and warn == constants.UNSET:
            LOG.info("Removing quota from bucket '%s'", name)
            parameters.pop(constants.QUOTA, None)
            bucket_action.delete_quota(self.connection, name,
                                       self.config.namespace)
        else:
            LOG.info("Applying bucket quota on '%s': limit %s, warn %s",
                     name, limit, warn)
            bucket_action.create_quota(self.connection, name,
                                       self.config.namespace, limit, warn)
        return parameters

    @common.broker_errors
    def delete_bucket(self, bucket_id):
        LOG.info("Deleting bucket '%s'", self.prefix(bucket_id))
        bucket_action.delete(self.connection, self.prefix(bucket_id),
                             self.config.namespace)

    @common.broker_errors
    def wipe_and_delete_bucket(self, bucket_id):
        """Delete every object in a bucket and then the bucket itself.

        Returns as soon as the wipe has started.  The returned future holds
        None once the bucket is gone, or the error that stopped the deletion.
        The bucket is kept when any object could not be deleted.

        :rtype: concurrent.futures.Future
        """
        if self._bucket_wipe is None:
            raise errors.ServiceBroker('Bucket wipe is not available, ECS '
                                       'service is not initialized')

        self.add_user_to_bucket(bucket_id, self.config.repository_user)

        LOG.info("Started wipe of bucket '%s'", self.prefix(bucket_id))
        result = self.bucket_wipe_factory.new_bucket_wipe_result()
        self._bucket_wipe.delete_all_objects(self.prefix(bucket_id), '',
                                             result)

        done = futures.Future()

        def completed(_):
            try:
                self._bucket_wipe_completed(result, bucket_id)
            except Exception as exc:
                done.set_exception(exc)
            else:
                done.set_result(None)

        result.completed_future.add_done_callback(completed)
        return done

    def _bucket_wipe_completed(self, result, bucket_id):
        """Delete the bucket once its wipe has finished.

        Runs once per wipe, on the thread that finished the wipe.
        """
        name = self.prefix(bucket_id)
        wipe_errors = result.errors
        if wipe_errors:
            LOG.warning('Bucket wipe FAILED, deleted %s objects. Leaving '
                        'bucket %s', result.deleted_objects, name)
            for error in wipe_errors:
                LOG.warning('BucketWipe %s error: %s', name, error)
            raise errors.BucketWipeFailed(name, wipe_errors)

        LOG.info('Bucket wipe succeeded, deleted %s objects, Deleting '
                 'bucket %s', result.deleted_objects, name)
        try:
            bucket_action.delete(self.connection, name,
                                 self.config.namespace)
        except errors.ManagementClient as exc:
            LOG.error('Error deleting bucket %s', name, exc_info=True)
            raise errors.ServiceBroker(
                'Error Deleting Bucket %s %s' % (name, exc),
                cause=exc) from exc

    @common.broker_errors
    def add_user_to_bucket(self, bucket_id, username, permissions=None):
        """Grant a user access to a bucket.

        Buckets without file system access also get a policy allowing the
        user every S3 action, replacing any previous policy.

        :param permissions: Permissions to grant, full control by default.
        :type permissions: list of strings
        """
        if permissions is None:
            permissions = [constants.PERMISSION_FULL_CONTROL]
        name = self.prefix(bucket_id)
        user = self.prefix(username)
        LOG.info("Adding user '%s' to bucket '%s' with %s access", user,
                 name, permissions)

        acl = bucket_action.get_acl(self.connection, name,
                                    self.config.namespace)
        acl.user_acl.append(models.UserAcl(user, permissions))
        bucket_action.update_acl(self.connection, name, acl)

        if not self.get_bucket_file_enabled(bucket_id):
            bucket_action.update_policy(
                self.connection, name,
                models.BucketPolicy.allow_all(user, name),
                self.config.namespace)

    @common.broker_errors
    def remove_user_from_bucket(self, bucket_id, username):
        name = self.prefix(bucket_id)
        user = self.prefix(username)
        LOG.info("Removing user '%s' from bucket '%s'", user, name)

        acl = bucket_action.get_acl(self.connection, name,
                                    self.config.namespace)
        acl.user_acl = [a for a in acl.user_acl if a.user != user]
        bucket_action.update_acl(self.connection, name, acl)

    @common.broker_errors
    def add_export_to_bucket(self, instance_id, relative_export_path=None):
        """Make sure an NFS export exists for a path in the bucket.

        :returns: Absolute export path.
        :rtype: String
        """
        export_path = '/%s/%s/%s' % (self.config.namespace,
                                     self.prefix(instance_id),
                                     relative_export_path or '')
        if nfs_export_action.list(self.connection, export_path) is None:
            LOG.info("Creating NFS export '%s'", export_path)
            nfs_export_action.create(self.connection, export_path)
        return export_path

    # Users

    @common.broker_errors
    def create_user(self, user_id, namespace=None):
        """Create an object user and its secret key.

        :param namespace: Instance id of the namespace the user belongs to,
                          the broker namespace if not given.
        :returns: The first secret key of the user.
        :rtype: ecs_broker.management.models.UserSecretKey
        """
        namespace = (self.prefix(namespace) if namespace
                     else self.config.namespace)
        user = self.prefix(user_id)

        LOG.info("Creating user '%s' in namespace '%s'", user, namespace)
        user_action.create(self.connection, user, namespace)

        LOG.info("Creating secret for user '%s'", user)
        user_action.create_secret(self.connection, user)
        return user_action.list_secrets(self.connection, user)[0]

    @common.broker_errors
    def user_exists(self, user_id):
        return user_action.exists(self.connection, self.prefix(user_id),
                                  self.config.namespace)

    @common.broker_errors
    def delete_user(self, user_id):
        user = self.prefix(user_id)
        LOG.info("Deleting user '%s'", user)
        user_action.delete(self.connection, user)

    @common.broker_errors
    def create_user_map(self, user_id, uid):
        user_action.create_map(self.connection, self.prefix(user_id), uid,
                               self.config.namespace)

    @common.broker_errors
    def delete_user_map(self, user_id, uid):
        user_action.delete_map(self.connection, self.prefix(user_id), uid,
                               self.config.namespace)

    def _get_user_secret(self, user_id):
        secrets = user_action.list_secrets(self.connection,
                                           self.prefix(user_id))
        if not secrets:
            raise errors.ServiceBroker('User %s has no secret key' %
                                       self.prefix(user_id))
        return secrets[0].secret_key

    # Namespaces

    @common.broker_errors
    def namespace_exists(self, namespace_id):
        return namespace_action.exists(self.connection,
                                       self.prefix(namespace_id))

    @common.broker_errors
    def create_namespace(self, namespace_id, service, plan, parameters=None):
        """Create a namespace for a service instance.

        Quota and retention classes given in the effective parameters are
        applied after the namespace is created.

        :returns: Effective parameters of the instance.
        :rtype: dict
        """
        if self.namespace_exists(namespace_id):
            raise errors.InstanceExists(namespace_id, service.id)

        parameters = params.merge_service_settings(parameters, plan, service)
        _check_settings(parameters)
        name = self.prefix(namespace_id)

        LOG.info("Creating namespace '%s'", name)
        namespace_action.create(self.connection,
                                models.NamespaceCreate.from_parameters(
                                    name, self._state.replication_group_id,
                                    parameters))

        quota = parameters.get(constants.QUOTA)
        if quota is not None:
            quota_param = models.NamespaceQuota(name,
                                                quota.get(constants.LIMIT),
                                                quota.get(constants.WARN))
            LOG.info('Applying quota to namespace %s: block size %s, '
                     'notification limit %s', name, quota_param.block_size,
                     quota_param.notification_size)
            namespace_action.create_quota(self.connection, name, quota_param)

        retention = parameters.get(constants.RETENTION)
        if retention:
            for class_name, period in retention.items():
                LOG.info('Adding retention class to namespace %s: %s = %s',
                         name, class_name, period)
                namespace_action.create_retention(self.connection, name,
                                                  class_name, period)
        return parameters

    @common.broker_errors
    def change_namespace_plan(self, namespace_id, service, plan,
                              parameters=None):
        """Apply a new plan to a namespace.

        Each retention class is reconciled on its own: a period of -1 removes
        an existing class, other periods update or create it.  Classes already
        processed are not rolled back if a later one fails.
        """
        name = self.prefix(namespace_id)
        LOG.info("Changing namespace '%s' plan to '%s'(%s)", name, plan.name,
                 plan.id)

        parameters = params.merge_service_settings(parameters, plan, service)
        _check_settings(parameters)
        namespace_action.update(
            self.connection, name,
            models.NamespaceUpdate.from_parameters(parameters))

        retention = parameters.get(constants.RETENTION) or {}
        for class_name, period in list(retention.items()):
            exists = namespace_action.retention_exists(self.connection, name,
                                                       class_name)
            if period == constants.UNSET:
                if not exists:
                    LOG.info("Retention class '%s' not found on namespace "
                             "'%s', nothing to remove", class_name, name)
                    continue
                LOG.info("Removing retention class '%s' from namespace "
                         "'%s'", class_name, name)
                namespace_action.delete_retention(self.connection, name,
                                                  class_name)
                parameters.pop(constants.RETENTION, None)
            elif exists:
                LOG.info("Updating retention class '%s' on namespace '%s' to "
                         "'%s'", class_name, name, period)
                namespace_action.update_retention(self.connection, name,
                                                  class_name, period)
            else:
                LOG.info("Setting retention class '%s' on namespace '%s' to "
                         "'%s'", class_name, name, period)
                namespace_action.create_retention(self.connection, name,
                                                  class_name, period)
        return parameters

    @common.broker_errors
    def delete_namespace(self, namespace_id):
        LOG.info("Deleting namespace '%s'", self.prefix(namespace_id))
        namespace_action.delete(self.connection, self.prefix(namespace_id))

    @common.broker_errors
    def get_namespace_url(self, namespace, parameters, service_settings=None):
        """Object endpoint URL of a namespace.

        Service settings are forced on the parameters, which may select the
        base URL by name (`base-url`) and SSL (`use-ssl`).
        """
        parameters = params.merge_settings(dict(parameters or {}),
                                           service_settings)
        base_url = parameters.get(constants.BASE_URL, self._state.base_url)
        use_ssl = bool(parameters.get(constants.USE_SSL, False))

        url = resolver.find_base_url(
            base_url_action.list(self.connection), base_url)
        if base_url is None or url is None:
            raise errors.ServiceBroker('Failed to configure namespace - base '
                                       'URL not found: %s' % base_url)
        info = base_url_action.get(self.connection, url.id)
        return info.namespace_url(namespace, use_ssl)


def _check_settings(parameters):
    """Normalize quota and retention parameters to integers.

    Runs before any management call, bad values raise ServiceBroker.
    """
    quota = parameters.get(constants.QUOTA)
    if quota is not None:
        if not isinstance(quota, dict):
            raise errors.ServiceBroker(INVALID_QUOTA + repr(quota))
        quota = dict(quota)
        for key in (constants.LIMIT, constants.WARN):
            if quota.get(key) is not None:
                quota[key] = _integer(quota[key], INVALID_QUOTA)
        parameters[constants.QUOTA] = quota

    retention = parameters.get(constants.DEFAULT_RETENTION)
    if retention is not None:
        parameters[constants.DEFAULT_RETENTION] = _integer(retention,
                                                           INVALID_RETENTION)

    classes = parameters.get(constants.RETENTION)
    if classes is not None:
        if not isinstance(classes, dict):
            raise errors.ServiceBroker(INVALID_RETENTION + repr(classes))
        parameters[constants.RETENTION] = {
            name: _integer(period, INVALID_RETENTION)
            for name, period in classes.items()}
    return parameters


def _integer(value, message):
    if isinstance(value, bool):
        raise errors.ServiceBroker(message + repr(value))
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise errors.ServiceBroker(message + repr(value), cause=exc) from exc


def _quota_value(quota, key):
    value = quota.get(key)
    return constants.UNSET if value is None else value


def from_config_file(file_name, bucket_wipe_factory=None):
    """Build and initialize the service from a YAML configuration file."""
    broker_config, catalog = config.load(file_name)
    conn = connection.Connection(broker_config.management_endpoint,
                                 broker_config.username,
                                 broker_config.password,
                                 verify_ssl=broker_config.verify_ssl)
    service = EcsService(conn, broker_config, catalog, bucket_wipe_factory)
    service.initialize()
    return service
