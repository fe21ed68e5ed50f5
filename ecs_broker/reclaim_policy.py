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
import enum

from ecs_broker import constants


class ReclaimPolicy(enum.Enum):
    """What to do with the stored data when an instance is deleted."""
    Fail = 'Fail'
    Detach = 'Detach'
    Delete = 'Delete'
    Retain = 'Retain'


DEFAULT_RECLAIM_POLICY = ReclaimPolicy.Fail


class Failure(enum.Enum):
    MALFORMED_POLICY = 'malformed-policy'
    MALFORMED_ALLOWED = 'malformed-allowed-policies'
    REJECTED = 'rejected'


class PolicyCheck(collections.namedtuple('PolicyCheck',
                                         'policy allowed failure value')):
    """Result of a reclaim policy validation.

    `value` holds the raw requested policy so failures can be reported.
    """

    @property
    def ok(self):
        return self.failure is None


def parse(value):
    """Parse a reclaim policy name, raises ValueError if it is unknown."""
    if isinstance(value, ReclaimPolicy):
        return value
    try:
        return ReclaimPolicy[value]
    except (KeyError, TypeError):
        raise ValueError('Unknown reclaim policy: %s' % (value,))


def get_reclaim_policy(parameters, default=DEFAULT_RECLAIM_POLICY):
    value = (parameters or {}).get(constants.RECLAIM_POLICY)
    if value is None:
        return default
    return parse(value)


def get_allowed_reclaim_policies(parameters):
    """Allowed policies from a list or a comma separated string.

    All policies are allowed when the parameter is not present.
    """
    value = (parameters or {}).get(constants.ALLOWED_RECLAIM_POLICIES)
    if value is None:
        return list(ReclaimPolicy)
    if isinstance(value, str):
        value = [v.strip() for v in value.split(',') if v.strip()]
    return [parse(v) for v in value]


def validate(parameters, default=DEFAULT_RECLAIM_POLICY):
    """Validate requested reclaim policy against the allowed ones.

    :param parameters: Merged service instance parameters.
    :type parameters: dict
    :param default: Policy used when the parameters don't select one.
    :type default: ReclaimPolicy
    :returns: Validation result, check `ok` before proceeding.
    :rtype: PolicyCheck
    """
    value = (parameters or {}).get(constants.RECLAIM_POLICY, default)
    if isinstance(value, ReclaimPolicy):
        value = value.value

    try:
        policy = get_reclaim_policy(parameters, default)
    except ValueError:
        return PolicyCheck(None, None, Failure.MALFORMED_POLICY, value)

    try:
        allowed = get_allowed_reclaim_policies(parameters)
    except (ValueError, TypeError):
        return PolicyCheck(policy, None, Failure.MALFORMED_ALLOWED, value)

    if policy not in allowed:
        return PolicyCheck(policy, allowed, Failure.REJECTED, value)
    return PolicyCheck(policy, allowed, None, value)


def is_policy_allowed(parameters, default=DEFAULT_RECLAIM_POLICY):
    return validate(parameters, default).ok
