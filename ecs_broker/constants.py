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

# SERVICE PARAMETERS

#: Quota mapping with LIMIT and WARN entries, in GB.
QUOTA = 'quota'
LIMIT = 'limit'
WARN = 'warn'

#: Namespace retention classes, mapping of class name to period in seconds.
#: A period of -1 removes the class.
RETENTION = 'retention'

#: Bucket default retention period in seconds.
DEFAULT_RETENTION = 'default-retention'

RECLAIM_POLICY = 'reclaim-policy'
ALLOWED_RECLAIM_POLICIES = 'allowed-reclaim-policies'

#: Name of the base URL used to build the namespace object endpoint.
BASE_URL = 'base-url'
USE_SSL = 'use-ssl'

#: Enables file system (NFS/HDFS) access on new buckets.
FILE_ACCESSIBLE = 'file-accessible'
HEAD_TYPE = 'head-type'
ENCRYPTED = 'encrypted'
ACCESS_DURING_OUTAGE = 'access-during-outage'
STALE_ALLOWED = 'stale-allowed'
COMPLIANCE_ENABLED = 'compliance-enabled'
DOMAIN_GROUP_ADMINS = 'domain-group-admins'
DEFAULT_BUCKET_BLOCK_SIZE = 'default-bucket-block-size'

#: Value used for unset quota limits and retention periods.
UNSET = -1


# BUCKET PERMISSIONS

PERMISSION_FULL_CONTROL = 'full_control'


# BUCKET POLICY

POLICY_VERSION = '2012-10-17'
POLICY_ID = 'DefaultPCFBucketPolicy'
POLICY_STATEMENT_ID = 'DefaultAllowTotalAccess'
POLICY_EFFECT_ALLOW = 'Allow'
POLICY_ALL_ACTIONS = 's3:*'


# BASE URLS

#: Base URL picked when none is configured.
DEFAULT_BASE_URL_NAME = 'DefaultBaseUrl'
OBJECT_PORT = 9020
OBJECT_SSL_PORT = 9021
