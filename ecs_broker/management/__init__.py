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

"""Resource actions on the ECS management API.

Every module exposes plain functions taking a `Connection` as first argument,
one per remote operation.
"""

from requests.utils import quote


def path(template, *args):
    """Build a resource path quoting every argument."""
    return template % tuple(quote(str(a), safe='') for a in args)
