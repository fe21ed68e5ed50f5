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

from requests.utils import quote

from ecs_broker.management import models

_EXPORTS = '/object/nfs/exports'


def list(connection, export_path):
    """Exports defined on a path, None when there is none."""
    r = connection.request(
        path=_EXPORTS + '?path=' + quote(export_path, safe=''), parse=True)
    exports = r.json().get('exports')
    if not exports:
        return None
    return [models.NFSExport.obj_from_data(e) for e in exports]


def create(connection, export_path):
    connection.request(op='POST', path=_EXPORTS,
                       body={'path': export_path,
                             'export_configs': [{'hosts': ['*'],
                                                 'security': 'sys',
                                                 'permission': 'rw',
                                                 'root_squash': 'nobody'}]})
