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

from ecs_broker.management import models
from ecs_broker.management import path


def list(connection):
    r = connection.request(path='/object/baseurl', parse=True)
    return [models.BaseUrl.obj_from_data(b)
            for b in r.json().get('base_url') or []]


def get(connection, base_url_id):
    r = connection.request(path=path('/object/baseurl/%s', base_url_id),
                           parse=True)
    return models.BaseUrlInfo.obj_from_data(r.json())
