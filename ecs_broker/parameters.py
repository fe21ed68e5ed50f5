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


def merge_settings(parameters, *settings):
    """Overwrite request parameters with administrator forced settings.

    Settings are applied in order, each one replacing whole values of the
    previous ones.  There is no deep merge.  The given parameters mapping is
    modified in place and returned; None gives a new dictionary.
    """
    if parameters is None:
        parameters = {}
    for setting in settings:
        if setting:
            parameters.update(setting)
    return parameters


def merge_service_settings(parameters, plan, service):
    """Apply plan and then service settings on request parameters."""
    return merge_settings(parameters, plan.service_settings,
                          service.service_settings)
