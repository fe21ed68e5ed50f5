# -*- coding: utf-8 -*-

"""Cloud Foundry service broker provisioning on Dell EMC ECS."""

from ecs_broker.common import RetryParams  # noqa
from ecs_broker.config import BrokerConfig, Catalog  # noqa
from ecs_broker.connection import Connection  # noqa
from ecs_broker.service import EcsService  # noqa


__version__ = '0.1.0'
