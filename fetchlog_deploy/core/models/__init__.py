"""
Domain models — Pydantic types for the orchestrator.

All models are re-exported here for convenient access:

    from fetchlog_deploy.core.models import DeployConfig, ServiceDescriptor, ServiceStatus
"""

from fetchlog_deploy.core.models.command import CommandResult
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.descriptor import ServiceDescriptor
from fetchlog_deploy.core.models.environment import Environment
from fetchlog_deploy.core.models.service import LifecycleState, ServiceStatus, classify

__all__ = [
    # command.py
    "CommandResult",
    # config.py
    "DeployConfig",
    # descriptor.py
    "ServiceDescriptor",
    # environment.py
    "Environment",
    # service.py
    "LifecycleState",
    "ServiceStatus",
    "classify",
]
