#!/usr/bin/env python3
"""Campaign conflict service main configuration

Combines all sub-configs (logging, infrastructure, conflict thresholds).
"""
import os
from dataclasses import dataclass, field

from .conflict_config import ConflictConfig
from .infra_config import InfraConfig
from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class ServiceConfig:
    """Main service configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False
    service_name: str = "campaign_conflict_service"

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    conflict: ConflictConfig = field(default_factory=ConflictConfig)

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            service_name=os.getenv("SERVICE_NAME", "campaign_conflict_service"),

            # Load sub-configs
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            conflict=ConflictConfig.from_env(),
        )
