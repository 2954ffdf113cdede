"""
Service context for log lines.

Identifies which process produced a log line when several instances of the
API (or the expiry sweeper) write to the same sink.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'eventdesk')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostname when running under an orchestrator, PID otherwise
    instance_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id}'
