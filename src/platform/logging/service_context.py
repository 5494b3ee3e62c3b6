"""
Service context for log lines.

Identifies which ShopSync process wrote a log line when several shops
and listeners share one log collector.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'shopsync')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    # Hosts without a process id of their own (e.g. emulators) can pin one
    instance_id = os.getenv('SERVICE_INSTANCE_ID') or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance_id}'
