"""
Service context extraction for distributed logging.

Identifies the running process (api or worker) in every log line so that
logs from the HTTP server and the arq worker can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'unknown')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostname in k8s/docker, PID for local development
    instance_id = os.getenv('HOSTNAME', '') or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id[:12]}'
