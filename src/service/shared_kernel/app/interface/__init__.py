"""Shared Kernel Interfaces"""

from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue
from src.service.shared_kernel.app.interface.i_mail_publisher import IMailPublisher
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService

__all__ = ['IJobQueue', 'IMailPublisher', 'IPermissionService']
