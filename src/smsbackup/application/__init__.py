"""Application layer - conversion engine, ports and use cases."""

from smsbackup.application.conversion import ConversionPipeline
from smsbackup.application.use_cases.backup_sms import BackupSmsUseCase, BackupSummary
from smsbackup.application.use_cases.restore_sms import RestoreSmsUseCase

__all__ = [
    "ConversionPipeline",
    "BackupSmsUseCase",
    "BackupSummary",
    "RestoreSmsUseCase",
]
