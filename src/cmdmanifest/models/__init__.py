from cmdmanifest.models.command import CommandRecord, ParameterSetRecord, ParameterRecord
from cmdmanifest.models.alias import CommandAlias

__all__ = [
    "CommandRecord", "ParameterSetRecord", "ParameterRecord",
    "CommandAlias",
]
