"""Parameter-Set Selector: pick one overload of a command by ordinal."""
from cmdmanifest.errors import InvalidParameterSetError
from cmdmanifest.registry.descriptors import CommandDescriptor, ParameterSet


def select_parameter_set(command: CommandDescriptor, index: int = 0) -> ParameterSet:
    available = len(command.parameter_sets)
    if index < 0 or index >= available:
        raise InvalidParameterSetError(command.name, index, available)
    return command.parameter_sets[index]
