"""
SQLite-backed command registry.

Descriptors are persisted as CommandRecord -> ParameterSetRecord ->
ParameterRecord rows; aliases live in CommandAlias. The registry reads
through a caller-owned Session and never commits on lookups.
"""
from typing import Dict, List, Optional
from sqlmodel import Session, select
from cmdmanifest.errors import RegistrationError
from cmdmanifest.logging import logger
from cmdmanifest.models.alias import CommandAlias
from cmdmanifest.models.command import CommandRecord, ParameterRecord, ParameterSetRecord
from cmdmanifest.registry.descriptors import (
    CommandDescriptor,
    CommandHelp,
    ParameterDescriptor,
    ParameterSet,
)


def _to_descriptor(record: CommandRecord) -> CommandDescriptor:
    sets = []
    param_help: Dict[str, str] = {}
    for ps in record.parameter_sets:
        params = []
        for p in ps.parameters:
            params.append(ParameterDescriptor(name=p.name, type_name=p.type_name, mandatory=p.mandatory))
            if p.help_text is not None:
                param_help.setdefault(p.name, p.help_text)
        sets.append(ParameterSet(name=ps.name, parameters=tuple(params)))
    return CommandDescriptor(
        name=record.name,
        parameter_sets=tuple(sets),
        help=CommandHelp(summary=record.summary, description=record.description, parameters=param_help),
    )


def save_command(session: Session, descriptor: CommandDescriptor) -> CommandRecord:
    """Persist a descriptor, replacing any command previously stored under the same name."""
    clash = session.exec(select(CommandAlias).where(CommandAlias.alias == descriptor.name)).first()
    if clash:
        raise RegistrationError(f"Name '{descriptor.name}' is already registered as an alias")

    existing = session.exec(select(CommandRecord).where(CommandRecord.name == descriptor.name)).first()
    if existing:
        logger.info("Replacing stored command", extra={"command": descriptor.name})
        session.delete(existing)
        session.flush()

    record = CommandRecord(
        name=descriptor.name,
        summary=descriptor.help.summary or "",
        description=descriptor.help.description,
    )
    for ordinal, ps in enumerate(descriptor.parameter_sets):
        set_record = ParameterSetRecord(ordinal=ordinal, name=ps.name)
        set_record.parameters = [
            ParameterRecord(
                position=position,
                name=p.name,
                type_name=p.type_name,
                mandatory=p.mandatory,
                help_text=descriptor.help.parameters.get(p.name),
            )
            for position, p in enumerate(ps.parameters)
        ]
        record.parameter_sets.append(set_record)

    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def save_alias(session: Session, alias: str, target: str) -> CommandAlias:
    if not alias or not target:
        raise RegistrationError("Alias and target must be non-empty strings")
    if session.exec(select(CommandRecord).where(CommandRecord.name == alias)).first():
        raise RegistrationError(f"Name '{alias}' is already registered as a command")

    row = session.exec(select(CommandAlias).where(CommandAlias.alias == alias)).first()
    if row:
        row.target = target
    else:
        row = CommandAlias(alias=alias, target=target)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


class SqlCommandRegistry:
    def __init__(self, session: Session):
        self.session = session

    def get_command(self, name: str) -> Optional[CommandDescriptor]:
        record = self.session.exec(select(CommandRecord).where(CommandRecord.name == name)).first()
        if not record:
            return None
        return _to_descriptor(record)

    def get_alias_target(self, name: str) -> Optional[str]:
        row = self.session.exec(select(CommandAlias).where(CommandAlias.alias == name)).first()
        return row.target if row else None

    def list_commands(self) -> List[str]:
        return list(self.session.exec(select(CommandRecord.name).order_by(CommandRecord.name)).all())

    def list_aliases(self) -> Dict[str, str]:
        rows = self.session.exec(select(CommandAlias).order_by(CommandAlias.alias)).all()
        return {r.alias: r.target for r in rows}
